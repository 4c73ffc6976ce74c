"""API tests for the application factory and container wiring."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from trends_api.core.container import get_admission_controller
from trends_api.domain.enums import AdmissionOutcome
from trends_api.domain.value_objects import RequestContext
from trends_api.main import create_app


@pytest.mark.api
class TestApplication:
    """Test create_app() with settings from the environment."""

    def test_health_endpoints(self, clear_singletons):
        """Test root and health endpoints respond without rate limiting."""
        with patch.dict(os.environ, {"ENVIRONMENT": "testing"}, clear=True):
            with TestClient(create_app()) as client:
                root = client.get("/")
                health = client.get("/health")

        assert root.status_code == 200
        assert root.json()["status"] == "operational"
        assert health.json() == {"status": "healthy"}
        assert "X-RateLimit-Limit" not in health.headers

    def test_blacklist_from_settings(self, clear_singletons):
        """Test the app starts with the configured blacklist applied."""
        env_values = {"ENVIRONMENT": "testing", "RATE_LIMIT_BLACKLIST": "198.51.100.9"}
        with patch.dict(os.environ, env_values, clear=True):
            with TestClient(create_app()) as client:
                response = client.get(
                    "/unknown", headers={"X-Forwarded-For": "198.51.100.9"}
                )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "IP_BLOCKED"


@pytest.mark.api
class TestContainer:
    """Test get_admission_controller() wiring."""

    def test_controller_is_singleton(self, clear_singletons):
        """Test the container returns one controller per process."""
        with patch.dict(os.environ, {"ENVIRONMENT": "testing"}, clear=True):
            assert get_admission_controller() is get_admission_controller()

    def test_production_preset_applied(self, clear_singletons):
        """Test production settings load the production preset."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True):
            controller = get_admission_controller()

        assert controller.config.global_policy.requests_per_second == 5.0

    def test_settings_whitelist_merged(self, clear_singletons):
        """Test RATE_LIMIT_WHITELIST extends the preset whitelist."""
        env_values = {"ENVIRONMENT": "testing", "RATE_LIMIT_WHITELIST": "10.1.1.1"}
        with patch.dict(os.environ, env_values, clear=True):
            controller = get_admission_controller()

        decision = controller.admit(RequestContext(ip="10.1.1.1", route="/api/v1/posts"))

        assert decision.outcome == AdmissionOutcome.WHITELISTED
