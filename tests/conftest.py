"""Pytest configuration shared by unit, integration and API tests.

Provides:
1. A controllable monotonic clock for token bucket arithmetic
2. A mock logger implementing LoggerProtocol
3. Small config builders so tests do not depend on preset values
4. Cache clearing for settings and container singletons
"""

import inspect

import pytest
from unittest.mock import MagicMock

from trends_api.core.config import get_settings
from trends_api.core.container import get_admission_controller, get_logger
from trends_api.domain.value_objects import RateLimiterConfig, RateLimitPolicy


class FakeClock:
    """Manually advanced monotonic clock.

    Usage:
        clock = FakeClock()
        bucket = TokenBucket(rate=2.0, capacity=3, clock=clock)
        clock.advance(0.5)
    """

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Create a fake monotonic clock."""
    return FakeClock()


@pytest.fixture
def mock_logger():
    """Create mock logger."""
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger


def make_policy(requests_per_second: float, burst: int) -> RateLimitPolicy:
    """Helper to build a RateLimitPolicy positionally."""
    return RateLimitPolicy(requests_per_second=requests_per_second, burst=burst)


def make_config(**overrides) -> RateLimiterConfig:
    """Helper to create a RateLimiterConfig for testing.

    Defaults:
        global 10/20, user default 5/10, login endpoint 2/5, admin role 50/100.

    Usage:
        config = make_config(blacklist={"198.51.100.9"})
    """
    values = {
        "global_policy": make_policy(10.0, 20),
        "user_default": make_policy(5.0, 10),
        "endpoint_policies": {"/api/v1/auth/login": make_policy(2.0, 5)},
        "role_policies": {"admin": make_policy(50.0, 100)},
    }
    values.update(overrides)
    return RateLimiterConfig(**values)


@pytest.fixture
def clear_singletons():
    """Rebuild settings and container singletons around a test."""
    get_settings.cache_clear()
    get_logger.cache_clear()
    get_admission_controller.cache_clear()
    yield
    get_settings.cache_clear()
    get_logger.cache_clear()
    get_admission_controller.cache_clear()


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real collaborators"
    )
    config.addinivalue_line("markers", "api: HTTP tests through the FastAPI app")
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
