"""Unit tests for AdmissionController.

Tests cover:
- Blacklist / whitelist short-circuits (blacklist checked first)
- Burst then deny, refill after elapsed time
- Precedence and key isolation
- Header values (limit, remaining, reset)
- Logging of denials and security events
- reset() Result handling and sweep()
"""

from datetime import datetime, timezone
from uuid import UUID

import pytest
from freezegun import freeze_time

from tests.conftest import FakeClock, make_config
from trends_api.core.enums import ErrorCode
from trends_api.core.result import Failure, Success
from trends_api.domain.enums import AdmissionOutcome
from trends_api.domain.value_objects import RequestContext
from trends_api.infrastructure.rate_limit import AdmissionController

USER_ID = UUID("7b0f1d0c-3a4e-4a57-8f66-1c2d3e4f5a6b")
OTHER_USER_ID = UUID("0a9b8c7d-6e5f-4a3b-9c1d-2e3f4a5b6c7d")
LOGIN = "/api/v1/auth/login"
POSTS = "/api/v1/posts"


def make_controller(clock: FakeClock, logger, **config_overrides) -> AdmissionController:
    """Helper to create a controller on the fake clock."""
    return AdmissionController(
        config=make_config(**config_overrides),
        logger=logger,
        clock=clock,
        wall_clock=lambda: 1_700_000_000.4,
    )


@pytest.mark.unit
class TestAdmissionIpLists:
    """Test blacklist and whitelist handling."""

    def test_blacklisted_ip_blocked(self, clock, mock_logger) -> None:
        """Should block without consulting any bucket."""
        controller = make_controller(clock, mock_logger, blacklist={"198.51.100.9"})

        decision = controller.admit(RequestContext(ip="198.51.100.9", route=POSTS))

        assert decision.outcome == AdmissionOutcome.BLOCKED
        assert decision.status_code == 403
        assert decision.error_code == ErrorCode.IP_BLOCKED
        assert decision.headers is None
        assert controller.bucket_count == 0

    def test_blocked_attempt_logged_as_security_event(self, clock, mock_logger) -> None:
        """Should emit a security warning for blocked IPs."""
        controller = make_controller(clock, mock_logger, blacklist={"198.51.100.9"})

        controller.admit(RequestContext(ip="198.51.100.9", route=POSTS, method="GET"))

        mock_logger.warning.assert_called_once_with(
            "Blocked IP attempted access",
            ip="198.51.100.9",
            route=POSTS,
            method="GET",
            security_event=True,
        )

    def test_whitelisted_ip_bypasses_limits(self, clock, mock_logger) -> None:
        """Should always allow whitelisted IPs without headers or buckets."""
        controller = make_controller(clock, mock_logger, whitelist={"127.0.0.1"})

        decisions = [
            controller.admit(RequestContext(ip="127.0.0.1", route=LOGIN)) for _ in range(50)
        ]

        assert all(d.outcome == AdmissionOutcome.WHITELISTED for d in decisions)
        assert all(d.headers is None for d in decisions)
        assert controller.bucket_count == 0

    def test_blacklist_beats_whitelist(self, clock, mock_logger) -> None:
        """Should block an IP present in both lists."""
        controller = make_controller(
            clock, mock_logger, whitelist={"10.0.0.5"}, blacklist={"10.0.0.5"}
        )

        decision = controller.admit(RequestContext(ip="10.0.0.5", route=POSTS))

        assert decision.outcome == AdmissionOutcome.BLOCKED


@pytest.mark.unit
class TestAdmissionLimiting:
    """Test token bucket limiting through the controller."""

    def test_login_burst_then_deny(self, clock, mock_logger) -> None:
        """Should allow 5 login attempts then deny with 429."""
        controller = make_controller(clock, mock_logger)
        context = RequestContext(ip="203.0.113.7", route=LOGIN)

        allowed = [controller.admit(context) for _ in range(5)]
        denied = controller.admit(context)

        assert all(d.outcome == AdmissionOutcome.ALLOWED for d in allowed)
        assert denied.outcome == AdmissionOutcome.RATE_LIMITED
        assert denied.status_code == 429
        assert denied.error_code == ErrorCode.RATE_LIMIT_EXCEEDED
        assert denied.retry_after == pytest.approx(0.5)

    def test_refill_after_elapsed_time(self, clock, mock_logger) -> None:
        """Should admit again after 500ms at 2 requests per second."""
        controller = make_controller(clock, mock_logger)
        context = RequestContext(ip="203.0.113.7", route=LOGIN)
        for _ in range(6):
            controller.admit(context)

        clock.advance(0.5)

        assert controller.admit(context).allowed is True

    def test_admin_on_login_uses_endpoint_bucket(self, clock, mock_logger) -> None:
        """Should apply the endpoint policy to an admin on the login route."""
        controller = make_controller(clock, mock_logger)

        decision = controller.admit(
            RequestContext(ip="10.0.0.1", route=LOGIN, user_id=USER_ID, role="admin")
        )

        assert decision.key == f"endpoint:{LOGIN}"
        assert decision.headers is not None
        assert decision.headers.limit == 2.0

    def test_keys_are_isolated(self, clock, mock_logger) -> None:
        """Should not let one user's exhaustion affect another."""
        controller = make_controller(clock, mock_logger)
        first = RequestContext(ip="10.0.0.1", route=POSTS, user_id=USER_ID)
        second = RequestContext(ip="10.0.0.1", route=POSTS, user_id=OTHER_USER_ID)
        for _ in range(10):
            controller.admit(first)

        assert controller.admit(first).allowed is False
        assert controller.admit(second).allowed is True

    def test_anonymous_callers_share_nothing_across_ips(self, clock, mock_logger) -> None:
        """Should key anonymous traffic per client IP."""
        controller = make_controller(clock, mock_logger)

        controller.admit(RequestContext(ip="10.0.0.1", route=POSTS))
        controller.admit(RequestContext(ip="10.0.0.2", route=POSTS))

        assert controller.bucket_count == 2
        assert "ip:10.0.0.1" in controller.registry

    def test_denial_logged(self, clock, mock_logger) -> None:
        """Should log a warning with the governing key on denial."""
        controller = make_controller(clock, mock_logger)
        context = RequestContext(ip="10.0.0.1", route=LOGIN, method="POST")
        for _ in range(6):
            controller.admit(context)

        mock_logger.warning.assert_called_once()
        args, kwargs = mock_logger.warning.call_args
        assert args == ("Rate limit exceeded",)
        assert kwargs["key"] == f"endpoint:{LOGIN}"
        assert kwargs["ip"] == "10.0.0.1"
        assert kwargs["method"] == "POST"
        assert kwargs["user_id"] is None


@pytest.mark.unit
class TestAdmissionHeaders:
    """Test informational header values."""

    def test_remaining_counts_down(self, clock, mock_logger) -> None:
        """Should report whole tokens left after each decision."""
        controller = make_controller(clock, mock_logger)
        context = RequestContext(ip="10.0.0.1", route=LOGIN)

        remaining = [controller.admit(context).headers.remaining for _ in range(6)]

        assert remaining == [4, 3, 2, 1, 0, 0]

    def test_remaining_floors_fractional_tokens(self, clock, mock_logger) -> None:
        """Should floor fractional token counts."""
        controller = make_controller(clock, mock_logger)
        context = RequestContext(ip="10.0.0.1", route=LOGIN)
        for _ in range(5):
            controller.admit(context)

        clock.advance(0.75)  # 1.5 tokens
        decision = controller.admit(context)

        assert decision.allowed is True
        assert decision.headers.remaining == 0

    def test_reset_is_one_second_ahead(self, clock, mock_logger) -> None:
        """Should set reset_at to the whole unix second after now."""
        controller = make_controller(clock, mock_logger)

        decision = controller.admit(RequestContext(ip="10.0.0.1", route=POSTS))

        assert decision.headers.reset_at == 1_700_000_001

    @freeze_time("2025-03-01 12:00:00")
    def test_reset_uses_wall_clock_by_default(self, clock, mock_logger) -> None:
        """Should derive reset_at from the system clock when none is injected."""
        controller = AdmissionController(config=make_config(), logger=mock_logger, clock=clock)
        expected = int(datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc).timestamp()) + 1

        decision = controller.admit(RequestContext(ip="10.0.0.1", route=POSTS))

        assert decision.headers.reset_at == expected


@pytest.mark.unit
class TestAdmissionAdministration:
    """Test reset() and sweep()."""

    def test_reset_refills_bucket(self, clock, mock_logger) -> None:
        """Should refill a live bucket and return Success."""
        controller = make_controller(clock, mock_logger)
        context = RequestContext(ip="10.0.0.1", route=LOGIN)
        for _ in range(6):
            controller.admit(context)

        result = controller.reset(f"endpoint:{LOGIN}")

        assert isinstance(result, Success)
        assert controller.admit(context).allowed is True
        mock_logger.info.assert_called_with("Rate limit reset", key=f"endpoint:{LOGIN}")

    def test_reset_unknown_key(self, clock, mock_logger) -> None:
        """Should return Failure when no bucket exists."""
        controller = make_controller(clock, mock_logger)

        result = controller.reset("user:nobody")

        match result:
            case Failure(error=error):
                assert error.code == ErrorCode.RATE_LIMIT_BUCKET_NOT_FOUND
                assert error.details == {"key": "user:nobody"}
            case _:
                pytest.fail("expected Failure")

    def test_sweep_evicts_idle(self, clock, mock_logger) -> None:
        """Should evict idle buckets and return the count."""
        controller = make_controller(clock, mock_logger)
        controller.admit(RequestContext(ip="10.0.0.1", route=POSTS))
        controller.admit(RequestContext(ip="10.0.0.2", route=POSTS))

        clock.advance(300)

        assert controller.sweep() == 2
        assert controller.bucket_count == 0
        mock_logger.debug.assert_called_once()

    def test_sweep_oversize_logs_info(self, clock, mock_logger) -> None:
        """Should log at info level when the oversize valve fires."""
        controller = AdmissionController(
            config=make_config(), logger=mock_logger, clock=clock, max_entries=4
        )
        for i in range(5):
            controller.admit(RequestContext(ip=f"10.0.0.{i}", route=POSTS))

        evicted = controller.sweep()

        assert evicted == 3
        assert controller.bucket_count == 2
        mock_logger.info.assert_called_once()
