"""Integration tests for RegistrySweeper (background eviction task).

Uses a real AdmissionController with a fake monotonic clock and a very short
sweep interval so the asyncio task runs several times per test.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from tests.conftest import FakeClock, make_config
from trends_api.domain.value_objects import RequestContext
from trends_api.infrastructure.rate_limit import AdmissionController, RegistrySweeper


async def _wait_until(predicate, timeout: float = 1.0) -> bool:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.005)
    return predicate()


@pytest.mark.integration
class TestRegistrySweeper:
    """Test the sweep loop lifecycle."""

    async def test_sweeper_evicts_idle_buckets(self, mock_logger):
        """Test idle buckets disappear without any request traffic."""
        clock = FakeClock()
        controller = AdmissionController(
            config=make_config(), logger=mock_logger, clock=clock, idle_ttl_seconds=300
        )
        controller.admit(RequestContext(ip="10.0.0.1", route="/api/v1/posts"))
        sweeper = RegistrySweeper(admission=controller, interval_seconds=0.01, logger=mock_logger)

        sweeper.start()
        try:
            clock.advance(301)
            assert await _wait_until(lambda: controller.bucket_count == 0)
        finally:
            await sweeper.stop()

    async def test_start_is_idempotent(self, mock_logger):
        """Test calling start() twice keeps a single task."""
        admission = MagicMock()
        admission.sweep.return_value = 0
        sweeper = RegistrySweeper(admission=admission, interval_seconds=0.01, logger=mock_logger)

        sweeper.start()
        first_task = sweeper._task
        sweeper.start()

        assert sweeper._task is first_task
        assert sweeper.running is True
        await sweeper.stop()
        assert sweeper.running is False

    async def test_stop_without_start(self, mock_logger):
        """Test stop() is a no-op when the sweeper never started."""
        sweeper = RegistrySweeper(
            admission=MagicMock(), interval_seconds=0.01, logger=mock_logger
        )

        await sweeper.stop()

        assert sweeper.running is False

    async def test_sweep_failure_is_logged_and_loop_continues(self, mock_logger):
        """Test an exception in sweep() is logged and sweeping continues."""
        admission = MagicMock()
        calls = []

        def sweep() -> int:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return 0

        admission.sweep.side_effect = sweep
        sweeper = RegistrySweeper(admission=admission, interval_seconds=0.01, logger=mock_logger)

        sweeper.start()
        try:
            assert await _wait_until(lambda: admission.sweep.call_count >= 2)
        finally:
            await sweeper.stop()

        mock_logger.error.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert args == ("Rate limit sweep failed",)
        assert isinstance(kwargs["error"], RuntimeError)
