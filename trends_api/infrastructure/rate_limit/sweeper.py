"""Background sweep of the limiter registry.

One asyncio task for the whole registry replaces per-key timers. Each tick
calls ``AdmissionProtocol.sweep()``, which holds the registry lock only while
deleting entries.

Usage:
    sweeper = RegistrySweeper(admission=controller, interval_seconds=60, logger=logger)
    sweeper.start()
    ...
    await sweeper.stop()
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trends_api.domain.protocols import AdmissionProtocol, LoggerProtocol


class RegistrySweeper:
    """Periodically evicts idle and excess rate limit buckets.

    Args:
        admission: Controller whose registry is swept.
        interval_seconds: Delay between sweeps.
        logger: Structured logger.
    """

    def __init__(
        self,
        *,
        admission: AdmissionProtocol,
        interval_seconds: float,
        logger: LoggerProtocol,
    ) -> None:
        self._admission = admission
        self._interval = interval_seconds
        self._logger = logger
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop (idempotent)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="rate-limit-sweeper")
        self._logger.debug("Rate limit sweeper started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._logger.debug("Rate limit sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._admission.sweep()
            except Exception as exc:
                # Keep sweeping; a failed pass only delays eviction.
                self._logger.error("Rate limit sweep failed", error=exc)
