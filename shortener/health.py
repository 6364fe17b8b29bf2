"""Liveness tracking for the diagnostic endpoints."""

import asyncio
import logging
from typing import Optional

from .database.base import ShortURLStoreBase


class LivenessMonitor:
    """Pings the store periodically and remembers whether it ever failed.

    The flag starts alive and is latched down on the first failed ping; the
    process is expected to be restarted by its supervisor after that.
    """

    def __init__(
        self,
        store: ShortURLStoreBase,
        interval_seconds: float = 5.0,
        ping_timeout_seconds: Optional[float] = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self.ping_timeout_seconds = ping_timeout_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._alive = True
        self._task: Optional[asyncio.Task] = None

    @property
    def alive(self) -> bool:
        return self._alive

    async def check(self) -> bool:
        """Ping the store once and update the flag.

        Returns:
            Current liveness
        """
        if not await self.store.ping(timeout=self.ping_timeout_seconds):
            if self._alive:
                self.logger.error("Failed to ping database, setting alive=false")
            self._alive = False
        return self._alive

    async def run(self) -> None:
        """Check forever, sleeping between checks."""
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.check()

    def start(self) -> None:
        """Start the background checker on the running loop."""
        if self._task is None:
            self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Cancel the background checker."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
