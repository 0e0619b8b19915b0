"""Repeating, cancelable capture timer on the asyncio event loop."""

import asyncio
import logging
from collections.abc import Callable

from flightlog.exceptions.client_errors import ValidationError

logger = logging.getLogger(__name__)


class CaptureTrigger:
    """Calls a function once immediately and then at a fixed interval.

    At most one timer runs at a time: ``start`` always cancels the previous
    one. The callback runs on the event loop, so it must not block.
    """

    def __init__(self, callback: Callable[[], None]) -> None:
        """Initialize the trigger.

        Args:
            callback: Invoked on every tick.
        """
        self._callback = callback
        self._task: asyncio.Task[None] | None = None
        self._interval: float | None = None

    @property
    def running(self) -> bool:
        """Return whether a timer is scheduled."""
        return self._task is not None and not self._task.done()

    @property
    def interval(self) -> float | None:
        """Return the interval of the running timer, if any."""
        return self._interval if self.running else None

    def start(self, interval: float) -> None:
        """Restart the timer at a new interval.

        Must be called from within a running event loop.

        Args:
            interval: Seconds between ticks.

        Raises:
            ValidationError: If the interval is not positive.
        """
        if interval <= 0:
            raise ValidationError(
                "Capture interval must be positive",
                field="interval",
                value=interval,
            )

        self.stop()
        self._interval = interval
        self._fire()
        self._task = asyncio.get_running_loop().create_task(self._run(interval))
        logger.info("Capture trigger started at %.2f s interval", interval)

    def stop(self) -> None:
        """Cancel the timer. Safe to call when nothing is running."""
        task, self._task = self._task, None
        self._interval = None
        if task is not None and not task.done():
            task.cancel()
            logger.info("Capture trigger stopped")

    async def _run(self, interval: float) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + interval
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            self._fire()
            next_tick += interval
            now = loop.time()
            if next_tick <= now:
                # Missed ticks are skipped, not replayed.
                next_tick = now + interval

    def _fire(self) -> None:
        try:
            self._callback()
        except Exception:
            logger.exception("Capture callback failed")
