"""
============================================================================
HONEYPOT SENSOR - HEARTBEAT SCHEDULER
============================================================================
Sends a periodic "still alive" health_check so an operator can tell a
quiet sensor from a dead one.

Timing
------
Ticks fall on fixed boundaries: start + k × interval.  There is no jitter
and no catch-up; if the process was descheduled through one or more
boundaries those ticks are skipped and the next beat lands on the next
boundary still in the future.

Heartbeats do not depend on listener health.  They only prove that the
process itself is alive.
============================================================================
"""

import asyncio
from typing import Any, Dict, Optional, Tuple, Union

from config.constants import Defaults, HealthMessage
from sensor.models import NotificationPayload
from utils.helpers import seconds_to_human
from utils.logger import get_logger


logger = get_logger("Heartbeat")


def next_boundary(scheduled: float, now: float, interval: float) -> Tuple[float, int]:
    """
    Advance a just-fired tick to the next boundary strictly after ``now``.

    Returns
    -------
    (next_tick, skipped)
        ``skipped`` counts boundaries that passed without a beat.
    """
    next_tick = scheduled + interval
    skipped = 0
    if next_tick <= now:
        skipped = int((now - next_tick) // interval) + 1
        next_tick += skipped * interval
    return next_tick, skipped


class HeartbeatScheduler:
    """
    Repeating timer feeding health_check payloads into the notifier.

    Attributes
    ----------
    _interval : float      — seconds between beats (default 1 hour)
    _task : asyncio.Task   — the timer loop, None until start()
    _beat_count : int
    _skipped_count : int
    """

    def __init__(
        self,
        notifier: Any,
        host_name: str,
        interval: float = Defaults.HEARTBEAT_INTERVAL,
    ):
        self.notifier = notifier
        self.host_name = host_name
        self._interval = interval

        self._task: Optional[asyncio.Task] = None
        self._started_at: Optional[float] = None
        self._beat_count = 0
        self._skipped_count = 0

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Arm the repeating timer."""
        if self._task is not None and not self._task.done():
            logger.warning("HeartbeatScheduler is already running")
            return

        loop = asyncio.get_running_loop()
        self._started_at = loop.time()
        self._task = loop.create_task(self._heartbeat_loop(), name="heartbeat")
        logger.info(f"✓ Heartbeat armed — every {seconds_to_human(self._interval)}")

    async def stop(self) -> None:
        """Cancel the timer (process shutdown)."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # BEATS
    # ------------------------------------------------------------------

    def beat(self, message: Union[HealthMessage, str] = HealthMessage.ALIVE) -> None:
        """Send one health_check right now."""
        self.notifier.send(NotificationPayload.health_check(message, self.host_name))

    async def _heartbeat_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = self._started_at + self._interval

        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))

            logger.info("Sending health check")
            try:
                self.beat(HealthMessage.ALIVE)
                self._beat_count += 1
            except Exception as e:
                logger.error(f"Heartbeat failed: {e}")

            next_tick, skipped = next_boundary(next_tick, loop.time(), self._interval)
            if skipped:
                self._skipped_count += skipped
                logger.warning(f"Skipped {skipped} heartbeat tick(s) after a stall")

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        return {
            "interval_seconds": self._interval,
            "is_running": self.is_running,
            "beat_count": self._beat_count,
            "skipped_count": self._skipped_count,
        }
