"""
Polling scheduler.

Re-runs a refresh callback at a fixed interval on a background timer
thread until stopped.
"""

import logging
import threading
from typing import Callable, Optional

import config.settings as settings

logger = logging.getLogger(__name__)


class PollingScheduler:
    """
    Calls `callback` every `interval` seconds.

    Each tick arms a fresh one-shot timer, so a slow callback delays the next
    tick instead of overlapping with it.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float = settings.POLL_INTERVAL_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer
    ):
        """
        Initialize scheduler.

        Args:
            callback: Refresh function, called without arguments
            interval: Seconds between ticks
            timer_factory: Builds a one-shot timer as timer_factory(interval, function)
        """
        if interval <= 0:
            raise ValueError(f"Polling interval must be positive, got {interval}")

        self.callback = callback
        self.interval = interval
        self.timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Arm the first tick. Calling start on a running scheduler does nothing."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._schedule()
        logger.debug(f"Polling every {self.interval}s")

    def stop(self) -> None:
        """Cancel the pending tick."""
        with self._lock:
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.debug("Polling stopped")

    def tick(self) -> None:
        """Run the callback once, then re-arm if still running."""
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Refresh callback failed: {e}", exc_info=True)
        finally:
            with self._lock:
                if self._running:
                    self._schedule()

    def _schedule(self) -> None:
        timer = self.timer_factory(self.interval, self.tick)
        timer.daemon = True
        self._timer = timer
        timer.start()
