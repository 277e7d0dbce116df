"""Elapsed-time display for the active session."""

import time
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.25


def format_elapsed(seconds: float) -> str:
    """Format seconds as MM:SS; minutes are not wrapped at 60."""
    total = int(max(seconds, 0.0))
    return f"{total // 60:02d}:{total % 60:02d}"


class SessionTimer:
    """Ticks the formatted elapsed time on a background thread.

    ``on_tick`` runs on the timer thread every ``interval`` seconds while the
    timer is running. Callers that need to ignore a tick racing with
    ``stop`` must check their own state inside the callback.
    """

    def __init__(self,
                 on_tick: Optional[Callable[[str], None]] = None,
                 interval: float = DEFAULT_TICK_INTERVAL,
                 clock: Callable[[], float] = time.monotonic):
        self.on_tick = on_tick
        self.interval = interval
        self.clock = clock
        self.session_start: Optional[float] = None
        self._stopped_at: Optional[float] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    @property
    def elapsed_seconds(self) -> float:
        if self.session_start is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else self.clock()
        return end - self.session_start

    @property
    def elapsed_text(self) -> str:
        return format_elapsed(self.elapsed_seconds)

    def start(self) -> None:
        """Restart timing from zero and begin ticking."""
        self.stop()
        self.session_start = self.clock()
        self._stopped_at = None
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop_event,), daemon=True)
        self._thread.name = "SessionTimerThread"
        self._thread.start()
        logger.debug("Session timer started")

    def stop(self) -> None:
        """Stop ticking; the elapsed time freezes at its current value."""
        if self._thread is None:
            return
        self._stop_event.set()
        if self.session_start is not None and self._stopped_at is None:
            self._stopped_at = self.clock()
        if self._thread is not threading.current_thread() and self._thread.is_alive():
            self._thread.join(timeout=2.0)
            if self._thread.is_alive():
                logger.warning("Timer thread did not stop cleanly")
        self._thread = None
        logger.debug("Session timer stopped")

    def reset(self) -> None:
        """Stop and return the elapsed time to 00:00."""
        self.stop()
        self.session_start = None
        self._stopped_at = None

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            if self.on_tick:
                self.on_tick(self.elapsed_text)
