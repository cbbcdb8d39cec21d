# monitoring/focus_timer.py

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from monitoring.i_monitor import IMonitor


logger = logging.getLogger(__name__)


def format_remaining(seconds: int) -> str:
    """
    MM:SS, or HH:MM:SS once there is at least an hour left.
    """
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class TimerHandle:
    """
    Returned by FocusTimer.start(), bound to the loop that start() began.
    cancel() can be called any number of times, also after the timer
    finished on its own; a handle of an earlier loop never stops a newer one.
    """

    def __init__(self, timer: "FocusTimer", stop_event: threading.Event):
        self._timer = timer
        self._stop_event = stop_event
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._timer._stop_loop(self._stop_event)


class FocusTimer(IMonitor):
    """
    Countdown for one focus session.

    Every `tick_seconds` the remaining time is decremented and `on_tick`
    is called with the new value. On the tick after it reached zero the
    timer stops itself and calls `on_complete`.

    Ticks only drive display refresh and completion; they never touch
    session statistics.
    """

    def __init__(
        self,
        duration_seconds: int,
        *,
        on_tick: Optional[Callable[[int], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        tick_seconds: float = 1.0,
    ) -> None:
        self.duration_seconds = int(duration_seconds)
        self.remaining_seconds = int(duration_seconds)
        self.on_tick = on_tick
        self.on_complete = on_complete
        self.tick_seconds = float(tick_seconds)

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._handle: Optional[TimerHandle] = None
        self._running = False
        self._completed = False

    # ------------------------------------------------------------------ #
    # IMonitor interface
    # ------------------------------------------------------------------ #

    def start(self) -> TimerHandle:
        """
        Start ticking in a background thread. Calling start() while already
        running returns the handle of the running loop.
        """
        if self._running and self._handle is not None:
            return self._handle

        # one stop event per loop
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._handle = TimerHandle(self, stop_event)
        self._running = True
        self._thread = threading.Thread(target=self._loop, args=(stop_event,), daemon=True)
        self._thread.start()
        return self._handle

    def stop(self) -> None:
        self._running = False
        self._stop_event.set()
        thread = self._thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=1.0)
            if thread.is_alive():
                logger.warning("[FocusTimer] Tick loop still busy after stop")
        self._thread = None
        self._handle = None

    def _stop_loop(self, stop_event: threading.Event) -> None:
        if stop_event is self._stop_event:
            self.stop()
        else:
            stop_event.set()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def elapsed_seconds(self) -> int:
        return self.duration_seconds - self.remaining_seconds

    def reset(self, duration_seconds: Optional[int] = None) -> None:
        self.stop()
        if duration_seconds is not None:
            self.duration_seconds = int(duration_seconds)
        self.remaining_seconds = self.duration_seconds
        self._completed = False

    # ------------------------------------------------------------------ #
    # Internal loop
    # ------------------------------------------------------------------ #

    def _loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            if stop_event.wait(self.tick_seconds):
                break
            self.tick()

    def tick(self) -> None:
        """
        One countdown step; also usable directly without the thread.
        """
        if self._completed:
            return

        if self.remaining_seconds > 0:
            self.remaining_seconds -= 1
            if self.on_tick is not None:
                try:
                    self.on_tick(self.remaining_seconds)
                except Exception:
                    # a broken display must not stop the countdown
                    logger.exception("[FocusTimer] on_tick callback failed")
            return

        self._completed = True
        self._running = False
        self._stop_event.set()
        logger.info("[FocusTimer] Countdown of %ss complete", self.duration_seconds)
        if self.on_complete is not None:
            self.on_complete()
