"""
Tick sources that drive TimerController.tick().

A tick source calls its callback at a fixed cadence until stopped and
never runs two callbacks at once.  IntervalTicker does this on a daemon
thread; tests use a source that never fires on its own and call tick()
directly.
"""

import threading
from typing import Callable, Protocol

from loguru import logger

from .config import TICK_INTERVAL_SECONDS

TickCallback = Callable[[], None]


class TickSource(Protocol):
    """Anything that can start and stop a periodic callback."""

    @property
    def is_running(self) -> bool: ...

    def start(self, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


class IntervalTicker:
    """
    Calls a callback every ``interval`` seconds on a background thread.

    stop() returns only after the thread has finished, unless it is called
    from the ticker thread itself (e.g. a tick that completes the session).
    An exception escaping the callback stops the ticker and is logged.
    """

    def __init__(self, interval: float = TICK_INTERVAL_SECONDS) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self, callback: TickCallback) -> None:
        """Start ticking.  Restarts cleanly if already running."""
        self.stop()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(callback, self._stop_event),
            name="exercise-timer-ticker",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop ticking; waits for an in-flight tick unless called from it."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def _run(self, callback: TickCallback, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                callback()
            except Exception:
                logger.exception("Tick failed; stopping the ticker")
                stop_event.set()
                return


class ManualTicker:
    """
    Tick source that never fires by itself.

    Records whether it is meant to be running so callers can check that
    pause/restart stopped it; fire() invokes the callback once.
    """

    def __init__(self) -> None:
        self._callback: TickCallback | None = None
        self.start_count = 0
        self.stop_count = 0

    @property
    def is_running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        self._callback = callback
        self.start_count += 1

    def stop(self) -> None:
        if self._callback is not None:
            self.stop_count += 1
        self._callback = None

    def fire(self, times: int = 1) -> None:
        """Invoke the callback ``times`` times while running."""
        for _ in range(times):
            if self._callback is None:
                return
            self._callback()
