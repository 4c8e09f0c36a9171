"""
Countdown timer state machine.

TimerController owns the timer state for one session and is the only
place it changes.  Phases:

    NOT_STARTED → RUNNING ⇄ PAUSED
    RUNNING → COMPLETED  (terminal until restart/initialize)

A tick source calls tick() once per second while running.  All public
operations take the controller lock, so ticks and user actions never
interleave half-way.  The tick source is always stopped outside the lock
because stopping waits for an in-flight tick.

The controller works on a copy of the plan it was given: skip() moves
the cancelled seconds onto later segments of that copy, and restart()
throws the copy away.
"""

import threading
from typing import Callable

from loguru import logger

from .allocator import largest_remainder
from .errors import NoActiveSession, Outcome, SessionCompleted, TimerInvariantError
from .events import EventEmitter
from .models import SessionPlan, SessionSegment, TimerPhase, TimerState
from .ticker import IntervalTicker, TickSource


class TimerController:
    """
    Drives a countdown over a SessionPlan.

    Args:
        ticker: Tick source; an IntervalTicker with a 1 s cadence when None
        events: Notification sink; a fresh EventEmitter when None
    """

    def __init__(
        self,
        ticker: TickSource | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        self._ticker: TickSource = ticker if ticker is not None else IntervalTicker()
        self._events = events if events is not None else EventEmitter()
        self._lock = threading.RLock()

        self._original: SessionPlan | None = None
        self._plan: SessionPlan | None = None
        self._index = 0
        self._remaining = 0
        self._phase = TimerPhase.NOT_STARTED
        self._elapsed = 0
        self._sides_switched = False

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def on_tick(self, handler: Callable[[int], object]) -> Callable[[], None]:
        """Call ``handler(remaining_seconds)`` after every countdown second."""
        return self._events.subscribe("tick", handler)

    def on_exercise_change(self, handler: Callable[[int], object]) -> Callable[[], None]:
        """Call ``handler(new_index)`` when a segment begins."""
        return self._events.subscribe("exercise_change", handler)

    def on_complete(self, handler: Callable[[], object]) -> Callable[[], None]:
        """Call ``handler()`` once the last segment has finished."""
        return self._events.subscribe("complete", handler)

    def on_switch_sides(self, handler: Callable[[], object]) -> Callable[[], None]:
        """Call ``handler()`` halfway through a sided segment."""
        return self._events.subscribe("switch_sides", handler)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_state(self) -> TimerState:
        """Snapshot of the current timer state."""
        with self._lock:
            return TimerState(
                current_index=self._index,
                remaining_seconds=self._remaining,
                phase=self._phase,
                total_elapsed_seconds=self._elapsed,
            )

    @property
    def plan(self) -> SessionPlan | None:
        """The working plan, including any skip reallocation.  Read-only."""
        return self._plan

    @property
    def current_segment(self) -> SessionSegment | None:
        with self._lock:
            if self._plan is None:
                return None
            return self._plan.segments[self._index]

    # ------------------------------------------------------------------
    # Control operations
    # ------------------------------------------------------------------

    def initialize(self, plan: SessionPlan) -> Outcome:
        """Load ``plan`` and reset to its first segment, not started."""
        self._ticker.stop()
        with self._lock:
            self._original = plan.copy()
            self._load(self._original.copy())
        logger.debug(
            "Timer initialized: {} segment(s), {} s",
            len(plan.segments),
            plan.total_duration_seconds,
        )
        return Outcome()

    def start(self) -> Outcome:
        """Start from NOT_STARTED or resume from PAUSED."""
        with self._lock:
            if self._plan is None:
                return Outcome(error=NoActiveSession("No session initialized"))
            if self._phase is TimerPhase.COMPLETED:
                return Outcome(error=SessionCompleted("Session already completed"))
            if self._phase is TimerPhase.RUNNING:
                return Outcome()

            from_start = self._phase is TimerPhase.NOT_STARTED
            self._phase = TimerPhase.RUNNING
            logger.debug("Timer {}", "started" if from_start else "resumed")
            if from_start:
                self._events.emit("exercise_change", 0)
            still_running = self._phase is TimerPhase.RUNNING

        if still_running:
            self._ticker.start(self.tick)
        return Outcome()

    def pause(self) -> Outcome:
        """Pause a running session, keeping index and remaining seconds."""
        with self._lock:
            if self._plan is None:
                return Outcome(error=NoActiveSession("No session initialized"))
            if self._phase is not TimerPhase.RUNNING:
                return Outcome()
            self._phase = TimerPhase.PAUSED
            logger.debug(
                "Timer paused at segment {} with {} s left",
                self._index,
                self._remaining,
            )
        self._ticker.stop()
        return Outcome()

    def restart(self) -> Outcome:
        """Discard progress and skip reallocation; back to the first segment."""
        with self._lock:
            if self._original is None:
                return Outcome(error=NoActiveSession("No session initialized"))
        self._ticker.stop()
        with self._lock:
            self._load(self._original.copy())
        logger.debug("Timer restarted")
        return Outcome()

    def skip(self) -> Outcome:
        """
        Cancel the rest of the current segment and move on.

        The cancelled seconds are spread over the remaining segments in
        proportion to their durations.  A segment skipped before its first
        tick is removed from the working plan.  Skipping the last segment
        ends the session.  Ignored unless the session is running.
        """
        with self._lock:
            if self._plan is None:
                return Outcome(error=NoActiveSession("No session initialized"))
            if self._phase is TimerPhase.COMPLETED:
                return Outcome(error=SessionCompleted("Session already completed"))
            if self._phase is not TimerPhase.RUNNING:
                return Outcome()

            logger.debug("Skipping segment {}", self._index)
            future = self._plan.segments[self._index + 1 :]
            if future and self._remaining > 0:
                self._reallocate(self._remaining, future)
            completed = self._advance()

        if completed:
            self._ticker.stop()
        return Outcome()

    def tick(self) -> None:
        """
        Advance the countdown by one second.

        Driven by the tick source, not by users.  Does nothing unless the
        session is running.

        Raises:
            TimerInvariantError: If the timer state is inconsistent
        """
        completed = False
        with self._lock:
            if self._plan is None or self._phase is not TimerPhase.RUNNING:
                return
            self._check_invariants()

            if self._remaining > 0:
                self._remaining -= 1
                self._elapsed += 1
                self._events.emit("tick", self._remaining)
                self._maybe_switch_sides()
            else:
                completed = self._advance()

        if completed:
            self._ticker.stop()

    # ------------------------------------------------------------------
    # Internals (call with the lock held)
    # ------------------------------------------------------------------

    def _load(self, plan: SessionPlan) -> None:
        self._plan = plan
        self._index = 0
        self._remaining = plan.segments[0].duration_seconds
        self._phase = TimerPhase.NOT_STARTED
        self._elapsed = 0
        self._sides_switched = False

    def _advance(self) -> bool:
        """Move to the next segment, or complete.  Returns True on completion."""
        assert self._plan is not None
        next_index = self._index + 1
        if next_index < len(self._plan.segments):
            self._index = next_index
            self._remaining = self._plan.segments[next_index].duration_seconds
            self._sides_switched = False
            self._events.emit("exercise_change", next_index)
            return False

        self._remaining = 0
        self._phase = TimerPhase.COMPLETED
        logger.debug("Session completed after {} s", self._elapsed)
        self._events.emit("complete")
        return True

    def _maybe_switch_sides(self) -> None:
        assert self._plan is not None
        segment = self._plan.segments[self._index]
        if not segment.exercise.sided or self._sides_switched:
            return
        done = segment.duration_seconds - self._remaining
        if done * 2 >= segment.duration_seconds:
            self._sides_switched = True
            self._events.emit("switch_sides")

    def _reallocate(self, seconds: int, future: list[SessionSegment]) -> None:
        """Move ``seconds`` from the current segment onto ``future`` segments."""
        assert self._plan is not None
        before = self._plan.segment_total
        future_total = sum(s.duration_seconds for s in future)
        shares = [seconds * s.duration_seconds / future_total for s in future]
        for segment, extra in zip(future, largest_remainder(shares, seconds)):
            segment.duration_seconds += extra

        current = self._plan.segments[self._index]
        if seconds == current.duration_seconds:
            # nothing was spent on it: drop it and let _advance land on its successor
            del self._plan.segments[self._index]
            self._index -= 1
        else:
            # the skipped segment keeps only the time actually spent on it
            current.duration_seconds -= seconds

        if self._plan.segment_total != before or not self._plan.is_conserved():
            logger.critical(
                "Skip reallocation broke time conservation: {} s before, {} s after",
                before,
                self._plan.segment_total,
            )
            raise TimerInvariantError("Skip reallocation did not conserve session time")

    def _check_invariants(self) -> None:
        assert self._plan is not None
        problem: str | None = None
        if not 0 <= self._index < len(self._plan.segments):
            problem = f"segment index {self._index} out of range"
        elif self._remaining > self._plan.segments[self._index].duration_seconds:
            problem = (
                f"{self._remaining} s remaining exceeds segment duration "
                f"{self._plan.segments[self._index].duration_seconds} s"
            )
        elif not self._plan.is_conserved():
            problem = (
                f"segments sum to {self._plan.segment_total} s, "
                f"plan total is {self._plan.total_duration_seconds} s"
            )
        if problem is not None:
            logger.critical("Timer invariant violated: {}", problem)
            raise TimerInvariantError(problem)
