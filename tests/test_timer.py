"""
Tests for the countdown timer state machine.

Most tests use a ManualTicker and drive tick() directly, so every
transition is deterministic.  One test runs the real background ticker
at a short interval.
"""

import threading
import time

import pytest

from exercise_timer.core.errors import NoActiveSession, SessionCompleted, TimerInvariantError
from exercise_timer.core.events import EventEmitter
from exercise_timer.core.models import TimerPhase, TimerState
from exercise_timer.core.ticker import IntervalTicker, ManualTicker
from exercise_timer.core.timer import TimerController


@pytest.fixture
def ticker():
    return ManualTicker()


@pytest.fixture
def timer(ticker):
    return TimerController(ticker=ticker)


class Recorder:
    """Collects notifications from a controller in arrival order."""

    def __init__(self, timer: TimerController) -> None:
        self.events: list[tuple] = []
        timer.on_tick(lambda remaining: self.events.append(("tick", remaining)))
        timer.on_exercise_change(lambda index: self.events.append(("change", index)))
        timer.on_complete(lambda: self.events.append(("complete",)))
        timer.on_switch_sides(lambda: self.events.append(("switch",)))

    def of(self, kind: str) -> list[tuple]:
        return [e for e in self.events if e[0] == kind]


def _ticks(timer: TimerController, n: int) -> None:
    for _ in range(n):
        timer.tick()


# ===========================================================================
# Lifecycle
# ===========================================================================


class TestLifecycle:
    def test_initialize_sets_first_segment(self, timer, make_plan):
        assert timer.initialize(make_plan(3, 2)).ok
        assert timer.get_state() == TimerState(0, 3, TimerPhase.NOT_STARTED, 0)

    def test_start_fires_first_exercise_change(self, timer, ticker, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(3, 2))
        assert timer.start().ok
        assert timer.get_state().phase is TimerPhase.RUNNING
        assert rec.events == [("change", 0)]
        assert ticker.is_running

    def test_start_while_running_is_noop(self, timer, ticker, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(3))
        timer.start()
        assert timer.start().ok
        assert rec.of("change") == [("change", 0)]
        assert ticker.start_count == 1

    def test_full_run(self, timer, ticker, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(3, 2))
        timer.start()

        _ticks(timer, 3)
        assert timer.get_state() == TimerState(0, 0, TimerPhase.RUNNING, 3)

        timer.tick()  # remaining was 0: advance
        assert timer.get_state() == TimerState(1, 2, TimerPhase.RUNNING, 3)

        _ticks(timer, 3)
        assert timer.get_state().phase is TimerPhase.COMPLETED
        assert timer.get_state().total_elapsed_seconds == 5
        assert rec.events == [
            ("change", 0),
            ("tick", 2),
            ("tick", 1),
            ("tick", 0),
            ("change", 1),
            ("tick", 1),
            ("tick", 0),
            ("complete",),
        ]
        assert not ticker.is_running

    def test_ticker_drives_timer(self, timer, ticker, make_plan):
        timer.initialize(make_plan(2))
        timer.start()
        ticker.fire(2)
        assert timer.get_state().remaining_seconds == 0
        ticker.fire()
        assert timer.get_state().phase is TimerPhase.COMPLETED

    def test_tick_ignored_unless_running(self, timer, make_plan):
        timer.tick()  # nothing loaded
        timer.initialize(make_plan(3))
        timer.tick()
        assert timer.get_state().remaining_seconds == 3

    def test_start_after_completion_fails(self, timer, make_plan):
        timer.initialize(make_plan(1))
        timer.start()
        _ticks(timer, 2)
        outcome = timer.start()
        assert not outcome.ok
        assert isinstance(outcome.error, SessionCompleted)

    @pytest.mark.parametrize("operation", ["start", "pause", "restart", "skip"])
    def test_operations_without_plan(self, timer, operation):
        outcome = getattr(timer, operation)()
        assert isinstance(outcome.error, NoActiveSession)

    def test_initialize_replaces_session(self, timer, ticker, make_plan):
        timer.initialize(make_plan(3))
        timer.start()
        timer.initialize(make_plan(7, 8))
        assert timer.get_state() == TimerState(0, 7, TimerPhase.NOT_STARTED, 0)
        assert not ticker.is_running


# ===========================================================================
# Pause / restart
# ===========================================================================


class TestPauseRestart:
    def test_pause_preserves_position(self, timer, ticker, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(10, 5))
        timer.start()
        _ticks(timer, 4)
        before = timer.get_state()

        assert timer.pause().ok
        assert timer.get_state().phase is TimerPhase.PAUSED
        assert not ticker.is_running

        _ticks(timer, 3)  # ignored while paused
        assert timer.pause().ok  # idempotent
        timer.start()

        after = timer.get_state()
        assert (after.current_index, after.remaining_seconds) == (
            before.current_index,
            before.remaining_seconds,
        )
        assert after.phase is TimerPhase.RUNNING
        assert rec.of("change") == [("change", 0)]  # resume does not re-announce
        assert ticker.is_running

    def test_pause_when_not_running_is_noop(self, timer, ticker, make_plan):
        timer.initialize(make_plan(5))
        assert timer.pause().ok
        assert timer.get_state().phase is TimerPhase.NOT_STARTED

    def test_restart_resets_everything(self, timer, ticker, make_plan):
        plan = make_plan(30, 20, 10)
        timer.initialize(plan)
        timer.start()
        _ticks(timer, 12)
        timer.skip()
        _ticks(timer, 5)

        assert timer.restart().ok
        assert timer.get_state() == TimerState(0, 30, TimerPhase.NOT_STARTED, 0)
        assert [s.duration_seconds for s in timer.plan.segments] == [30, 20, 10]
        assert not ticker.is_running

    def test_restart_after_completion(self, timer, make_plan):
        timer.initialize(make_plan(1))
        timer.start()
        _ticks(timer, 2)
        timer.restart()
        assert timer.start().ok


# ===========================================================================
# Skip
# ===========================================================================


class TestSkip:
    def test_single_future_segment_takes_everything(self, timer, make_plan):
        timer.initialize(make_plan(60, 90))
        timer.start()
        _ticks(timer, 30)
        assert timer.get_state().remaining_seconds == 30

        assert timer.skip().ok
        state = timer.get_state()
        assert state.current_index == 1
        assert state.remaining_seconds == 120
        assert [s.duration_seconds for s in timer.plan.segments] == [30, 120]
        assert timer.plan.is_conserved()

    def test_proportional_reallocation(self, timer, make_plan):
        timer.initialize(make_plan(40, 30, 10))
        timer.start()
        timer.skip()
        # 40 s split 30:10 → +30 / +10; the untouched first segment is dropped
        assert [s.duration_seconds for s in timer.plan.segments] == [60, 20]
        assert timer.get_state().current_index == 0
        assert timer.get_state().remaining_seconds == 60
        assert timer.plan.is_conserved()

    def test_rounding_conserves_total(self, timer, make_plan):
        timer.initialize(make_plan(25, 33, 33, 34))
        timer.start()
        _ticks(timer, 4)
        timer.skip()
        plan = timer.plan
        assert plan.segment_total == plan.total_duration_seconds == 125
        assert [s.duration_seconds for s in plan.segments][0] == 4

    def test_caller_plan_untouched(self, timer, make_plan):
        plan = make_plan(60, 90)
        timer.initialize(plan)
        timer.start()
        timer.skip()
        assert [s.duration_seconds for s in plan.segments] == [60, 90]

    def test_skip_last_segment_completes(self, timer, ticker, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(20))
        timer.start()
        _ticks(timer, 5)
        assert timer.skip().ok
        assert timer.get_state().phase is TimerPhase.COMPLETED
        assert rec.of("complete") == [("complete",)]
        assert not ticker.is_running
        assert isinstance(timer.skip().error, SessionCompleted)

    def test_skip_fires_exercise_change(self, timer, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(20, 20))
        timer.start()
        timer.tick()
        timer.skip()
        assert rec.of("change") == [("change", 0), ("change", 1)]

    def test_skip_before_first_tick_announces_successor(self, timer, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(20, 20, 20))
        timer.start()
        timer.skip()
        # segment 0 is removed, so the old segment 1 is now index 0
        assert rec.of("change") == [("change", 0), ("change", 0)]
        assert timer.current_segment.exercise.name == "B"

    def test_skip_before_first_tick_keeps_plan_valid(self, timer, make_plan):
        timer.initialize(make_plan(60, 90))
        timer.start()
        assert timer.skip().ok
        durations = [s.duration_seconds for s in timer.plan.segments]
        assert durations == [150]
        assert all(d > 0 for d in durations)
        assert timer.plan.is_conserved()
        assert timer.get_state() == TimerState(0, 150, TimerPhase.RUNNING, 0)

        # the working plan can seed a fresh session
        assert timer.initialize(timer.plan).ok
        assert timer.get_state() == TimerState(0, 150, TimerPhase.NOT_STARTED, 0)

    def test_skip_after_first_tick_keeps_segment(self, timer, make_plan):
        timer.initialize(make_plan(60, 90))
        timer.start()
        timer.tick()
        timer.skip()
        assert [s.duration_seconds for s in timer.plan.segments] == [1, 149]
        assert timer.get_state().current_index == 1

    def test_skip_ignored_unless_running(self, timer, make_plan):
        timer.initialize(make_plan(20, 20))
        assert timer.skip().ok
        assert timer.get_state() == TimerState(0, 20, TimerPhase.NOT_STARTED, 0)

        timer.start()
        timer.pause()
        assert timer.skip().ok
        assert timer.get_state().current_index == 0


# ===========================================================================
# Notifications
# ===========================================================================


class TestNotifications:
    def test_switch_sides_fires_once_at_halfway(self, timer, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(10, sided=(0,)))
        timer.start()
        _ticks(timer, 4)
        assert rec.of("switch") == []
        timer.tick()
        assert rec.of("switch") == [("switch",)]
        _ticks(timer, 5)
        assert rec.of("switch") == [("switch",)]

    def test_no_switch_for_plain_exercises(self, timer, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(4, 4))
        timer.start()
        _ticks(timer, 10)
        assert rec.of("switch") == []

    def test_switch_resets_per_segment(self, timer, make_plan):
        rec = Recorder(timer)
        timer.initialize(make_plan(4, 4, sided=(0, 1)))
        timer.start()
        _ticks(timer, 10)
        assert len(rec.of("switch")) == 2

    def test_failing_handler_is_isolated(self, timer, make_plan):
        seen = []

        def broken(_remaining):
            raise RuntimeError("display crashed")

        timer.on_tick(broken)
        timer.on_tick(seen.append)
        timer.initialize(make_plan(3))
        timer.start()
        _ticks(timer, 2)

        assert seen == [2, 1]
        assert timer.get_state().remaining_seconds == 1

    def test_handlers_run_in_registration_order(self, timer, make_plan):
        order = []
        timer.on_exercise_change(lambda _i: order.append("first"))
        timer.on_exercise_change(lambda _i: order.append("second"))
        timer.initialize(make_plan(3))
        timer.start()
        assert order == ["first", "second"]

    def test_unsubscribe(self, timer, make_plan):
        seen = []
        unsubscribe = timer.on_tick(seen.append)
        timer.initialize(make_plan(5))
        timer.start()
        timer.tick()
        unsubscribe()
        timer.tick()
        assert seen == [4]

    def test_handler_may_pause_timer(self, timer, ticker, make_plan):
        timer.on_tick(lambda remaining: timer.pause() if remaining == 2 else None)
        timer.initialize(make_plan(5))
        timer.start()
        _ticks(timer, 5)
        assert timer.get_state() == TimerState(0, 2, TimerPhase.PAUSED, 3)

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError):
            EventEmitter().subscribe("finish", print)


# ===========================================================================
# Invariants and real ticking
# ===========================================================================


class TestInvariants:
    def test_corrupted_plan_raises(self, timer, make_plan):
        timer.initialize(make_plan(5, 5))
        timer.start()
        timer.plan.segments[1].duration_seconds += 3
        with pytest.raises(TimerInvariantError):
            timer.tick()

    def test_interval_ticker_runs_session(self, make_plan):
        timer = TimerController(ticker=IntervalTicker(interval=0.005))
        done = threading.Event()
        timer.on_complete(done.set)
        timer.initialize(make_plan(2, 1))
        timer.start()
        assert done.wait(timeout=5)
        assert timer.get_state().phase is TimerPhase.COMPLETED
        assert timer.get_state().total_elapsed_seconds == 3

    def test_interval_ticker_stops_on_pause(self, make_plan):
        ticker = IntervalTicker(interval=0.005)
        timer = TimerController(ticker=ticker)
        timer.initialize(make_plan(600))
        timer.start()
        timer.pause()
        assert not ticker.is_running
        remaining = timer.get_state().remaining_seconds
        time.sleep(0.05)
        assert timer.get_state().remaining_seconds == remaining
