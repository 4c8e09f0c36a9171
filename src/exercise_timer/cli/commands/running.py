"""Run command: count a session down in the terminal."""

import json
import threading
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_SESSION_MINUTES, TICK_INTERVAL_SECONDS
from ...core.models import SessionPlan
from ...core.ticker import IntervalTicker
from ...core.timer import TimerController
from ...io.serializers import ValidationError, dict_to_plan
from .. import views
from ..app import (
    EquipmentOption,
    ExcludeTagOption,
    LibraryOption,
    MinutesOption,
    SeedOption,
    app,
    make_plan,
)


def load_plan_file(path: Path) -> SessionPlan:
    """Read a plan saved with `plan --save`, or exit with an error."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValidationError("expected a JSON object")
        return dict_to_plan(data)
    except OSError as e:
        views.print_error(f"Cannot read {path}: {e}")
    except json.JSONDecodeError as e:
        views.print_error(f"Invalid JSON in {path}: {e}")
    except ValidationError as e:
        views.print_error(f"Invalid plan file {path}: {e}")
    raise typer.Exit(1)


def _pause_menu(timer: TimerController) -> bool:
    """
    Pause the timer and ask what to do next.

    Returns:
        False if the user chose to quit, True otherwise
    """
    timer.pause()
    state = timer.get_state()
    segment = timer.current_segment

    views.console.print()
    views.console.print(
        f"[yellow]Paused[/yellow] during {segment.exercise.name if segment else '-'} "
        f"with {views.format_clock(state.remaining_seconds)} left"
    )
    try:
        choice = (
            views.console.input("(c)ontinue, (s)kip exercise, (r)estart, (q)uit [c]: ")
            .strip()
            .lower()
            or "c"
        )
    except (EOFError, KeyboardInterrupt):
        choice = "q"

    if choice.startswith("q"):
        return False
    if choice.startswith("r"):
        timer.restart()
        timer.start()
    elif choice.startswith("s"):
        timer.start()
        timer.skip()
    else:
        timer.start()
    return True


def run_session(session_plan: SessionPlan, speed: float = 1.0) -> bool:
    """
    Run ``session_plan`` to completion, printing cues as it goes.

    Ctrl+C opens the pause menu.

    Returns:
        True if the session completed, False if the user quit
    """
    ticker = IntervalTicker(interval=TICK_INTERVAL_SECONDS / speed)
    timer = TimerController(ticker=ticker)
    done = threading.Event()
    count = len(session_plan.segments)

    def announce_exercise(index: int) -> None:
        assert timer.plan is not None
        views.print_exercise_start(index, count, timer.plan.segments[index])

    def announce_time(remaining: int) -> None:
        if views.should_announce(remaining):
            views.print_remaining(remaining)

    timer.on_exercise_change(announce_exercise)
    timer.on_tick(announce_time)
    timer.on_switch_sides(views.print_switch_sides)
    timer.on_complete(done.set)

    timer.initialize(session_plan)
    timer.start()

    while not done.is_set():
        try:
            done.wait(0.2)
        except KeyboardInterrupt:
            if not _pause_menu(timer):
                timer.pause()
                views.print_info("Session stopped.")
                return False

    views.print_complete(timer.get_state().total_elapsed_seconds)
    return True


@app.command()
def run(
    minutes: MinutesOption = DEFAULT_SESSION_MINUTES,
    equipment: EquipmentOption = None,
    exclude_tags: ExcludeTagOption = None,
    seed: SeedOption = None,
    library_path: LibraryOption = None,
    plan_file: Annotated[
        Optional[Path],
        typer.Option("--plan-file", "-f", help="Run a plan saved with `plan --save`"),
    ] = None,
    speed: Annotated[
        float,
        typer.Option("--speed", help="Clock speed factor (2.0 = twice as fast)", min=0.1),
    ] = 1.0,
) -> None:
    """
    Generate a session and run its countdown.

    Press Ctrl+C to pause; you can then continue, skip the current
    exercise, restart the session or quit.
    """
    if plan_file is not None:
        session_plan = load_plan_file(plan_file)
        warnings: tuple[str, ...] = ()
    else:
        session_plan, warnings = make_plan(minutes, equipment, exclude_tags, seed, library_path)

    views.print_plan(session_plan, warnings)
    run_session(session_plan, speed)
