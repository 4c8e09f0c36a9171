"""
CLI entry point using Typer.

Provides commands for workout sessions:
- library: Show the exercise library
- plan: Generate and display a session plan
- run: Generate a session and run its countdown

Run without a command for an interactive menu.
"""

from typing import Annotated

import typer

from ..core.config import DEFAULT_SESSION_MINUTES
from ..log import setup_logger
from . import views
from .app import app, make_plan
from .commands.library import library
from .commands.planning import plan
from .commands.running import run, run_session

__all__ = ["app"]


def _prompt_minutes() -> int | None:
    raw = views.console.input(f"Session length in minutes [{DEFAULT_SESSION_MINUTES}]: ").strip()
    if not raw:
        return DEFAULT_SESSION_MINUTES
    try:
        minutes = int(raw)
    except ValueError:
        views.print_error("Enter a whole number of minutes")
        return None
    if minutes < 1:
        views.print_error("Enter a whole number ≥ 1")
        return None
    return minutes


def _menu_run() -> None:
    """Interactive session: ask for a length, show the plan, then run it."""
    minutes = _prompt_minutes()
    if minutes is None:
        return
    session_plan, warnings = make_plan(minutes)
    views.print_plan(session_plan, warnings)
    if views.confirm_action("Start this session now?"):
        run_session(session_plan)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level for diagnostics on stderr (DEBUG, INFO, WARNING, ...)"),
    ] = "WARNING",
) -> None:
    """
    Workout session generator and timer. Run without a command for interactive mode.
    """
    try:
        setup_logger(log_level)
    except ValueError as e:
        views.print_error(f"Invalid log level {log_level!r}: {e}")
        raise typer.Exit(1)

    if ctx.invoked_subcommand is not None:
        return  # a sub-command handles the rest

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]exercise-timer[/bold cyan]: workout sessions with a countdown")
    views.console.print()

    menu = {
        "1": ("run",     "Start a workout"),
        "2": ("plan",    "Preview a session plan"),
        "3": ("library", "Show exercise library"),
        "0": ("quit",    "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = menu.get(choice, (None, None))[0]
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "run":
        _menu_run()
    elif chosen == "plan":
        minutes = _prompt_minutes()
        if minutes is not None:
            ctx.invoke(plan, minutes=minutes)
    elif chosen == "library":
        ctx.invoke(library)


if __name__ == "__main__":
    app()
