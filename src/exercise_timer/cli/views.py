"""
Rich-based output formatting for the CLI.

Provides tables for the exercise library and session plans, the cue lines
printed while a session runs, and the shared message helpers.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import Exercise, SessionPlan, SessionSegment

console = Console()


def format_clock(seconds: int) -> str:
    """
    Format seconds as zero-padded MM:SS.

    Minutes are not wrapped into hours: 3661 → "61:01".
    """
    if seconds < 0:
        raise ValueError("seconds must be non-negative")
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_time_text(seconds: int) -> str:
    """
    Format seconds the way a coach would say them.

    Examples:
        5 → "5", 30 → "30 seconds", 60 → "one minute",
        65 → "one minute 5 seconds", 121 → "2 minutes one second"
    """
    minutes, secs = divmod(seconds, 60)
    if seconds <= 10:
        return str(seconds)
    if seconds < 60:
        return f"{seconds} seconds"

    minutes_text = "one minute" if minutes == 1 else f"{minutes} minutes"
    if secs == 0:
        return minutes_text
    seconds_text = "one second" if secs == 1 else f"{secs} seconds"
    return f"{minutes_text} {seconds_text}"


def should_announce(remaining: int) -> bool:
    """True at every 10-second mark and for the final 3-2-1 countdown."""
    return remaining > 0 and (remaining % 10 == 0 or remaining in (1, 2, 3))


def _difficulty_cell(difficulty: float) -> str:
    if difficulty >= 1.5:
        return f"[red]{difficulty:.1f}[/red]"
    if difficulty <= 0.9:
        return f"[green]{difficulty:.1f}[/green]"
    return f"{difficulty:.1f}"


def _equipment_cell(exercise: Exercise) -> str:
    needed = [e for e in exercise.equipment if e.strip().casefold() in exercise.required_equipment]
    return ", ".join(needed) if needed else "-"


def format_library_table(exercises: list[Exercise], show_enabled: bool = False) -> Table:
    """
    Create a Rich table listing library exercises.

    Args:
        exercises: Exercises to display
        show_enabled: Add an "On" column (used when disabled entries are listed)

    Returns:
        Rich Table object
    """
    table = Table(title="Exercise Library")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Diff", justify="right")
    table.add_column("Equipment", style="magenta")
    table.add_column("Tags", style="green")
    table.add_column("Sided", justify="center")
    if show_enabled:
        table.add_column("On", justify="center")

    for i, ex in enumerate(exercises, 1):
        row = [
            str(i),
            ex.name,
            _difficulty_cell(ex.difficulty),
            _equipment_cell(ex),
            ", ".join(ex.tags) or "-",
            "✓" if ex.sided else "",
        ]
        if show_enabled:
            row.append("✓" if ex.enabled else "[dim]✗[/dim]")
        table.add_row(*row)

    return table


def print_library(exercises: list[Exercise], show_enabled: bool = False) -> None:
    """Print the exercise library table."""
    if not exercises:
        console.print("[yellow]No exercises in the library.[/yellow]")
        return
    console.print(format_library_table(exercises, show_enabled))


def format_plan_table(plan: SessionPlan) -> Table:
    """
    Create a Rich table for a session plan.

    Args:
        plan: Plan to display

    Returns:
        Rich Table object
    """
    table = Table(title=f"Session Plan ({format_clock(plan.total_duration_seconds)})")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Time", justify="right", style="bold")
    table.add_column("Diff", justify="right")
    table.add_column("Tags", style="green")

    for i, seg in enumerate(plan.segments, 1):
        name = seg.exercise.name + (" [dim](L/R)[/dim]" if seg.exercise.sided else "")
        table.add_row(
            str(i),
            name,
            format_clock(seg.duration_seconds),
            _difficulty_cell(seg.exercise.difficulty),
            ", ".join(seg.exercise.tags) or "-",
        )

    return table


def print_plan(plan: SessionPlan, warnings: tuple[str, ...] | list[str] = ()) -> None:
    """Print a plan table followed by its totals and any generation warnings."""
    console.print(format_plan_table(plan))
    console.print(
        f"[dim]{len(plan.segments)} segments, total "
        f"{format_clock(plan.total_duration_seconds)}[/dim]"
    )
    if plan.overflow_seconds:
        console.print(
            f"[dim]Requested {format_clock(plan.requested_duration_seconds)}, "
            f"runs {plan.overflow_seconds} s over[/dim]"
        )
    for message in warnings:
        print_warning(message)


# ---------------------------------------------------------------------------
# Live session cues
# ---------------------------------------------------------------------------


def print_exercise_start(index: int, count: int, segment: SessionSegment) -> None:
    """Announce the segment that is starting."""
    console.print()
    console.print(
        f"[bold cyan]▶ {index + 1}/{count}  {segment.exercise.name}[/bold cyan]"
        f"  [dim]{format_time_text(segment.duration_seconds)}[/dim]"
    )
    if segment.exercise.sided:
        console.print("[dim]  one side first, switch halfway[/dim]")


def print_remaining(remaining: int) -> None:
    console.print(f"  {format_clock(remaining)}  [dim]{format_time_text(remaining)}[/dim]")


def print_switch_sides() -> None:
    console.print("[bold yellow]  ⇄ Switch sides![/bold yellow]")


def print_complete(elapsed_seconds: int) -> None:
    console.print()
    console.print(
        f"[bold green]Workout complete! Great job![/bold green] "
        f"[dim]({format_clock(elapsed_seconds)} of exercise)[/dim]"
    )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
