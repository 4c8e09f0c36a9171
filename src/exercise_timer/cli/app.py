"""Shared Typer app object, shared option types, and session helpers."""

import random
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import DEFAULT_SESSION_MINUTES
from ..core.engine.config_loader import load_generation_settings
from ..core.models import Exercise, SessionConfig, SessionPlan
from ..core.planner import generate_session
from ..io.library_loader import load_library
from ..io.serializers import ValidationError
from . import views

# Shared options used by both `plan` and `run`
MinutesOption = Annotated[
    int,
    typer.Option("--minutes", "-m", help="Session length in whole minutes"),
]
EquipmentOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--equipment",
        "-e",
        help="Available equipment (repeatable). Omit to allow everything.",
    ),
]
ExcludeTagOption = Annotated[
    Optional[list[str]],
    typer.Option("--exclude-tag", "-x", help="Skip exercises with this tag (repeatable)"),
]
SeedOption = Annotated[
    Optional[int],
    typer.Option("--seed", "-s", help="Random seed for a reproducible session"),
]
LibraryOption = Annotated[
    Optional[Path],
    typer.Option("--library", "-l", help="Exercise library file (YAML or JSON)"),
]

app = typer.Typer(
    name="exercise-timer",
    help="Randomized, time-balanced bodyweight workout sessions with a countdown timer.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_library(library_path: Path | None) -> list[Exercise]:
    """Load the exercise library or exit with an error message."""
    try:
        return load_library(library_path)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def make_plan(
    minutes: int = DEFAULT_SESSION_MINUTES,
    equipment: list[str] | None = None,
    exclude_tags: list[str] | None = None,
    seed: int | None = None,
    library_path: Path | None = None,
) -> tuple[SessionPlan, tuple[str, ...]]:
    """
    Generate a session plan for CLI commands.

    Prints the error and exits with code 1 when generation fails.

    Returns:
        (plan, warnings) tuple
    """
    exercises = get_library(library_path)
    config = SessionConfig(
        duration_minutes=minutes,
        equipment_filter=frozenset(equipment or ()),
        excluded_tags=frozenset(exclude_tags or ()),
    )
    rng = random.Random(seed) if seed is not None else None

    result = generate_session(config, exercises, rng=rng, settings=load_generation_settings())
    if not result.ok:
        views.print_error(str(result.error))
        raise typer.Exit(1)
    assert result.plan is not None
    return result.plan, result.warnings
