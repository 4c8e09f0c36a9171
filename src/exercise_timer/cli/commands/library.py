"""Library command: list the exercises available for sessions."""

import json
from typing import Annotated

import typer

from ...io.library_loader import enabled_exercises
from ...io.serializers import exercise_to_dict
from .. import views
from ..app import LibraryOption, app, get_library


@app.command()
def library(
    library_path: LibraryOption = None,
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Include disabled exercises"),
    ] = False,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON (importable with --library)"),
    ] = False,
) -> None:
    """
    Show the exercise library.

    Without --library this is the bundled library merged with
    ~/.exercise-timer/exercises.yaml.
    """
    exercises = get_library(library_path)
    shown = exercises if show_all else enabled_exercises(exercises)

    if json_out:
        print(json.dumps({"exercises": [exercise_to_dict(ex) for ex in shown]}, indent=2))
        return

    views.print_library(shown, show_enabled=show_all)
    disabled = len(exercises) - len(enabled_exercises(exercises))
    if disabled and not show_all:
        views.print_info(f"{disabled} disabled exercise(s) hidden; use --all to list them.")
