"""Planning command: generate and show a session plan."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_SESSION_MINUTES
from ...io.serializers import plan_to_dict, plan_to_json
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


@app.command()
def plan(
    minutes: MinutesOption = DEFAULT_SESSION_MINUTES,
    equipment: EquipmentOption = None,
    exclude_tags: ExcludeTagOption = None,
    seed: SeedOption = None,
    library_path: LibraryOption = None,
    save: Annotated[
        Optional[Path],
        typer.Option("--save", help="Also write the plan as JSON (run it later with run --plan-file)"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Generate a session plan and show it.

    Harder exercises get less time, sided exercises get extra time, and
    every segment lasts between the configured minimum and maximum.
    """
    session_plan, warnings = make_plan(minutes, equipment, exclude_tags, seed, library_path)

    if save is not None:
        try:
            save.write_text(plan_to_json(session_plan) + "\n", encoding="utf-8")
        except OSError as e:
            views.print_error(f"Cannot write {save}: {e}")
            raise typer.Exit(1)

    if json_out:
        data = plan_to_dict(session_plan)
        data["warnings"] = list(warnings)
        print(json.dumps(data, indent=2))
        return

    views.print_plan(session_plan, warnings)
    if save is not None:
        views.print_success(f"Plan saved to {save}")
