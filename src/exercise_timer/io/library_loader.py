"""
YAML/JSON → Exercise library loader.

Loads the default exercise library bundled as
``src/exercise_timer/exercises.yaml``.

User overrides: place an ``exercises.yaml`` in ``~/.exercise-timer/``.
An entry whose name matches a bundled exercise replaces it field by field
(only changed keys need to be listed); entries with new names are added
to the library.

A specific file can be loaded instead with load_library(path).  Both
``{"exercises": [...]}`` and a bare list are accepted, as YAML or JSON.

Usage:
    from exercise_timer.io.library_loader import load_library
    exercises = load_library()
"""

from __future__ import annotations

import importlib.resources
import json
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..core.engine.config_loader import get_user_dir
from ..core.models import Exercise
from .serializers import ValidationError, dict_to_exercise


def _read_raw(path: Path) -> Any:
    """Parse a YAML or JSON file.

    Raises:
        ValidationError: If the file cannot be read or parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.suffix.lower() == ".json":
                return json.load(fh)
            return yaml.safe_load(fh)
    except OSError as e:
        raise ValidationError(f"Cannot read {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"Invalid library file {path}: {e}") from e


def _raw_entries(data: Any, source: str) -> list[Any]:
    """Return the list of exercise records from a parsed library document."""
    if isinstance(data, dict):
        data = data.get("exercises")
    if not isinstance(data, list):
        raise ValidationError(f"{source}: expected a list of exercises")
    return data


def exercises_from_data(data: Any, source: str = "library") -> list[Exercise]:
    """
    Convert parsed library data to exercises.

    Invalid entries and duplicate names are skipped with a warning.

    Args:
        data: ``{"exercises": [...]}`` or a bare list of exercise dicts
        source: Label used in warning messages

    Returns:
        Valid exercises in file order

    Raises:
        ValidationError: If the document has no exercise list at all
    """
    exercises: list[Exercise] = []
    seen: set[str] = set()
    for i, raw in enumerate(_raw_entries(data, source)):
        try:
            ex = dict_to_exercise(raw)
        except ValidationError as exc:
            warnings.warn(
                f"exercise-timer: skipping entry {i + 1} in {source}: {exc}",
                stacklevel=2,
            )
            continue
        if ex.name in seen:
            warnings.warn(
                f"exercise-timer: skipping duplicate exercise {ex.name!r} in {source}",
                stacklevel=2,
            )
            continue
        seen.add(ex.name)
        exercises.append(ex)
    return exercises


def load_library_file(path: str | Path) -> list[Exercise]:
    """
    Load exercises from one YAML or JSON file.

    Raises:
        ValidationError: If the file is unreadable or has no exercise list
    """
    path = Path(path)
    return exercises_from_data(_read_raw(path), source=str(path))


def get_bundled_library_path() -> Path:
    """Return the path to the bundled exercises.yaml."""
    ref = importlib.resources.files("exercise_timer").joinpath("exercises.yaml")
    with importlib.resources.as_file(ref) as p:
        return p


def get_user_library_path() -> Path | None:
    """Return ~/.exercise-timer/exercises.yaml if it exists, else None."""
    p = get_user_dir() / "exercises.yaml"
    return p if p.exists() else None


def _merge_by_name(base: list[dict], override: list[dict]) -> list[dict]:
    """Overlay user records onto bundled ones, matching on trimmed name."""
    merged = [dict(r) for r in base]
    index = {
        str(r.get("name", "")).strip(): i
        for i, r in enumerate(merged)
        if isinstance(r, dict)
    }
    for record in override:
        if not isinstance(record, dict):
            merged.append(record)
            continue
        key = str(record.get("name", "")).strip()
        if key in index:
            merged[index[key]] = {**merged[index[key]], **record}
        else:
            merged.append(record)
    return merged


def load_library(path: str | Path | None = None) -> list[Exercise]:
    """
    Return the exercise library.

    With ``path``, loads just that file.  Otherwise loads the bundled
    default library merged with ~/.exercise-timer/exercises.yaml.

    Raises:
        ValidationError: If an explicitly given file cannot be loaded
    """
    if path is not None:
        return load_library_file(path)

    bundled = get_bundled_library_path()
    records = _raw_entries(_read_raw(bundled), str(bundled))

    user = get_user_library_path()
    if user is not None:
        try:
            user_records = _raw_entries(_read_raw(user), str(user))
        except ValidationError as exc:
            warnings.warn(
                f"exercise-timer: ignoring user library ({exc})",
                stacklevel=2,
            )
        else:
            records = _merge_by_name(records, user_records)

    return exercises_from_data(records, source="default library")


def enabled_exercises(exercises: list[Exercise]) -> list[Exercise]:
    """Return only the exercises marked as enabled."""
    return [ex for ex in exercises if ex.enabled]
