"""
JSON/YAML serialization for exercise-timer models.

Handles conversion between dataclasses and plain dicts, and validation of
exercise records coming from library files.
"""

import json
from typing import Any

from ..core.config import MAX_DIFFICULTY, MIN_DIFFICULTY
from ..core.models import Exercise, SessionPlan, SessionSegment


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_name(name: Any) -> str:
    """
    Validate an exercise name.

    Args:
        name: Raw name value

    Returns:
        Trimmed name

    Raises:
        ValidationError: If name is not a non-empty string
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Invalid exercise name: {name!r}. Must be a non-empty string.")
    return name.strip()


def validate_difficulty(value: Any) -> float:
    """
    Validate an exercise difficulty.

    Args:
        value: Raw difficulty value

    Returns:
        Difficulty as float

    Raises:
        ValidationError: If value is not a number in [0.5, 2.0]
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Invalid difficulty: {value!r}. Must be a number.")
    if not MIN_DIFFICULTY <= value <= MAX_DIFFICULTY:
        raise ValidationError(
            f"Invalid difficulty: {value} (must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY})"
        )
    return float(value)


def _string_list(value: Any, field_name: str) -> tuple[str, ...]:
    """Accept a single string or a list of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ValidationError(f"{field_name} must be a string or a list of strings")


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert a raw dict (from YAML or JSON) to an Exercise.

    ``weight`` is accepted as an alias of ``difficulty``.

    Args:
        data: Dict with at least ``name`` and ``difficulty``

    Returns:
        Validated Exercise

    Raises:
        ValidationError: If a field is missing or invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Exercise must be a mapping")
    if "name" not in data:
        raise ValidationError("Exercise missing required field: name")

    difficulty = data.get("difficulty", data.get("weight"))
    if difficulty is None:
        raise ValidationError(f"Exercise {data['name']!r} missing required field: difficulty")

    return Exercise(
        name=validate_name(data["name"]),
        difficulty=validate_difficulty(difficulty),
        equipment=_string_list(data.get("equipment"), "equipment"),
        tags=_string_list(data.get("tags"), "tags"),
        sided=bool(data.get("sided", False)),
        enabled=bool(data.get("enabled", True)),
    )


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """
    Convert Exercise to JSON-compatible dict.

    Args:
        exercise: Exercise to convert

    Returns:
        Dict representation
    """
    return {
        "name": exercise.name,
        "difficulty": exercise.difficulty,
        "equipment": list(exercise.equipment),
        "tags": list(exercise.tags),
        "sided": exercise.sided,
        "enabled": exercise.enabled,
    }


def segment_to_dict(segment: SessionSegment) -> dict[str, Any]:
    """Convert SessionSegment to JSON-compatible dict."""
    return {
        "exercise": exercise_to_dict(segment.exercise),
        "duration_seconds": segment.duration_seconds,
    }


def plan_to_dict(plan: SessionPlan) -> dict[str, Any]:
    """
    Convert SessionPlan to JSON-compatible dict.

    Args:
        plan: Plan to convert

    Returns:
        Dict representation
    """
    return {
        "total_duration_seconds": plan.total_duration_seconds,
        "requested_duration_seconds": plan.requested_duration_seconds,
        "segments": [segment_to_dict(s) for s in plan.segments],
    }


def plan_to_json(plan: SessionPlan) -> str:
    """Serialize a plan as pretty-printed JSON."""
    return json.dumps(plan_to_dict(plan), indent=2)


def dict_to_plan(data: dict[str, Any]) -> SessionPlan:
    """
    Convert a dict produced by plan_to_dict back to a SessionPlan.

    Raises:
        ValidationError: If the structure is invalid or durations do not
            sum to the total
    """
    try:
        segments = [
            SessionSegment(
                exercise=dict_to_exercise(s["exercise"]),
                duration_seconds=int(s["duration_seconds"]),
            )
            for s in data["segments"]
        ]
        return SessionPlan(
            segments=segments,
            total_duration_seconds=int(data["total_duration_seconds"]),
            requested_duration_seconds=int(data.get("requested_duration_seconds", 0)),
        )
    except (KeyError, TypeError) as e:
        raise ValidationError(f"Invalid plan data: {e}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e
