"""
Session generation for exercise-timer.

generate_session() runs the full pipeline:

    filter pool → select → allocate → enforce constraints → arrange

and returns a GenerationResult.  Configuration problems come back as an
InvalidConfiguration failure value; nothing is raised across this
boundary for user errors.
"""

import random
from typing import Sequence

from loguru import logger

from .allocator import allocate
from .arranger import arrange
from .constraints import enforce_constraints
from .errors import GenerationResult, InvalidConfiguration, SessionError
from .models import Exercise, GenerationSettings, SessionConfig, SessionPlan, SessionSegment
from .selector import exercise_count_for_duration, select_exercises


def _normalise(labels: frozenset[str] | set[str] | Sequence[str]) -> frozenset[str]:
    return frozenset(label.strip().casefold() for label in labels if label.strip())


def filter_pool(exercises: Sequence[Exercise], config: SessionConfig) -> list[Exercise]:
    """
    Exercises usable for this session.

    Keeps enabled exercises whose required equipment is available (an
    empty equipment filter means "no filter") and that carry none of the
    excluded tags.  Comparisons are case-insensitive.

    Args:
        exercises: Library exercises
        config: Session configuration

    Returns:
        Filtered exercises in library order
    """
    available = _normalise(config.equipment_filter)
    excluded = _normalise(config.excluded_tags)

    pool: list[Exercise] = []
    for ex in exercises:
        if not ex.enabled:
            continue
        if available and not ex.required_equipment <= available:
            continue
        if excluded and _normalise(ex.tags) & excluded:
            continue
        pool.append(ex)
    return pool


def validate_config(config: SessionConfig) -> None:
    """
    Check the session configuration.

    Raises:
        InvalidConfiguration: If the duration is not a positive integer
    """
    minutes = config.duration_minutes
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise InvalidConfiguration(
            f"Session duration must be a positive whole number of minutes, got {minutes!r}"
        )


def _log_stage(stage: str, segments: Sequence[SessionSegment]) -> None:
    logger.debug(
        "{}: {} segment(s), {} s",
        stage,
        len(segments),
        sum(s.duration_seconds for s in segments),
    )


def build_plan(
    config: SessionConfig,
    exercises: Sequence[Exercise],
    rng: random.Random | None = None,
    settings: GenerationSettings | None = None,
) -> tuple[SessionPlan, list[str]]:
    """
    Run the generation pipeline.

    Args:
        config: Session configuration
        exercises: Library exercises (not modified)
        rng: Random source for selection
        settings: Generation settings (defaults used when None)

    Returns:
        (plan, warnings) tuple

    Raises:
        InvalidConfiguration: If the configuration is invalid or the
            filtered pool is empty
    """
    settings = settings or GenerationSettings()
    validate_config(config)

    pool = filter_pool(exercises, config)
    if not pool:
        raise InvalidConfiguration(
            "No exercises left after applying the equipment and tag filters"
        )

    total_seconds = config.duration_seconds
    count = exercise_count_for_duration(total_seconds, len(pool), settings)
    try:
        selected = select_exercises(pool, count, rng)
        segments = allocate(selected, total_seconds, settings.sided_multiplier)
    except ValueError as e:
        raise InvalidConfiguration(str(e)) from e
    _log_stage("allocated", segments)

    report = enforce_constraints(
        segments,
        min_seconds=settings.min_segment_seconds,
        max_seconds=settings.max_segment_seconds,
    )
    _log_stage("constrained", report.segments)

    ordered = arrange(report.segments)
    _log_stage("arranged", ordered)

    warnings: list[str] = []
    if report.unfunded_seconds:
        warnings.append(
            f"Raising short segments to {settings.min_segment_seconds} s "
            f"adds {report.unfunded_seconds} s to the session"
        )

    plan = SessionPlan(
        segments=ordered,
        total_duration_seconds=total_seconds + report.unfunded_seconds,
        requested_duration_seconds=total_seconds,
    )
    return plan, warnings


def generate_session(
    config: SessionConfig,
    exercises: Sequence[Exercise],
    *,
    rng: random.Random | None = None,
    settings: GenerationSettings | None = None,
) -> GenerationResult:
    """
    Generate a session plan.

    Args:
        config: Session configuration
        exercises: Library exercises, already validated by the provider
        rng: Random source; pass random.Random(seed) for reproducible plans
        settings: Generation settings (defaults used when None)

    Returns:
        GenerationResult with either a plan or an error
    """
    try:
        plan, warnings = build_plan(config, exercises, rng, settings)
    except SessionError as exc:
        logger.info("Session generation failed: {}", exc)
        return GenerationResult(error=exc)

    logger.debug(
        "Generated {} segment(s) over {} s",
        len(plan.segments),
        plan.total_duration_seconds,
    )
    return GenerationResult(plan=plan, warnings=tuple(warnings))
