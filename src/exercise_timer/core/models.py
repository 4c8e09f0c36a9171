"""
Data models for exercise-timer.

Exercises come from the library provider and are treated as read-only.
Segments and plans are produced by the generation pipeline; the timer
works on its own copy of a plan so skip reallocation never leaks back
into the caller's plan.
"""

import enum
from dataclasses import dataclass, field

from .config import (
    MAX_DIFFICULTY,
    MAX_SEGMENT_SECONDS,
    MIN_DIFFICULTY,
    MIN_EXERCISES,
    MIN_SEGMENT_SECONDS,
    NO_EQUIPMENT_LABELS,
    SECONDS_PER_EXERCISE,
    SIDED_MULTIPLIER,
)


@dataclass(frozen=True)
class Exercise:
    """
    One entry of the exercise library.

    ``difficulty`` is a weight in [0.5, 2.0]; harder exercises get less
    time.  ``equipment`` lists required items ("None" or empty means
    bodyweight only).  ``sided`` exercises are done once per side.
    """

    name: str
    difficulty: float = 1.0
    equipment: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    sided: bool = False
    enabled: bool = True

    def __post_init__(self) -> None:
        """Validate and normalise exercise data."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Exercise name must be a non-empty string")
        if not MIN_DIFFICULTY <= self.difficulty <= MAX_DIFFICULTY:
            raise ValueError(
                f"Exercise difficulty must be between {MIN_DIFFICULTY} and "
                f"{MAX_DIFFICULTY}, got {self.difficulty}"
            )
        # frozen: go through object.__setattr__ to store the normalised values
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "equipment", tuple(self.equipment))
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def required_equipment(self) -> frozenset[str]:
        """Equipment items actually needed, with "None" placeholders removed."""
        return frozenset(
            item.strip().casefold()
            for item in self.equipment
            if item.strip().casefold() not in NO_EQUIPMENT_LABELS
        )


@dataclass(frozen=True)
class SessionConfig:
    """
    Per-request session configuration.

    Not validated here: generate_session() reports a bad configuration as
    an InvalidConfiguration failure value instead of raising.
    """

    duration_minutes: int
    equipment_filter: frozenset[str] = frozenset()
    excluded_tags: frozenset[str] = frozenset()

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60


@dataclass(frozen=True)
class GenerationSettings:
    """Tunable parameters of the generation pipeline."""

    min_segment_seconds: int = MIN_SEGMENT_SECONDS
    max_segment_seconds: int = MAX_SEGMENT_SECONDS
    seconds_per_exercise: int = SECONDS_PER_EXERCISE
    min_exercises: int = MIN_EXERCISES
    sided_multiplier: float = SIDED_MULTIPLIER

    def __post_init__(self) -> None:
        if self.min_segment_seconds <= 0:
            raise ValueError("min_segment_seconds must be positive")
        if self.max_segment_seconds < self.min_segment_seconds:
            raise ValueError("max_segment_seconds must be >= min_segment_seconds")
        if self.max_segment_seconds < 2 * self.min_segment_seconds - 1:
            # otherwise splitting a segment just over the maximum undercuts the minimum
            raise ValueError("max_segment_seconds must be >= 2 * min_segment_seconds - 1")
        if self.seconds_per_exercise <= 0:
            raise ValueError("seconds_per_exercise must be positive")
        if self.min_exercises < 1:
            raise ValueError("min_exercises must be at least 1")
        if self.sided_multiplier <= 0:
            raise ValueError("sided_multiplier must be positive")


@dataclass
class SessionSegment:
    """One scheduled exercise instance with its countdown duration."""

    exercise: Exercise
    duration_seconds: int

    def __post_init__(self) -> None:
        if self.duration_seconds <= 0:
            raise ValueError("duration_seconds must be positive")


@dataclass
class SessionPlan:
    """
    Ordered segments for one workout.

    ``total_duration_seconds`` always equals the sum of segment durations.
    ``requested_duration_seconds`` is what the configuration asked for;
    the two differ only when the minimum-duration pass could not be funded.
    """

    segments: list[SessionSegment]
    total_duration_seconds: int
    requested_duration_seconds: int = 0

    def __post_init__(self) -> None:
        """Validate plan data."""
        if not self.segments:
            raise ValueError("A session plan needs at least one segment")
        if self.total_duration_seconds <= 0:
            raise ValueError("total_duration_seconds must be positive")
        if self.requested_duration_seconds == 0:
            self.requested_duration_seconds = self.total_duration_seconds
        if not self.is_conserved():
            raise ValueError(
                f"Segment durations sum to {self.segment_total} s, "
                f"expected {self.total_duration_seconds} s"
            )

    @property
    def segment_total(self) -> int:
        """Sum of all segment durations."""
        return sum(s.duration_seconds for s in self.segments)

    @property
    def overflow_seconds(self) -> int:
        """Seconds the plan runs over the requested duration."""
        return self.total_duration_seconds - self.requested_duration_seconds

    def is_conserved(self) -> bool:
        return self.segment_total == self.total_duration_seconds

    def copy(self) -> "SessionPlan":
        """Independent copy: segments are new objects, exercises are shared."""
        return SessionPlan(
            segments=[
                SessionSegment(exercise=s.exercise, duration_seconds=s.duration_seconds)
                for s in self.segments
            ],
            total_duration_seconds=self.total_duration_seconds,
            requested_duration_seconds=self.requested_duration_seconds,
        )


class TimerPhase(str, enum.Enum):
    """Lifecycle phase of the countdown timer."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the timer, as returned by TimerController.get_state()."""

    current_index: int = 0
    remaining_seconds: int = 0
    phase: TimerPhase = TimerPhase.NOT_STARTED
    total_elapsed_seconds: int = 0

    def __post_init__(self) -> None:
        if self.current_index < 0:
            raise ValueError("current_index must be non-negative")
        if self.remaining_seconds < 0:
            raise ValueError("remaining_seconds must be non-negative")
        if self.total_elapsed_seconds < 0:
            raise ValueError("total_elapsed_seconds must be non-negative")


@dataclass
class ConstraintReport:
    """Result of the duration constraint engine."""

    segments: list[SessionSegment] = field(default_factory=list)
    unfunded_seconds: int = 0  # minimum-raise that no slack could pay for
