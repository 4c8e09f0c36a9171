"""
Integration tests for session generation.

Each test runs the full pipeline: library → generate_session → SessionPlan,
using the bundled default library unless stated otherwise.
"""

import random

import pytest

from exercise_timer.core.errors import GenerationResult, InvalidConfiguration
from exercise_timer.core.models import Exercise, GenerationSettings, SessionConfig
from exercise_timer.core.planner import filter_pool, generate_session
from exercise_timer.io.library_loader import load_library


@pytest.fixture
def library():
    return load_library()


def _generate(library, minutes: int, seed: int = 0, **config) -> GenerationResult:
    return generate_session(
        SessionConfig(duration_minutes=minutes, **config),
        library,
        rng=random.Random(seed),
    )


# ===========================================================================
# Conservation and bounds
# ===========================================================================


class TestGeneratedPlans:
    @pytest.mark.parametrize("minutes", [1, 2, 3, 5, 10, 15, 30, 60])
    @pytest.mark.parametrize("seed", [0, 1, 2, 17])
    def test_time_conserved_and_bounded(self, library, minutes, seed):
        result = _generate(library, minutes, seed)
        assert result.ok
        plan = result.plan
        durations = [s.duration_seconds for s in plan.segments]
        assert sum(durations) == minutes * 60
        assert plan.total_duration_seconds == minutes * 60
        assert plan.overflow_seconds == 0
        assert all(20 <= d <= 120 for d in durations)
        assert result.warnings == ()

    def test_one_minute_session(self, library):
        # 3 exercises minimum, 60 s → everything lands on the 20 s floor
        plan = _generate(library, 1).plan
        assert [s.duration_seconds for s in plan.segments] == [20, 20, 20]

    def test_seed_reproducibility(self, library):
        a = _generate(library, 10, seed=123).plan
        b = _generate(library, 10, seed=123).plan
        assert [(s.exercise.name, s.duration_seconds) for s in a.segments] == [
            (s.exercise.name, s.duration_seconds) for s in b.segments
        ]

    def test_long_session_uses_every_exercise(self, library):
        plan = _generate(library, 30).plan
        names = {s.exercise.name for s in plan.segments}
        assert names == {ex.name for ex in library if ex.enabled}

    def test_library_not_mutated(self, library):
        before = list(library)
        _generate(library, 20)
        assert library == before


# ===========================================================================
# Filtering
# ===========================================================================


class TestFiltering:
    def test_equipment_filter(self, library):
        pool = filter_pool(library, SessionConfig(5, equipment_filter=frozenset({"MAT"})))
        names = {ex.name for ex in pool}
        assert "Sit-ups" in names
        assert "Push-ups" in names  # bodyweight always allowed
        assert "Wall Sit" not in names

    def test_empty_equipment_filter_allows_everything(self, library):
        assert len(filter_pool(library, SessionConfig(5))) == len(library)

    def test_excluded_tags_case_insensitive(self, library):
        pool = filter_pool(library, SessionConfig(5, excluded_tags=frozenset({"HIGH-IMPACT"})))
        names = {ex.name for ex in pool}
        assert "Burpees" not in names
        assert "Jumping Jacks" not in names
        assert "Squats" in names

    def test_disabled_exercises_skipped(self):
        exercises = [Exercise("A"), Exercise("B", enabled=False)]
        assert [ex.name for ex in filter_pool(exercises, SessionConfig(5))] == ["A"]

    def test_plan_respects_filters(self, library):
        result = _generate(
            library,
            10,
            equipment_filter=frozenset({"mat"}),
            excluded_tags=frozenset({"cardio"}),
        )
        for seg in result.plan.segments:
            assert seg.exercise.required_equipment <= {"mat"}
            assert "cardio" not in seg.exercise.tags


# ===========================================================================
# Failures and warnings
# ===========================================================================


class TestGenerationErrors:
    @pytest.mark.parametrize("minutes", [0, -5])
    def test_non_positive_duration(self, library, minutes):
        result = _generate(library, minutes)
        assert not result.ok
        assert result.plan is None
        assert isinstance(result.error, InvalidConfiguration)

    def test_fractional_duration_rejected(self, library):
        result = generate_session(SessionConfig(duration_minutes=2.5), library)
        assert isinstance(result.error, InvalidConfiguration)

    def test_empty_pool_after_filtering(self):
        exercises = [Exercise("Wall Sit", equipment=("Wall",))]
        result = _generate(exercises, 5, equipment_filter=frozenset({"Mat"}))
        assert isinstance(result.error, InvalidConfiguration)

    def test_more_exercises_than_seconds(self):
        exercises = [Exercise(f"Move {i}") for i in range(70)]
        settings = GenerationSettings(min_exercises=70)
        result = generate_session(
            SessionConfig(duration_minutes=1),
            exercises,
            rng=random.Random(0),
            settings=settings,
        )
        # 70 exercises cannot each get a whole second of a 60 s session
        assert not result.ok
        assert result.plan is None
        assert isinstance(result.error, InvalidConfiguration)

    def test_unfunded_minimum_is_surfaced(self, library):
        settings = GenerationSettings(
            min_segment_seconds=40,
            max_segment_seconds=120,
            seconds_per_exercise=10,
        )
        result = generate_session(
            SessionConfig(duration_minutes=1),
            library,
            rng=random.Random(5),
            settings=settings,
        )
        # 6 exercises × 40 s = 240 s for a 60 s request
        assert result.ok
        plan = result.plan
        assert len(plan.segments) == 6
        assert all(s.duration_seconds == 40 for s in plan.segments)
        assert plan.requested_duration_seconds == 60
        assert plan.total_duration_seconds == 240
        assert plan.overflow_seconds == 180
        assert plan.is_conserved()
        assert len(result.warnings) == 1
