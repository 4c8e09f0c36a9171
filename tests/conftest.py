"""Shared fixtures for the exercise-timer test suite."""

import pytest
from loguru import logger

from exercise_timer.core.models import Exercise, SessionPlan, SessionSegment


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at an empty directory so user overrides never leak in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logger setup so sinks never outlive a CliRunner invocation."""
    yield
    logger.remove()
    logger.disable("exercise_timer")


def _plan(*durations: int, sided: tuple[int, ...] = ()) -> SessionPlan:
    segments = [
        SessionSegment(
            exercise=Exercise(name=chr(ord("A") + i), sided=i in sided),
            duration_seconds=d,
        )
        for i, d in enumerate(durations)
    ]
    return SessionPlan(segments=segments, total_duration_seconds=sum(durations))


@pytest.fixture
def make_plan():
    """Factory: make_plan(60, 90) is a plan with exercises A and B; sided=(1,) marks B as sided."""
    return _plan
