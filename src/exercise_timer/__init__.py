"""
exercise-timer: randomized, time-balanced bodyweight workout sessions.

Typical use:

    import random
    from exercise_timer import SessionConfig, TimerController, generate_session, load_library

    result = generate_session(SessionConfig(duration_minutes=10), load_library(), rng=random.Random(7))
    timer = TimerController()
    timer.initialize(result.plan)
    timer.start()
"""

from loguru import logger

from .core.errors import (
    GenerationResult,
    InvalidConfiguration,
    NoActiveSession,
    Outcome,
    SessionCompleted,
    SessionError,
    TimerInvariantError,
)
from .core.events import EventEmitter
from .core.models import (
    Exercise,
    GenerationSettings,
    SessionConfig,
    SessionPlan,
    SessionSegment,
    TimerPhase,
    TimerState,
)
from .core.planner import generate_session
from .core.ticker import IntervalTicker, ManualTicker
from .core.timer import TimerController
from .io.library_loader import load_library

__version__ = "0.1.0"

logger.disable("exercise_timer")

__all__ = [
    "EventEmitter",
    "Exercise",
    "GenerationResult",
    "GenerationSettings",
    "IntervalTicker",
    "InvalidConfiguration",
    "ManualTicker",
    "NoActiveSession",
    "Outcome",
    "SessionCompleted",
    "SessionConfig",
    "SessionError",
    "SessionPlan",
    "SessionSegment",
    "TimerController",
    "TimerInvariantError",
    "TimerPhase",
    "TimerState",
    "generate_session",
    "load_library",
]
