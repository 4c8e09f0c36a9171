"""
Error taxonomy and failure values.

The engine raises these exceptions internally.  Public entry points
(generate_session and the TimerController operations) catch them and hand
them back inside a GenerationResult / Outcome, so callers never see them
thrown across the boundary.
"""

from dataclasses import dataclass, field

from .models import SessionPlan


class SessionError(Exception):
    """Base class for user-facing session failures."""

    pass


class InvalidConfiguration(SessionError):
    """Non-positive duration, or nothing left after filtering the pool."""

    pass


class NoActiveSession(SessionError):
    """A control operation was attempted before initialize()."""

    pass


class SessionCompleted(SessionError):
    """The session already finished; it cannot be started again."""

    pass


class TimerInvariantError(RuntimeError):
    """Internal timer state became inconsistent during a tick."""

    pass


@dataclass(frozen=True)
class Outcome:
    """Result of a timer control operation."""

    error: SessionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class GenerationResult:
    """
    Result of generate_session().

    Exactly one of ``plan`` / ``error`` is set.  ``warnings`` carries
    non-fatal conditions, e.g. a minimum-duration raise that pushed the
    total above the requested duration.
    """

    plan: SessionPlan | None = None
    error: SessionError | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None and self.plan is not None
