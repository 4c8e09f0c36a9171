"""
Configuration constants for session generation and the countdown timer.

All adjustable parameters are centralized here for easy tuning.  Values
marked as session settings can be overridden from YAML, see
core/engine/config_loader.py.
"""

from typing import Final

# =============================================================================
# EXERCISE VALIDATION
# =============================================================================

MIN_DIFFICULTY: Final[float] = 0.5
MAX_DIFFICULTY: Final[float] = 2.0

# Equipment labels that mean "nothing required"
NO_EQUIPMENT_LABELS: Final[frozenset[str]] = frozenset({"none", ""})

# =============================================================================
# SESSION SETTINGS (overridable via settings.yaml)
# =============================================================================

MIN_SEGMENT_SECONDS: Final[int] = 20  # No segment shorter than this
MAX_SEGMENT_SECONDS: Final[int] = 120  # Longer segments are split
SECONDS_PER_EXERCISE: Final[int] = 40  # Target time per selected exercise
MIN_EXERCISES: Final[int] = 3  # Floor on exercise count (before pool cap)
SIDED_MULTIPLIER: Final[float] = 1.5  # Extra share for per-side exercises

DEFAULT_SESSION_MINUTES: Final[int] = 5

# =============================================================================
# SEQUENCE ARRANGEMENT
# =============================================================================

# Tags that describe the kind of work rather than the body part.  Ignored
# when comparing consecutive exercises for muscle-group overlap.
CATEGORY_TAGS: Final[frozenset[str]] = frozenset(
    {
        "cardio",
        "strength",
        "mobility",
        "flexibility",
        "balance",
        "plyometric",
        "isometric",
        "low-impact",
        "high-impact",
        "low impact",
        "high impact",
    }
)

# Arrangement is only meaningful from this many segments on
MIN_SEGMENTS_FOR_PROGRESSION: Final[int] = 3

# =============================================================================
# TIMER
# =============================================================================

TICK_INTERVAL_SECONDS: Final[float] = 1.0
