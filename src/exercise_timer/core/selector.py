"""
Exercise selection for a session.

Chooses which library entries populate a session.  Short sessions get a
random subset; sessions needing more exercises than the library holds
cycle through full shuffled passes so that nothing repeats before every
exercise has been used once.
"""

import random
from typing import Sequence

from .models import Exercise, GenerationSettings


def exercise_count_for_duration(
    total_seconds: int,
    pool_size: int,
    settings: GenerationSettings | None = None,
) -> int:
    """
    Number of exercises to select for a session of ``total_seconds``.

    Targets ``seconds_per_exercise`` per exercise with a floor of
    ``min_exercises``, then caps the result at the pool size.

    Args:
        total_seconds: Session duration in seconds
        pool_size: Exercises left after equipment/tag filtering
        settings: Generation settings (defaults used when None)

    Returns:
        Exercise count, at least 1 when the pool is non-empty
    """
    settings = settings or GenerationSettings()
    wanted = max(settings.min_exercises, total_seconds // settings.seconds_per_exercise)
    return max(1, min(wanted, pool_size))


def shuffled_cycle(
    library: Sequence[Exercise],
    rng: random.Random,
    previous_name: str | None = None,
) -> list[Exercise]:
    """
    One randomized pass over the whole library.

    If the pass would start with the exercise that ended the previous
    pass, it is rotated so that it starts at the first exercise with a
    different name.  When every entry shares the same name the pass is
    returned as shuffled.

    Args:
        library: Exercises to shuffle (not modified)
        rng: Random source
        previous_name: Name of the last exercise already selected, if any

    Returns:
        New list containing every library entry exactly once
    """
    cycle = list(library)
    rng.shuffle(cycle)

    if previous_name is None or cycle[0].name != previous_name:
        return cycle

    for idx, ex in enumerate(cycle):
        if ex.name != previous_name:
            return cycle[idx:] + cycle[:idx]
    return cycle


def select_exercises(
    library: Sequence[Exercise],
    count: int,
    rng: random.Random | None = None,
) -> list[Exercise]:
    """
    Select ``count`` exercises from ``library`` without premature repeats.

    Args:
        library: Available exercises (non-empty)
        count: Number of exercises wanted (>= 1)
        rng: Random source; a fresh unseeded Random when None

    Returns:
        Selected exercises in session order

    Raises:
        ValueError: If library is empty or count < 1
    """
    if not library:
        raise ValueError("Cannot select from an empty exercise library")
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    rng = rng or random.Random()

    if count <= len(library):
        return shuffled_cycle(library, rng)[:count]

    selected: list[Exercise] = []
    while len(selected) < count:
        previous_name = selected[-1].name if selected else None
        cycle = shuffled_cycle(library, rng, previous_name)
        selected.extend(cycle[: count - len(selected)])
    return selected
