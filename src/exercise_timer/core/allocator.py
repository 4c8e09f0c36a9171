"""
Time allocation for selected exercises.

Splits the session duration across exercises inversely to their
difficulty: harder exercises get less time, easier ones more.  Integer
seconds are produced with the largest-remainder method so the total is
conserved exactly.
"""

import math
from typing import Sequence

from .config import SIDED_MULTIPLIER
from .models import Exercise, SessionSegment


def largest_remainder(raw_values: Sequence[float], total: int) -> list[int]:
    """
    Round fractional shares to integers that sum exactly to ``total``.

    Every value is floored; the seconds lost to flooring are handed out
    one at a time to the values with the largest discarded fractional
    part.  Ties go to the earlier value.

    Args:
        raw_values: Non-negative fractional shares, ideally summing to total
        total: Integer the result must sum to

    Returns:
        List of integers, same length as raw_values

    Raises:
        ValueError: If flooring already overshoots ``total``
    """
    floored = [int(math.floor(v)) for v in raw_values]
    deficit = total - sum(floored)
    if deficit < 0:
        raise ValueError(
            f"Shares floor to {sum(floored)}, which exceeds the total of {total}"
        )
    if deficit == 0:
        return floored

    fractions = [v - f for v, f in zip(raw_values, floored)]
    # sorted() is stable, so equal remainders keep their original order
    order = sorted(range(len(raw_values)), key=lambda i: fractions[i], reverse=True)

    # deficit can exceed the count when raw_values do not sum to total
    i = 0
    while deficit > 0:
        floored[order[i % len(order)]] += 1
        deficit -= 1
        i += 1
    return floored


def inverse_difficulty_shares(
    exercises: Sequence[Exercise],
    total_seconds: int,
    sided_multiplier: float = SIDED_MULTIPLIER,
) -> list[float]:
    """
    Fractional seconds per exercise before rounding.

    base = total / Σ(1/difficulty); each exercise gets base / difficulty.
    Sided exercises are multiplied by ``sided_multiplier`` afterwards and
    the shares are rescaled back to ``total_seconds``.

    Args:
        exercises: Selected exercises, in session order
        total_seconds: Session duration to distribute
        sided_multiplier: Extra factor for per-side exercises

    Returns:
        Fractional shares summing to total_seconds
    """
    inverse_sum = sum(1.0 / ex.difficulty for ex in exercises)
    base_time = total_seconds / inverse_sum
    raw = [base_time / ex.difficulty for ex in exercises]

    if any(ex.sided for ex in exercises):
        raw = [
            share * sided_multiplier if ex.sided else share
            for share, ex in zip(raw, exercises)
        ]
        # rescale to the total: the multiplier only moves share between exercises
        scale = total_seconds / sum(raw)
        raw = [share * scale for share in raw]

    return raw


def allocate(
    exercises: Sequence[Exercise],
    total_seconds: int,
    sided_multiplier: float = SIDED_MULTIPLIER,
) -> list[SessionSegment]:
    """
    Convert exercises into timed segments summing to ``total_seconds``.

    Args:
        exercises: Selected exercises (non-empty)
        total_seconds: Session duration in seconds (positive)
        sided_multiplier: Extra share for sided exercises

    Returns:
        One SessionSegment per exercise, in the same order

    Raises:
        ValueError: If exercises is empty or total_seconds is too small to
            give every exercise at least one second
    """
    if not exercises:
        raise ValueError("Cannot allocate time to an empty exercise list")
    if total_seconds < len(exercises):
        raise ValueError(
            f"{total_seconds} s is not enough for {len(exercises)} exercises"
        )

    if len(exercises) == 1:
        return [SessionSegment(exercise=exercises[0], duration_seconds=total_seconds)]

    shares = inverse_difficulty_shares(exercises, total_seconds, sided_multiplier)
    durations = largest_remainder(shares, total_seconds)

    # A tiny share can floor to zero; borrow from the longest segment.
    for i, d in enumerate(durations):
        if d <= 0:
            donor = max(range(len(durations)), key=lambda j: durations[j])
            durations[donor] -= 1 - d
            durations[i] = 1

    return [
        SessionSegment(exercise=ex, duration_seconds=d)
        for ex, d in zip(exercises, durations)
    ]
