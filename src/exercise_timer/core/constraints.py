"""
Duration constraints for session segments.

Keeps every segment within [min_seconds, max_seconds] while conserving
the session total:

- minimum pass: short segments are raised to the minimum, paid for by
  the slack of longer segments
- maximum pass: long segments are split into several pieces of the same
  exercise, spread out among the other segments
"""

import math
from typing import Sequence

from loguru import logger

from .allocator import largest_remainder
from .config import MAX_SEGMENT_SECONDS, MIN_SEGMENT_SECONDS
from .models import ConstraintReport, SessionSegment


def apply_minimum(segments: Sequence[SessionSegment], min_seconds: int) -> int:
    """
    Raise segments below ``min_seconds`` in place, funding the raise from slack.

    Slack is the amount a segment exceeds the minimum.  The deficit is
    taken from segments with slack in proportion to their share of the
    total slack.  When there is not enough slack, every donor is lowered
    to the minimum and the rest of the raise stays unfunded.

    Args:
        segments: Segments to adjust (mutated)
        min_seconds: Minimum segment duration

    Returns:
        Seconds of raise that could not be funded (0 when the total is kept)
    """
    deficit = 0
    for seg in segments:
        if seg.duration_seconds < min_seconds:
            deficit += min_seconds - seg.duration_seconds
            seg.duration_seconds = min_seconds

    if deficit == 0:
        return 0

    donors = [seg for seg in segments if seg.duration_seconds > min_seconds]
    slacks = [seg.duration_seconds - min_seconds for seg in donors]
    total_slack = sum(slacks)
    funded = min(deficit, total_slack)

    if funded > 0:
        shares = [funded * s / total_slack for s in slacks]
        reductions = largest_remainder(shares, funded)

        leftover = 0
        for i, slack in enumerate(slacks):
            if reductions[i] > slack:
                leftover += reductions[i] - slack
                reductions[i] = slack
        for i, slack in enumerate(slacks):
            if leftover == 0:
                break
            extra = min(leftover, slack - reductions[i])
            reductions[i] += extra
            leftover -= extra

        for seg, cut in zip(donors, reductions):
            seg.duration_seconds -= cut

    unfunded = deficit - funded
    if unfunded:
        logger.warning(
            "Minimum segment raise of {} s could not be funded; "
            "session runs {} s over",
            deficit,
            unfunded,
        )
    return unfunded


def split_segment(segment: SessionSegment, max_seconds: int) -> list[SessionSegment]:
    """
    Split a segment longer than ``max_seconds`` into near-equal pieces.

    Uses ceil(d / max) pieces of floor(d / pieces) seconds; the first
    ``d - pieces * floor`` pieces get one extra second.

    Args:
        segment: Segment to split (not modified)
        max_seconds: Maximum piece duration

    Returns:
        List of new segments for the same exercise (a single copy when no
        split is needed)
    """
    duration = segment.duration_seconds
    splits = max(1, math.ceil(duration / max_seconds))
    base = duration // splits
    remainder = duration - splits * base
    return [
        SessionSegment(
            exercise=segment.exercise,
            duration_seconds=base + (1 if i < remainder else 0),
        )
        for i in range(splits)
    ]


def _round_robin(groups: Sequence[Sequence[SessionSegment]]) -> list[SessionSegment]:
    """Take one piece from each group in turn until all are used."""
    ordered: list[SessionSegment] = []
    depth = max((len(g) for g in groups), default=0)
    for level in range(depth):
        for group in groups:
            if level < len(group):
                ordered.append(group[level])
    return ordered


def interleave_splits(
    pieces: Sequence[SessionSegment],
    others: Sequence[SessionSegment],
) -> list[SessionSegment]:
    """
    Spread split pieces evenly among non-split segments.

    Piece ``i`` goes to slot ``i * total // len(pieces)``; if that slot is
    taken, the next free slot is used.  The remaining slots are filled
    with ``others`` in their original order, so every slot is filled
    exactly once.

    Args:
        pieces: Split pieces, in placement order
        others: Segments that were not split

    Returns:
        Combined list of len(pieces) + len(others) segments
    """
    if not pieces:
        return list(others)
    if not others:
        return list(pieces)

    total = len(pieces) + len(others)
    slots: list[SessionSegment | None] = [None] * total

    for i, piece in enumerate(pieces):
        pos = i * total // len(pieces)
        while slots[pos % total] is not None:
            pos += 1
        slots[pos % total] = piece

    rest = iter(others)
    return [slot if slot is not None else next(rest) for slot in slots]


def enforce_constraints(
    segments: Sequence[SessionSegment],
    min_seconds: int = MIN_SEGMENT_SECONDS,
    max_seconds: int = MAX_SEGMENT_SECONDS,
) -> ConstraintReport:
    """
    Clamp every segment into [min_seconds, max_seconds].

    Runs the minimum pass, then splits over-long segments and interleaves
    the pieces with the rest of the session.

    Args:
        segments: Allocated segments (mutated by the minimum pass)
        min_seconds: Minimum segment duration
        max_seconds: Maximum segment duration

    Returns:
        ConstraintReport with the new segment list and any unfunded seconds
    """
    unfunded = apply_minimum(segments, min_seconds)

    split_groups: list[list[SessionSegment]] = []
    unsplit: list[SessionSegment] = []
    for seg in segments:
        if seg.duration_seconds > max_seconds:
            split_groups.append(split_segment(seg, max_seconds))
        else:
            unsplit.append(seg)

    if split_groups:
        logger.debug(
            "Split {} over-long segment(s) into {} pieces",
            len(split_groups),
            sum(len(g) for g in split_groups),
        )

    arranged = interleave_splits(_round_robin(split_groups), unsplit)
    return ConstraintReport(segments=arranged, unfunded_seconds=unfunded)
