"""
Segment ordering heuristics.

Two passes, applied in order by arrange():

1. Tag variety: avoid consecutive segments that work the same muscles.
2. Progressive difficulty: easy segments open and close the session,
   the hardest ones sit in the middle.

Both passes only reorder; durations and the set of segments are kept.
"""

from typing import Sequence

from .config import CATEGORY_TAGS, MIN_SEGMENTS_FOR_PROGRESSION
from .models import SessionSegment


def body_part_tags(segment: SessionSegment) -> frozenset[str]:
    """Lower-cased tags of the segment's exercise, without category labels."""
    return frozenset(
        tag.strip().casefold()
        for tag in segment.exercise.tags
        if tag.strip().casefold() not in CATEGORY_TAGS
    )


def arrange_for_variety(segments: Sequence[SessionSegment]) -> list[SessionSegment]:
    """
    Greedy reorder minimising shared body-part tags between neighbours.

    Starts from the first segment; each next pick is the remaining segment
    sharing the fewest body-part tags with the one placed before it.
    Ties go to the segment that comes first in the remaining order.

    Args:
        segments: Segments in their current order

    Returns:
        Reordered list with the same segment objects
    """
    if len(segments) < 2:
        return list(segments)

    remaining = list(segments)
    ordered = [remaining.pop(0)]

    while remaining:
        last_tags = body_part_tags(ordered[-1])
        best = min(
            range(len(remaining)),
            key=lambda i: len(last_tags & body_part_tags(remaining[i])),
        )
        ordered.append(remaining.pop(best))

    return ordered


def arrange_progressive(segments: Sequence[SessionSegment]) -> list[SessionSegment]:
    """
    Easy → hard → easy difficulty curve.

    Sorts by difficulty (stable), then deals segments alternately onto a
    front and a back list and returns front + reversed(back).  Sessions
    with fewer than three segments are returned unchanged.

    Args:
        segments: Segments in their current order

    Returns:
        Reordered list with the same segment objects
    """
    if len(segments) < MIN_SEGMENTS_FOR_PROGRESSION:
        return list(segments)

    by_difficulty = sorted(segments, key=lambda s: s.exercise.difficulty)
    front = by_difficulty[0::2]
    back = by_difficulty[1::2]
    return front + back[::-1]


def arrange(segments: Sequence[SessionSegment]) -> list[SessionSegment]:
    """Apply the tag-variety pass, then the progressive-difficulty pass."""
    return arrange_progressive(arrange_for_variety(segments))
