"""
Half-open time interval helpers.

Intervals are ``[start, end)`` pairs of minutes since midnight. All helpers
are pure and operate on a single day's worth of intervals, so plain sorting
and linear scans are enough.
"""

from typing import Iterable, List, NamedTuple


class Interval(NamedTuple):
    """Half-open interval ``[start, end)`` in minutes since midnight."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def intervals_overlap(a: Interval, b: Interval) -> bool:
    """Check if two half-open intervals overlap (touching ends do not)."""
    return a.start < b.end and b.start < a.end


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Union-merge intervals into a sorted list of disjoint intervals.

    Overlapping and touching intervals are combined. Empty or inverted
    intervals are dropped.
    """
    ordered = sorted(i for i in intervals if i.start < i.end)
    merged: List[Interval] = []
    for interval in ordered:
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = Interval(last.start, max(last.end, interval.end))
        else:
            merged.append(interval)
    return merged


def intersect_intervals(left: Iterable[Interval], right: Iterable[Interval]) -> List[Interval]:
    """
    Intersect two interval sets.

    Both inputs are normalized with ``merge_intervals`` first, so the result
    is sorted and disjoint.
    """
    a = merge_intervals(left)
    b = merge_intervals(right)
    result: List[Interval] = []
    i = j = 0
    while i < len(a) and j < len(b):
        start = max(a[i].start, b[j].start)
        end = min(a[i].end, b[j].end)
        if start < end:
            result.append(Interval(start, end))
        # Advance whichever interval finishes first
        if a[i].end < b[j].end:
            i += 1
        else:
            j += 1
    return result


def overlaps_any(candidate: Interval, intervals: Iterable[Interval]) -> bool:
    """Check if ``candidate`` overlaps at least one interval."""
    return any(intervals_overlap(candidate, other) for other in intervals)
