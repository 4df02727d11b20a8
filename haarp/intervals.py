"""Byte-range bookkeeping for partially cached files.

Each :class:`Interval` maps the inclusive byte range ``a..b`` of a remote file
to ``position``, the offset where those bytes start in the local cache file.
A position of ``-1`` marks bytes that are not cached.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass

from haarp.strutil import string_explode

MISSING = -1

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass
class Interval:
    """Inclusive byte range ``a..b`` stored at ``position`` on disk."""

    a: int
    b: int
    position: int = MISSING

    @property
    def size(self) -> int:
        return self.b - self.a + 1


def _leading_int(text: str) -> int:
    found = _LEADING_INT.match(text)
    return int(found.group(1)) if found else 0


def is_all_hit(intervals: list[Interval], start: int = 0) -> bool:
    """True if every interval from index ``start`` on is cached."""
    return all(interval.position >= 0 for interval in intervals[start:])


def total_size(intervals: list[Interval]) -> int:
    """Number of bytes covered by all intervals."""
    return sum(interval.size for interval in intervals)


def extreme_end(intervals: list[Interval]) -> int:
    """Largest end offset, or -1 for an empty list."""
    return max((interval.b for interval in intervals), default=-1)


def last_node_index(intervals: list[Interval]) -> int:
    """Index of the interval stored furthest into the cache file."""
    if not intervals:
        raise ValueError("no intervals")
    best = 0
    for index, interval in enumerate(intervals):
        if interval.position > intervals[best].position:
            best = index
    return best


def append_node(intervals: list[Interval], interval: Interval) -> None:
    """Add ``interval`` after the last stored one, merging if contiguous."""
    if not intervals:
        intervals.insert(0, dataclasses.replace(interval))
        return
    last = last_node_index(intervals)
    if intervals[last].b + 1 == interval.a:
        intervals[last].b = interval.b
        return
    intervals.insert(last + 1, dataclasses.replace(interval))


def append_sub_node(intervals: list[Interval], interval: Interval, length: int) -> None:
    """Like :func:`append_node`, with the end derived from ``length`` bytes."""
    end = length + interval.a - 1
    if not intervals:
        intervals.insert(0, dataclasses.replace(interval, b=end))
        return
    last = last_node_index(intervals)
    if intervals[last].b + 1 == interval.a:
        intervals[last].b = end
        return
    intervals.insert(last + 1, dataclasses.replace(interval, b=end))


def point_end(intervals: list[Interval]) -> int:
    """Offset in the cache file where further data can be written."""
    if not intervals:
        return 0
    last = intervals[last_node_index(intervals)]
    return last.position + last.size


def range_work(
    intervals: list[Interval], start: int, end: int
) -> tuple[list[Interval], bool]:
    """Split the request ``start..end`` into cached and missing pieces.

    ``intervals`` is sorted in place by start offset. Returns the pieces in
    order and whether the whole request is cached.
    """
    pieces: list[Interval] = []
    hit = True
    top = -1
    rest: list[Interval] = []

    intervals.sort(key=lambda interval: interval.a)
    for index, current in enumerate(intervals):
        if start < current.a:
            top = start
            rest = intervals[index:]
            break
        if current.a <= start <= current.b:
            offset = current.position + start - current.a
            if end <= current.b:
                return [Interval(start, end, offset)], True
            pieces.append(Interval(start, current.b, offset))
            top = current.b + 1
            rest = intervals[index + 1:]
            break

    for current in rest:
        if end < current.a:
            pieces.append(Interval(top, end, MISSING))
            hit = False
            top = end + 1
            break
        if top < current.a:
            pieces.append(Interval(top, current.a - 1, MISSING))
            top = current.a
            hit = False
        if current.a <= end <= current.b:
            pieces.append(Interval(top, end, current.position))
            top = current.b + 1
            break
        pieces.append(dataclasses.replace(current))
        top = current.b + 1

    if top == -1:
        return [Interval(start, end, MISSING)], False
    if end > top:
        pieces.append(Interval(top, end, MISSING))
        hit = False
    return pieces, hit


def generate_list(ranges: str, positions: str) -> list[Interval]:
    """Build intervals from ``"a-b,c-d"`` and ``"p,q"`` strings.

    The result is in reverse order of the input, as stored by the cache.
    """
    range_parts = string_explode(ranges, ",")
    position_parts = string_explode(positions, ",")
    if len(range_parts) != len(position_parts):
        raise ValueError("ranges and positions differ in count")
    result: list[Interval] = []
    for text, position in zip(range_parts, position_parts):
        bounds = string_explode(text, "-")
        if len(bounds) < 2:
            raise ValueError(f"malformed range: {text!r}")
        a, b = _leading_int(bounds[0]), _leading_int(bounds[1])
        if a > b:
            raise ValueError(f"range start after end: {text!r}")
        result.insert(0, Interval(a, b, _leading_int(position)))
    return result


def list_to_strings(intervals: list[Interval]) -> tuple[str, str]:
    """Serialise intervals to ``("a-b,...", "position,...")``."""
    ranges = ",".join(f"{interval.a}-{interval.b}" for interval in intervals)
    positions = ",".join(str(interval.position) for interval in intervals)
    return ranges, positions