"""
Natural ("human") ordering for file names and paths.

Strings are split into runs of letters, digits, and everything else.
Runs are compared pairwise so ``frame2`` sorts before ``frame10`` and
direction words such as ``north`` or ``left`` sort by compass ordinal
rather than alphabetically.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from functools import cmp_to_key
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Iterable

Comparison = Literal[-1, 0, 1]


class SegmentKind(IntEnum):
    """Segment kinds in their fixed comparison rank."""

    WORD = 0
    DIRECTION = 1
    NUMBER = 2
    SEPARATOR = 3
    NULL = 4


class Direction(IntEnum):
    """Cardinal directions, ordered clockwise from up."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


DIRECTION_WORDS: dict[str, Direction] = {
    "up": Direction.UP,
    "forward": Direction.UP,
    "top": Direction.UP,
    "north": Direction.UP,
    "front": Direction.UP,
    "down": Direction.DOWN,
    "backward": Direction.DOWN,
    "bottom": Direction.DOWN,
    "south": Direction.DOWN,
    "back": Direction.DOWN,
    "left": Direction.LEFT,
    "west": Direction.LEFT,
    "right": Direction.RIGHT,
    "east": Direction.RIGHT,
}

_SEGMENT_RE = re.compile(r"([a-zA-Z]+)|([0-9]+)|([^a-zA-Z0-9]+)")


@dataclass(frozen=True, slots=True)
class Segment:
    """One run of a segmented string."""

    kind: SegmentKind
    value: str | int


def segmentize(text: str) -> list[Segment]:
    """Split ``text`` into word, direction, number and separator runs."""
    segments: list[Segment] = []
    for match in _SEGMENT_RE.finditer(text):
        word, number, separator = match.groups()
        if word:
            lowered = word.lower()
            direction = DIRECTION_WORDS.get(lowered)
            if direction is not None:
                segments.append(Segment(SegmentKind.DIRECTION, int(direction)))
            else:
                segments.append(Segment(SegmentKind.WORD, lowered))
        elif number:
            segments.append(Segment(SegmentKind.NUMBER, int(number)))
        elif separator:
            segments.append(Segment(SegmentKind.SEPARATOR, separator))
        else:  # pragma: no cover - every match fills one group
            segments.append(Segment(SegmentKind.NULL, ""))
    return segments


def compare_segments(a: list[Segment], b: list[Segment]) -> Comparison:
    """
    Three-way compare two segment lists.

    An exhausted list sorts first. Differing kinds are ordered by
    :class:`SegmentKind` rank. Separators only ever compare by kind.
    """
    for i in range(max(len(a), len(b))):
        if i >= len(a):
            return -1
        if i >= len(b):
            return 1

        seg_a = a[i]
        seg_b = b[i]
        if seg_a.kind != seg_b.kind:
            return -1 if seg_a.kind < seg_b.kind else 1

        if seg_a.kind in (
            SegmentKind.WORD,
            SegmentKind.DIRECTION,
            SegmentKind.NUMBER,
        ):
            # Same kind means both values share a type
            if seg_a.value < seg_b.value:  # type: ignore[operator]
                return -1
            if seg_a.value > seg_b.value:  # type: ignore[operator]
                return 1
    return 0


class NaturalSorter:
    """
    Natural-order comparator with a per-instance segment cache.

    Every distinct input string is segmented once and kept for the life
    of the instance, so create one sorter per batch and drop it
    afterwards.
    """

    def __init__(self) -> None:
        self._cache: dict[str, list[Segment]] = {}

    def segments(self, text: str) -> list[Segment]:
        """Return the (cached) segment list for ``text``."""
        cached = self._cache.get(text)
        if cached is None:
            cached = segmentize(text)
            self._cache[text] = cached
        return cached

    def compare(self, a: object, b: object) -> Comparison:
        """Compare two values by their natural string order."""
        text_a = a if isinstance(a, str) else str(a)
        text_b = b if isinstance(b, str) else str(b)
        return compare_segments(self.segments(text_a), self.segments(text_b))

    def key(self) -> Callable[[object], object]:
        """Return a ``sorted`` key function bound to this sorter."""
        return cmp_to_key(self.compare)

    def sort[T](self, items: Iterable[T]) -> list[T]:
        """Return a new list of ``items`` in natural order."""
        return sorted(items, key=self.key())

    def sort_in_place[T](self, items: list[T]) -> list[T]:
        """Sort ``items`` in place and return the same list."""
        items.sort(key=self.key())
        return items


def natural_sorted[T](items: Iterable[T]) -> list[T]:
    """Sort ``items`` with a fresh :class:`NaturalSorter`."""
    return NaturalSorter().sort(items)
