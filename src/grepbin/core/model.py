from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Occurrence:
    """Absolute half-open byte range `[start, start + length)` where the pattern matched."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class Highlight:
    """Half-open range relative to the start of its window."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ContextWindow:
    """A block-aligned slice of the file around one or more matches.

    `offset` is a multiple of the block size, `data` holds the bytes in
    `[offset, offset + len(data))` and `highlights` are window-relative ranges
    in the order the matches were found. Ranges from distinct occurrences may
    overlap (self-overlapping patterns) and are kept separate.
    """

    offset: int
    data: bytes
    highlights: tuple[Highlight, ...]

    @property
    def end(self) -> int:
        return self.offset + len(self.data)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class MatchSet:
    """Read-only result of scanning one file.

    Windows are sorted by offset with no duplicates. `block_size` is the
    effective block size used for the whole scan (already clamped to the file
    size) and `occurrences` lists every match start in scan order.
    """

    windows: tuple[ContextWindow, ...]
    block_size: int
    pattern_length: int
    occurrences: tuple[int, ...] = ()
    path: str | None = None

    def __len__(self) -> int:
        return len(self.windows)

    def __iter__(self) -> Iterator[ContextWindow]:
        return iter(self.windows)

    def __bool__(self) -> bool:
        return bool(self.windows)

    @property
    def offsets(self) -> list[int]:
        return [w.offset for w in self.windows]

    def occurrence_ranges(self) -> list[Occurrence]:
        return [Occurrence(s, self.pattern_length) for s in self.occurrences]

    def window_at(self, offset: int) -> ContextWindow | None:
        """Return the window containing absolute `offset`, if any."""
        starts = self.offsets
        i = bisect_right(starts, offset) - 1
        if i >= 0:
            w = self.windows[i]
            if w.offset <= offset < w.end:
                return w
        return None
