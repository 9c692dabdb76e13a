from __future__ import annotations

from bisect import insort
from collections.abc import Iterable
from dataclasses import dataclass, field

from grepbin.core.io import ByteRangeSource
from grepbin.core.model import ContextWindow, Highlight, MatchSet

DEFAULT_BLOCK_SIZE = 16


def effective_block_size(block_size: int, file_size: int) -> int:
    """Clamp the configured block size to the file size.

    A block size of 0, or one larger than the file, becomes the file size.
    Decided once per scan, never per window.
    """
    if block_size < 0:
        raise ValueError("block_size must be >= 0")
    if file_size < 0:
        raise ValueError("file_size must be >= 0")
    if block_size == 0 or block_size > file_size:
        return file_size
    return block_size


@dataclass
class _PendingWindow:
    offset: int
    data: bytes
    highlights: list[Highlight] = field(default_factory=list)

    def freeze(self) -> ContextWindow:
        return ContextWindow(offset=self.offset, data=self.data, highlights=tuple(self.highlights))


class ContextAggregator:
    """Group occurrence offsets into block-aligned context windows.

    Each occurrence is attributed to every block it touches: one block when it
    fits, otherwise a leading part in its first block and the remainder in the
    following block(s). Window bytes are fetched from `source` once, the first
    time a block is needed, so the scanner's buffer never has to stay alive.
    """

    def __init__(
        self,
        source: ByteRangeSource,
        pattern_length: int,
        *,
        block_size: int = DEFAULT_BLOCK_SIZE,
        file_size: int | None = None,
        path: str | None = None,
    ) -> None:
        if pattern_length <= 0:
            raise ValueError("pattern_length must be positive")
        self._source = source
        self._file_size = source.size if file_size is None else int(file_size)
        self.pattern_length = int(pattern_length)
        self.block_size = effective_block_size(block_size, self._file_size)
        self.path = path
        self._windows: dict[int, _PendingWindow] = {}
        self._order: list[int] = []
        self._occurrences: list[int] = []

    def _window(self, block_start: int) -> _PendingWindow:
        window = self._windows.get(block_start)
        if window is None:
            length = min(self.block_size, self._file_size - block_start)
            window = _PendingWindow(block_start, self._source.read(block_start, length))
            self._windows[block_start] = window
            insort(self._order, block_start)
        return window

    def add(self, start: int) -> None:
        """Attribute the occurrence starting at absolute `start` to its window(s)."""
        end = start + self.pattern_length
        if start < 0 or end > self._file_size:
            raise ValueError(f"occurrence [{start}, {end}) outside source of size {self._file_size}")
        block_size = self.block_size
        block = start - start % block_size
        pos = start
        while pos < end:
            part_end = min(end, block + block_size)
            self._window(block).highlights.append(Highlight(pos - block, part_end - block))
            pos = part_end
            block += block_size
        self._occurrences.append(start)

    def add_all(self, starts: Iterable[int]) -> ContextAggregator:
        for start in starts:
            self.add(start)
        return self

    def build(self) -> MatchSet:
        return MatchSet(
            windows=tuple(self._windows[b].freeze() for b in self._order),
            block_size=self.block_size,
            pattern_length=self.pattern_length,
            occurrences=tuple(self._occurrences),
            path=self.path,
        )
