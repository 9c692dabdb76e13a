from __future__ import annotations

import io
import os
from collections.abc import Iterator
from typing import BinaryIO

import structlog

from grepbin.core.errors import SourceUnavailable
from grepbin.core.pattern import Pattern

logger = structlog.get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class StreamScanner:
    """Find every occurrence of a pattern in a stream read in bounded chunks.

    The KMP automaton state is carried from one chunk to the next, so matches
    spanning a read boundary are reported exactly once and at the right offset
    without re-reading any bytes. Overlapping occurrences of self-overlapping
    patterns are all reported.
    """

    def __init__(self, pattern: Pattern, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.pattern = pattern
        self.chunk_size = int(chunk_size)

    def scan(self, source: BinaryIO, skip: int = 0, *, path: str | None = None) -> Iterator[int]:
        """Yield absolute start offsets of each occurrence, in increasing order.

        `source` is read from absolute offset `skip` until a read returns no
        bytes. Short reads are treated as ordinary chunks. Errors raised by the
        source surface as `SourceUnavailable`.
        """
        if skip < 0:
            raise ValueError("skip must be >= 0")
        needle = self.pattern.data
        table = self.pattern.table
        last = len(needle) - 1

        self._skip_to(source, skip, path)

        consumed = 0
        found = 0
        pos = 0
        while True:
            chunk = self._read(source, path)
            if not chunk:
                break
            base = skip + consumed - last
            for i, byte in enumerate(chunk):
                while pos > 0 and byte != needle[pos]:
                    pos = table[pos - 1]
                if byte == needle[pos]:
                    if pos == last:
                        found += 1
                        yield base + i
                        pos = table[last]
                    else:
                        pos += 1
            consumed += len(chunk)

        logger.debug("scan.stream_done", path=path, bytes_scanned=consumed, occurrences=found)

    def _read(self, source: BinaryIO, path: str | None) -> bytes:
        try:
            return source.read(self.chunk_size)
        except OSError as exc:
            raise SourceUnavailable(path, f"read failed: {exc}") from exc

    def _skip_to(self, source: BinaryIO, skip: int, path: str | None) -> None:
        if skip == 0:
            return
        try:
            seekable = source.seekable()
        except (AttributeError, ValueError):
            seekable = False
        try:
            if seekable:
                source.seek(skip, os.SEEK_SET)
                return
            # Unseekable streams: discard bytes until `skip` is reached
            remaining = skip
            while remaining > 0:
                dropped = source.read(min(self.chunk_size, remaining))
                if not dropped:
                    return
                remaining -= len(dropped)
        except OSError as exc:
            raise SourceUnavailable(path, f"cannot skip to offset {skip}: {exc}") from exc


def find_offsets(data: bytes, pattern: Pattern, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[int]:
    """Scan an in-memory buffer. Convenience wrapper over `StreamScanner`."""
    return list(StreamScanner(pattern, chunk_size=chunk_size).scan(io.BytesIO(data)))
