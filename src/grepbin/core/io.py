from __future__ import annotations

import os
from collections import OrderedDict
from contextlib import suppress
from typing import BinaryIO, Protocol

from grepbin.core.errors import SourceUnavailable

try:
    import mmap as _mmap_mod  # type: ignore
except Exception:  # pragma: no cover - platform-specific
    _mmap_mod = None  # type: ignore


class InvalidOffset(ValueError):
    """Raised when a negative offset or length is requested."""


class ByteRangeSource(Protocol):
    """Random access to an absolute byte range of a file."""

    @property
    def size(self) -> int: ...

    def read(self, offset: int, length: int) -> bytes: ...


def _check_range(offset: int, length: int) -> None:
    if offset < 0:
        raise InvalidOffset("offset must be >= 0")
    if length < 0:
        raise InvalidOffset("length must be >= 0")


class PagedReader:
    """Bounds-checked random-access reader over a file on disk.

    Uses `mmap` when available; otherwise buffered reads through a small LRU
    page cache. The file is never loaded into memory as a whole. Used to
    materialise context windows independently of the scanner's read buffer.
    """

    def __init__(
        self,
        path: str,
        *,
        page_size: int = 64 * 1024,
        cache_pages: int = 16,
        use_mmap: bool = True,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if cache_pages <= 0:
            raise ValueError("cache_pages must be positive")

        self._path = path
        try:
            self._fh = open(path, "rb", buffering=0)  # noqa: SIM115
            self._size = int(os.fstat(self._fh.fileno()).st_size)
        except OSError as exc:
            raise SourceUnavailable(path, exc.strerror or str(exc)) from exc

        self._page_size = int(page_size)
        self._cache_limit = int(cache_pages)
        self._cache: OrderedDict[int, bytes] = OrderedDict()

        self._mmap = None
        if use_mmap and _mmap_mod is not None and self._size > 0:
            try:
                self._mmap = _mmap_mod.mmap(self._fh.fileno(), length=0, access=_mmap_mod.ACCESS_READ)
            except (OSError, ValueError):
                self._mmap = None

    def close(self) -> None:
        if self._mmap is not None:
            with suppress(Exception):
                self._mmap.close()
            self._mmap = None
        with suppress(Exception):
            self._fh.close()

    def __enter__(self) -> PagedReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def size(self) -> int:
        """File size in bytes, taken when the reader was opened."""
        return self._size

    def _page(self, index: int) -> bytes:
        if index in self._cache:
            self._cache.move_to_end(index)
            return self._cache[index]

        start = index * self._page_size
        if start >= self._size:
            data = b""
        else:
            try:
                self._fh.seek(start)
                data = self._fh.read(min(self._page_size, self._size - start))
            except OSError as exc:
                raise SourceUnavailable(self._path, f"read failed at offset {start}: {exc}") from exc

        self._cache[index] = data
        if len(self._cache) > self._cache_limit:
            self._cache.popitem(last=False)
        return data

    def read(self, offset: int, length: int) -> bytes:
        """Read up to `length` bytes at `offset`; truncated at EOF, b"" past it."""
        _check_range(offset, length)
        if length == 0 or offset >= self._size:
            return b""

        end = min(self._size, offset + length)
        if self._mmap is not None:
            return bytes(self._mmap[offset:end])

        out = bytearray()
        pos = offset
        while pos < end:
            index = pos // self._page_size
            page = self._page(index)
            within = pos - index * self._page_size
            take = min(len(page) - within, end - pos)
            if take <= 0:
                break
            out += page[within : within + take]
            pos += take
        return bytes(out)


class SeekableRangeReader:
    """Range reads over an already-open seekable binary file object.

    Each read seeks to the requested offset and restores the previous stream
    position afterwards, so the same handle may be shared with a sequential
    reader.
    """

    def __init__(self, fileobj: BinaryIO, *, size: int | None = None, path: str | None = None) -> None:
        self._fh = fileobj
        self._path = path
        if size is None:
            try:
                here = fileobj.tell()
                size = fileobj.seek(0, os.SEEK_END)
                fileobj.seek(here)
            except OSError as exc:
                raise SourceUnavailable(path, f"cannot determine size: {exc}") from exc
        self._size = int(size)

    @property
    def size(self) -> int:
        return self._size

    def read(self, offset: int, length: int) -> bytes:
        _check_range(offset, length)
        if length == 0 or offset >= self._size:
            return b""
        want = min(length, self._size - offset)
        try:
            here = self._fh.tell()
            self._fh.seek(offset)
            out = bytearray()
            # Short reads are retried until EOF
            while len(out) < want:
                piece = self._fh.read(want - len(out))
                if not piece:
                    break
                out += piece
            self._fh.seek(here)
        except OSError as exc:
            raise SourceUnavailable(self._path, f"read failed at offset {offset}: {exc}") from exc
        return bytes(out)
