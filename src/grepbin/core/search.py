from __future__ import annotations

import io
import os
import stat
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from itertools import takewhile
from pathlib import Path
from typing import BinaryIO

import structlog

from grepbin.core.aggregate import DEFAULT_BLOCK_SIZE, ContextAggregator
from grepbin.core.errors import GrepBinError, SourceUnavailable
from grepbin.core.io import ByteRangeSource, PagedReader, SeekableRangeReader
from grepbin.core.model import MatchSet
from grepbin.core.pattern import Pattern
from grepbin.core.scanner import DEFAULT_CHUNK_SIZE, StreamScanner

logger = structlog.get_logger(__name__)


def _run(
    stream: BinaryIO,
    windows: ByteRangeSource,
    pattern: Pattern,
    *,
    block_size: int,
    skip: int,
    chunk_size: int,
    path: str | None,
) -> MatchSet:
    size = windows.size
    aggregator = ContextAggregator(windows, len(pattern), block_size=block_size, file_size=size, path=path)
    scanner = StreamScanner(pattern, chunk_size=chunk_size)
    # Bytes appended after the size was taken are ignored
    starts = takewhile(lambda s: s + len(pattern) <= size, scanner.scan(stream, skip, path=path))
    result = aggregator.add_all(starts).build()
    logger.debug(
        "scan.done",
        path=path,
        size=size,
        block_size=result.block_size,
        occurrences=len(result.occurrences),
        windows=len(result.windows),
    )
    return result


def _check_sized_file(name: str) -> None:
    """Reject sources whose stat size cannot be trusted as the scan bound."""
    try:
        st = os.stat(name)
        if not stat.S_ISREG(st.st_mode):
            raise SourceUnavailable(name, "not a regular file")
        if st.st_size == 0:
            # procfs and similar report 0 for files that do have content
            with open(name, "rb") as fh:
                if fh.read(1):
                    raise SourceUnavailable(name, "file size not reported (pseudo-file)")
    except OSError as exc:
        raise SourceUnavailable(name, exc.strerror or str(exc)) from exc


def search_file(
    path: str | Path,
    pattern: Pattern,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
    skip: int = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    use_mmap: bool = True,
) -> MatchSet:
    """Scan one file on disk and return its match set.

    The scanner reads the file sequentially through its own handle while
    window bytes come from a separate `PagedReader`. Any I/O failure raises
    `SourceUnavailable`; no partial result is returned.
    """
    name = str(path)
    _check_sized_file(name)
    logger.debug("scan.start", path=name, pattern_length=len(pattern), skip=skip)
    with PagedReader(name, use_mmap=use_mmap) as reader:
        try:
            stream = open(name, "rb")  # noqa: SIM115
        except OSError as exc:
            raise SourceUnavailable(name, exc.strerror or str(exc)) from exc
        with stream:
            return _run(
                stream,
                reader,
                pattern,
                block_size=block_size,
                skip=skip,
                chunk_size=chunk_size,
                path=name,
            )


def search_stream(
    fileobj: BinaryIO,
    pattern: Pattern,
    *,
    size: int | None = None,
    block_size: int = DEFAULT_BLOCK_SIZE,
    skip: int = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    path: str | None = None,
) -> MatchSet:
    """Scan an open, seekable binary object from its beginning.

    The same handle serves both the sequential scan and window reads.
    """
    windows = SeekableRangeReader(fileobj, size=size, path=path)
    try:
        fileobj.seek(0)
    except OSError as exc:
        raise SourceUnavailable(path, f"cannot rewind: {exc}") from exc
    return _run(fileobj, windows, pattern, block_size=block_size, skip=skip, chunk_size=chunk_size, path=path)


def search_bytes(data: bytes, pattern: Pattern, **options) -> MatchSet:
    """Scan an in-memory buffer. Accepts the keyword options of `search_stream`."""
    return search_stream(io.BytesIO(data), pattern, size=len(data), **options)


@dataclass(frozen=True)
class FileResult:
    """Outcome of scanning one file: a match set or the error that stopped it."""

    path: Path
    match_set: MatchSet | None = None
    error: GrepBinError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def matched(self) -> bool:
        return self.match_set is not None and bool(self.match_set)


def search_files(
    paths: Iterable[str | Path],
    pattern: Pattern,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
    skip: int = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    use_mmap: bool = True,
) -> Iterator[FileResult]:
    """Scan files one after another, yielding a result per file.

    A failing file is reported in its own result and does not affect the rest.
    """
    for raw in paths:
        path = Path(raw)
        try:
            match_set = search_file(
                path,
                pattern,
                block_size=block_size,
                skip=skip,
                chunk_size=chunk_size,
                use_mmap=use_mmap,
            )
        except GrepBinError as exc:
            logger.info("scan.failed", path=str(path), error=str(exc))
            yield FileResult(path, error=exc)
            continue
        yield FileResult(path, match_set=match_set)
