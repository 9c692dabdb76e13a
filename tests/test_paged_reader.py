from __future__ import annotations

import io
from pathlib import Path

import pytest

from grepbin.core.errors import SourceUnavailable
from grepbin.core.io import InvalidOffset, PagedReader, SeekableRangeReader


class _BrokenHandle:
    def seek(self, *args) -> int:
        raise OSError(5, "Input/output error")

    def read(self, *args) -> bytes:
        raise OSError(5, "Input/output error")

    def close(self) -> None:
        pass


def make_fixture_file(tmp_path: Path, size: int = 5000) -> Path:
    # Deterministic content: 0..255 repeating
    data = bytes(i % 256 for i in range(size))
    p = tmp_path / "fixture.bin"
    p.write_bytes(data)
    return p


@pytest.mark.parametrize("use_mmap", [True, False])
def test_read_exact_ranges(tmp_path: Path, use_mmap: bool) -> None:
    path = make_fixture_file(tmp_path, size=5000)
    with PagedReader(str(path), use_mmap=use_mmap, page_size=1024) as r:
        assert r.size == 5000
        assert r.read(0, 16) == bytes(range(16))
        assert r.read(1234, 77) == bytes(i % 256 for i in range(1234, 1234 + 77))
        # spans several pages in buffered mode
        assert r.read(1000, 3000) == bytes(i % 256 for i in range(1000, 4000))


@pytest.mark.parametrize("use_mmap", [True, False])
def test_read_past_eof_truncated(tmp_path: Path, use_mmap: bool) -> None:
    path = make_fixture_file(tmp_path, size=4097)
    with PagedReader(str(path), use_mmap=use_mmap) as r:
        start = r.size - 10
        out = r.read(start, 100)
        assert out == bytes(i % 256 for i in range(start, r.size))
        assert r.read(r.size, 10) == b""
        assert r.read(0, 0) == b""


@pytest.mark.parametrize("use_mmap", [True, False])
def test_invalid_negative_offset_raises(tmp_path: Path, use_mmap: bool) -> None:
    path = make_fixture_file(tmp_path, size=100)
    with PagedReader(str(path), use_mmap=use_mmap) as r:
        with pytest.raises(InvalidOffset):
            r.read(-1, 1)
        with pytest.raises(InvalidOffset):
            r.read(0, -1)


def test_empty_file(tmp_path: Path) -> None:
    p = tmp_path / "empty.bin"
    p.write_bytes(b"")
    with PagedReader(str(p)) as r:
        assert r.size == 0
        assert r.read(0, 16) == b""


def test_file_not_found(tmp_path: Path) -> None:
    missing = tmp_path / "missing.bin"
    with pytest.raises(SourceUnavailable) as info:
        PagedReader(str(missing))
    assert info.value.path == str(missing)
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_seekable_range_reader_restores_position() -> None:
    fh = io.BytesIO(b"0123456789")
    fh.seek(3)
    r = SeekableRangeReader(fh)
    assert r.size == 10
    assert r.read(6, 10) == b"6789"
    assert r.read(10, 1) == b""
    assert fh.tell() == 3
    with pytest.raises(InvalidOffset):
        r.read(-2, 1)


def test_buffered_page_read_error(tmp_path: Path, monkeypatch) -> None:
    path = make_fixture_file(tmp_path, size=100)
    with PagedReader(str(path), use_mmap=False) as r:
        real = r._fh
        monkeypatch.setattr(r, "_fh", _BrokenHandle())
        with pytest.raises(SourceUnavailable) as info:
            r.read(0, 16)
    real.close()
    assert info.value.path == str(path)
    assert isinstance(info.value.__cause__, OSError)


def test_seekable_range_reader_error() -> None:
    class Broken(io.BytesIO):
        def read(self, size: int | None = -1) -> bytes:
            raise OSError(5, "Input/output error")

    r = SeekableRangeReader(Broken(b"0123456789"), path="broken.bin")
    with pytest.raises(SourceUnavailable) as info:
        r.read(2, 4)
    assert info.value.path == "broken.bin"
