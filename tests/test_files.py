from __future__ import annotations

from pathlib import Path

from grepbin.core.files import collect_files, filter_filetypes


def _tree(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "b.bin").write_bytes(b"b")
    (root / "a.txt").write_bytes(b"a")
    (root / "sub" / "c.bin").write_bytes(b"c")
    (root / "sub" / "deeper" / "d.dat").write_bytes(b"d")
    return root


def test_collect_files_recurses_in_sorted_order(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    files = collect_files([root])
    assert [f.relative_to(root).as_posix() for f in files] == [
        "a.txt",
        "b.bin",
        "sub/c.bin",
        "sub/deeper/d.dat",
    ]


def test_plain_and_missing_paths_pass_through(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    missing = tmp_path / "missing.bin"
    files = collect_files([str(root / "a.txt"), missing])
    assert files == [root / "a.txt", missing]


def test_filter_filetypes(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    files = collect_files([root])
    kept = filter_filetypes(files, ["bin", ".dat"])
    assert [f.name for f in kept] == ["b.bin", "c.bin", "d.dat"]
    assert filter_filetypes(files, []) == files
