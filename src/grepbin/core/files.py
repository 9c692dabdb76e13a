from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path


def collect_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand directories recursively; other paths pass through unchanged.

    Directory contents are listed in sorted order. Paths that do not exist are
    kept so the caller can report them per file.
    """
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(_walk(path))
        else:
            files.append(path)
    return files


def _walk(root: Path) -> list[Path]:
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            found.append(Path(dirpath) / name)
    return found


def filter_filetypes(files: Iterable[Path], filetypes: Iterable[str]) -> list[Path]:
    """Keep files whose extension (without the dot) is listed. Empty list keeps all."""
    wanted = {ext.lstrip(".") for ext in filetypes}
    files = list(files)
    if not wanted:
        return files
    return [f for f in files if f.suffix.lstrip(".") in wanted]
