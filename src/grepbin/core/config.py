"""User configuration for grepbin.

Defaults live in `SearchConfig`; a YAML file can override them and command-line
flags override both. Example `~/.config/grepbin/config.yaml`::

    block_size: 32
    chunk_size: 1048576
    filetypes: [bin, dat]
    theme: high-contrast
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

import yaml

from grepbin.core.aggregate import DEFAULT_BLOCK_SIZE
from grepbin.core.errors import ConfigError
from grepbin.core.scanner import DEFAULT_CHUNK_SIZE
from grepbin.core.term import MODES

OUTPUT_FORMATS = ("hexdump", "offsets")
THEMES = ("default", "dim", "high-contrast")


@dataclass(frozen=True)
class SearchConfig:
    """Settings for a search run.

    Attributes:
        block_size: Context window size in bytes (0 means whole file)
        chunk_size: Bytes read from a file per scanner read
        skip: Absolute byte offset where scanning starts
        filetypes: Extensions to keep when expanding directories (empty = all)
        mode: How to interpret the search term (auto, hex, ascii)
        output_format: hexdump or offsets
        theme: Colour palette name
        use_mmap: Memory-map files when materialising windows
    """

    block_size: int = DEFAULT_BLOCK_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    skip: int = 0
    filetypes: list[str] = field(default_factory=list)
    mode: str = "auto"
    output_format: str = "hexdump"
    theme: str = "default"
    use_mmap: bool = True

    def validate(self) -> SearchConfig:
        if self.block_size < 0:
            raise ConfigError("block_size must be >= 0")
        if self.chunk_size <= 0:
            raise ConfigError("chunk_size must be positive")
        if self.skip < 0:
            raise ConfigError("skip must be >= 0")
        if self.mode not in MODES:
            raise ConfigError(f"mode must be one of {', '.join(MODES)}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"output_format must be one of {', '.join(OUTPUT_FORMATS)}")
        if self.theme not in THEMES:
            raise ConfigError(f"theme must be one of {', '.join(THEMES)}")
        return self

    def merged(self, **overrides) -> SearchConfig:
        """Return a copy with every non-None override applied."""
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigError(f"unknown setting(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()


def get_user_config_path() -> Path:
    """Platform-appropriate location of the user config file."""
    if os.name == "nt":
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
        return Path(base) / "grepbin" / "config.yaml"
    return Path.home() / ".config" / "grepbin" / "config.yaml"


def _coerce(data: dict) -> dict:
    known = {f.name: f for f in fields(SearchConfig)}
    unknown = set(data) - set(known)
    if unknown:
        raise ConfigError(f"unknown setting(s): {', '.join(sorted(unknown))}")
    out = {}
    for key, value in data.items():
        if key in ("block_size", "chunk_size", "skip"):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key} must be an integer")
        elif key == "filetypes":
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError("filetypes must be a list of strings")
        elif key == "use_mmap":
            if not isinstance(value, bool):
                raise ConfigError("use_mmap must be true or false")
        elif not isinstance(value, str):
            raise ConfigError(f"{key} must be a string")
        out[key] = value
    return out


def load_config(path: str | Path | None = None) -> SearchConfig:
    """Load settings from YAML.

    With no `path`, the user config file is read if it exists, else defaults
    are returned. An explicit `path` must exist.
    """
    explicit = path is not None
    cfg_path = Path(path) if explicit else get_user_config_path()
    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {cfg_path}")
        return SearchConfig()

    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read config {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config {cfg_path} must be a mapping")
    return SearchConfig(**_coerce(data)).validate()
