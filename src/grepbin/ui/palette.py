from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    address_fg: str
    hex_fg: str
    ascii_fg: str
    match_fg: str
    match_bold: bool
    separator_fg: str
    filename_fg: str
    error_fg: str


DEFAULT = Palette(
    address_fg="green",
    hex_fg="default",
    ascii_fg="default",
    match_fg="red",
    match_bold=True,
    separator_fg="default",
    filename_fg="magenta",
    error_fg="red",
)

DIM = Palette(
    address_fg="#777777",
    hex_fg="#cccccc",
    ascii_fg="#bbbbbb",
    match_fg="#ff6666",
    match_bold=False,
    separator_fg="#666666",
    filename_fg="#a0a0a0",
    error_fg="#ff6666",
)

HIGH_CONTRAST = Palette(
    address_fg="#00ffff",
    hex_fg="#ffffff",
    ascii_fg="#ffffff",
    match_fg="#ffff00",
    match_bold=True,
    separator_fg="#888888",
    filename_fg="#ff00ff",
    error_fg="#ff6666",
)

PALETTES = {
    "default": DEFAULT,
    "dim": DIM,
    "high-contrast": HIGH_CONTRAST,
}


def get_palette(name: str) -> Palette:
    """Look up a palette by theme name. Raises KeyError for unknown names."""
    return PALETTES[name]
