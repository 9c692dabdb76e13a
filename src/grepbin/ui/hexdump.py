from __future__ import annotations

from pathlib import Path

from rich.style import Style
from rich.text import Text

from grepbin.core.contract import MatchRenderer, MatchSetLike, WindowLike
from grepbin.ui.palette import DEFAULT, Palette

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E
GROUP_SIZE = 8


def ascii_glyph(b: int) -> str:
    return chr(b) if PRINTABLE_MIN <= b <= PRINTABLE_MAX else "."


def _style(color: str, bold: bool = False) -> Style | None:
    if color == "default" and not bold:
        return None
    return Style(color=color, bold=bold)


def _window_mask(window: WindowLike) -> list[bool]:
    mask = [False] * len(window.data)
    for h in window.highlights:
        for i in range(max(0, h.start), min(h.end, len(mask))):
            mask[i] = True
    return mask


class HexDumpRenderer:
    """Render each context window as fixed-width hex dump rows.

    Row layout::

        00000000:  00 01 00 FF FE 00 A4 00   |........|

    Highlighted bytes get the palette's match style in both the hex and the
    ASCII column. Rows shorter than the row width are padded so the ASCII
    column lines up with full rows.
    """

    def __init__(self, palette: Palette = DEFAULT, *, bytes_per_row: int | None = None) -> None:
        if bytes_per_row is not None and bytes_per_row <= 0:
            raise ValueError("bytes_per_row must be positive")
        self.palette = palette
        self.bytes_per_row = bytes_per_row
        self._address = _style(palette.address_fg)
        self._hex = _style(palette.hex_fg)
        self._ascii = _style(palette.ascii_fg)
        self._match = _style(palette.match_fg, palette.match_bold)
        self._sep = _style(palette.separator_fg)

    def render(self, match_set: MatchSetLike) -> list[Text]:
        width = self.bytes_per_row or match_set.block_size
        lines: list[Text] = []
        for window in match_set:
            lines.extend(self.render_window(window, width))
        return lines

    def render_window(self, window: WindowLike, width: int) -> list[Text]:
        mask = _window_mask(window)
        data = window.data
        rows = []
        for row_start in range(0, len(data), width):
            row = data[row_start : row_start + width]
            rows.append(self._row(window.offset + row_start, row, mask[row_start : row_start + width], width))
        return rows

    def _row(self, address: int, row: bytes, mask: list[bool], width: int) -> Text:
        line = Text()
        line.append(f"{address:08X}", style=self._address)
        line.append(":  ")
        for i in range(width):
            if i < len(row):
                line.append(f"{row[i]:02X}", style=self._match if mask[i] else self._hex)
                line.append(" ")
            else:
                line.append("   ")
            if width >= GROUP_SIZE and i == GROUP_SIZE - 1:
                line.append(" ")
        line.append(" |", style=self._sep)
        for b, hit in zip(row, mask):
            line.append(ascii_glyph(b), style=self._match if hit else self._ascii)
        line.append("|", style=self._sep)
        return line


class OffsetsRenderer:
    """One line per occurrence with its absolute start offset."""

    def __init__(self, palette: Palette = DEFAULT) -> None:
        self._address = _style(palette.address_fg)

    def render(self, match_set: MatchSetLike) -> list[Text]:
        return [Text(f"{start:08X}", style=self._address or "") for start in match_set.occurrences]


def render_file_header(path: str | Path, palette: Palette = DEFAULT) -> Text:
    return Text(str(path), style=_style(palette.filename_fg) or "")


def get_renderer(
    output_format: str, palette: Palette = DEFAULT, *, bytes_per_row: int | None = None
) -> MatchRenderer[Text]:
    if output_format == "hexdump":
        return HexDumpRenderer(palette, bytes_per_row=bytes_per_row)
    if output_format == "offsets":
        return OffsetsRenderer(palette)
    raise ValueError(f"unknown output format {output_format!r}")
