from __future__ import annotations

from rich.style import Style

from grepbin.core.model import ContextWindow, Highlight, MatchSet
from grepbin.core.pattern import Pattern
from grepbin.core.search import search_bytes
from grepbin.ui.hexdump import HexDumpRenderer, OffsetsRenderer, ascii_glyph, get_renderer, render_file_header
from grepbin.ui.palette import DEFAULT, HIGH_CONTRAST, get_palette

MATCH = Style(color=DEFAULT.match_fg, bold=DEFAULT.match_bold)


def _matched_text(line) -> list[str]:
    return [line.plain[s.start : s.end] for s in line.spans if s.style == MATCH]


def test_row_layout_and_highlights() -> None:
    data = bytes([0x00, 0x01, 0x00, 0xFF, 0xFE, 0x00, 0xA4, 0x00])
    ms = search_bytes(data, Pattern(b"\xff\xfe\x00"), block_size=16)
    (line,) = HexDumpRenderer().render(ms)
    assert line.plain == "00000000:  00 01 00 FF FE 00 A4 00   |........|"
    assert _matched_text(line) == ["FF", "FE", "00", ".", ".", "."]


def test_ascii_column_and_gap() -> None:
    ms = search_bytes(b"AABAACAADAABAABA", Pattern(b"AABA"), block_size=16)
    (line,) = HexDumpRenderer().render(ms)
    assert line.plain == (
        "00000000:  41 41 42 41 41 43 41 41  44 41 41 42 41 41 42 41  |AABAACAADAABAABA|"
    )
    hits = _matched_text(line)
    # bytes 0-3 and 9-15 are highlighted, byte 4-8 are not
    assert hits[:4] == ["41", "41", "42", "41"]
    assert len(hits) == 2 * (4 + 7)


def test_short_trailing_row_is_padded() -> None:
    data = b"." * 16 + b"ABCD"
    ms = search_bytes(data, Pattern(b".AB"), block_size=16)
    first, second = HexDumpRenderer().render(ms)
    assert first.plain.startswith("00000000:  ")
    assert second.plain.startswith("00000010:  41 42 43 44 ")
    assert second.plain.endswith(" |ABCD|")
    assert first.plain.index("|") == second.plain.index("|") == 61


def test_rows_narrower_than_block() -> None:
    data = bytes(range(0x30, 0x40))
    ms = search_bytes(data, Pattern(b"9:"), block_size=16)
    rows = HexDumpRenderer(bytes_per_row=8).render(ms)
    assert [r.plain[:8] for r in rows] == ["00000000", "00000008"]
    assert rows[1].plain.endswith("|89:;<=>?|")
    assert _matched_text(rows[1]) == ["39", "3A", "9", ":"]


def test_narrow_block_has_no_gap() -> None:
    window = ContextWindow(offset=4, data=b"\x7f\x20~!", highlights=(Highlight(1, 2),))
    ms = MatchSet(windows=(window,), block_size=4, pattern_length=1, occurrences=(5,))
    (line,) = HexDumpRenderer().render(ms)
    assert line.plain == "00000004:  7F 20 7E 21  |. ~!|"


def test_offsets_renderer() -> None:
    ms = search_bytes(b"AABAACAADAABAABA", Pattern(b"AABA"))
    assert [t.plain for t in OffsetsRenderer().render(ms)] == ["00000000", "00000009", "0000000C"]


def test_ascii_glyphs() -> None:
    assert ascii_glyph(0x41) == "A"
    assert ascii_glyph(0x20) == " "
    assert ascii_glyph(0x7E) == "~"
    assert ascii_glyph(0x7F) == "."
    assert ascii_glyph(0x0A) == "."
    assert ascii_glyph(0xC3) == "."


def test_palette_and_factory() -> None:
    assert get_palette("high-contrast") is HIGH_CONTRAST
    assert isinstance(get_renderer("offsets"), OffsetsRenderer)
    assert isinstance(get_renderer("hexdump", bytes_per_row=8), HexDumpRenderer)
    assert render_file_header("some/file.bin").plain == "some/file.bin"


def test_renders_any_match_set_like() -> None:
    class Win:
        offset = 0
        data = b"hi"
        highlights = [Highlight(0, 1)]

    class Result:
        block_size = 2
        occurrences = [0]

        def __iter__(self):
            return iter([Win()])

    (line,) = HexDumpRenderer().render(Result())
    assert line.plain == "00000000:  68 69  |hi|"
