from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Literal

from grepbin.core.errors import EmptyPattern, InvalidSearchTerm
from grepbin.core.pattern import Pattern

MODES = ("auto", "hex", "ascii")

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class SearchTerm:
    """A search term as typed by the user, tagged as hex or ASCII."""

    kind: Literal["hex", "ascii"]
    text: str

    @classmethod
    def detect(cls, text: str, mode: str = "auto") -> SearchTerm:
        """Tag `text`. In auto mode a term made only of hex digits is hex."""
        if mode not in MODES:
            raise InvalidSearchTerm(f"unknown search mode {mode!r}")
        if mode != "auto":
            return cls(mode, text)
        if text and all(c in _HEX_DIGITS for c in text):
            return cls("hex", text)
        return cls("ascii", text)

    def to_bytes(self) -> bytes:
        if self.kind == "hex":
            data = _decode_hex(self.text)
        elif self.kind == "ascii":
            data = _encode_ascii(self.text)
        else:
            raise InvalidSearchTerm(f"unknown term kind {self.kind!r}")
        if not data:
            raise EmptyPattern("search term is empty")
        return data


def _decode_hex(text: str) -> bytes:
    digits = "".join(text.split())
    if len(digits) % 2:
        raise InvalidSearchTerm(f"hex term must have an even number of digits: {text!r}")
    for c in digits:
        if c not in _HEX_DIGITS:
            raise InvalidSearchTerm(f"invalid hex digit {c!r} in {text!r}")
    return bytes.fromhex(digits)


def _encode_ascii(text: str) -> bytes:
    for c in text:
        if not c.isascii():
            raise InvalidSearchTerm(f'Invalid ASCII character "{c}"!')
    return text.encode("ascii")


def resolve_pattern(text: str, mode: str = "auto") -> Pattern:
    return Pattern(SearchTerm.detect(text, mode).to_bytes())
