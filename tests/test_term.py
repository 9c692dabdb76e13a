from __future__ import annotations

import pytest

from grepbin.core.errors import EmptyPattern, InvalidSearchTerm
from grepbin.core.term import SearchTerm, resolve_pattern


@pytest.mark.parametrize("text", ["f9b4ca", "F9B4CA", "f9B4Ca"])
def test_hex_terms_any_case(text: str) -> None:
    term = SearchTerm.detect(text)
    assert term.kind == "hex"
    assert term.to_bytes() == b"\xf9\xb4\xca"


def test_non_hex_text_is_ascii() -> None:
    term = SearchTerm.detect("hello world")
    assert term.kind == "ascii"
    assert term.to_bytes() == b"hello world"


def test_forced_modes() -> None:
    # "cafe" reads as hex unless ASCII is forced
    assert SearchTerm.detect("cafe").to_bytes() == b"\xca\xfe"
    assert SearchTerm.detect("cafe", "ascii").to_bytes() == b"cafe"
    assert SearchTerm.detect("DE AD be ef", "hex").to_bytes() == b"\xde\xad\xbe\xef"


def test_odd_length_hex_rejected() -> None:
    with pytest.raises(InvalidSearchTerm):
        SearchTerm.detect("abc").to_bytes()


def test_bad_hex_digit_rejected() -> None:
    with pytest.raises(InvalidSearchTerm):
        SearchTerm.detect("zz", "hex").to_bytes()


def test_non_ascii_rejected() -> None:
    with pytest.raises(InvalidSearchTerm, match="é"):
        SearchTerm.detect("café").to_bytes()


def test_empty_term() -> None:
    with pytest.raises(EmptyPattern):
        resolve_pattern("")
    with pytest.raises(EmptyPattern):
        resolve_pattern("   ", "hex")


def test_unknown_mode() -> None:
    with pytest.raises(InvalidSearchTerm):
        SearchTerm.detect("ab", "regex")


def test_resolve_pattern() -> None:
    p = resolve_pattern("FFFE00")
    assert p.data == b"\xff\xfe\x00"
    assert p.table == (0, 0, 0)
