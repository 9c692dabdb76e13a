"""Read-only view a renderer gets of a finished scan.

Renderers receive, per window, the absolute offset (address column), the raw
bytes (hex and ASCII columns) and window-relative `[start, end)` highlight
ranges. Column layout, padding of short trailing windows and colouring are the
renderer's business; nothing here depends on a terminal.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


class HighlightLike(Protocol):
    @property
    def start(self) -> int: ...

    @property
    def end(self) -> int: ...


@runtime_checkable
class WindowLike(Protocol):
    @property
    def offset(self) -> int: ...

    @property
    def data(self) -> bytes: ...

    @property
    def highlights(self) -> Sequence[HighlightLike]: ...


@runtime_checkable
class MatchSetLike(Protocol):
    @property
    def block_size(self) -> int: ...

    @property
    def occurrences(self) -> Sequence[int]: ...

    def __iter__(self) -> Iterator[WindowLike]: ...


class MatchRenderer(Protocol[T_co]):
    """Anything that turns a match set into output lines."""

    def render(self, match_set: MatchSetLike) -> list[T_co]: ...
