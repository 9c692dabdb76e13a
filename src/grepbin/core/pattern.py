from __future__ import annotations

from dataclasses import dataclass, field

from grepbin.core.errors import EmptyPattern


def compile_failure_table(pattern: bytes) -> tuple[int, ...]:
    """Build the KMP failure table for `pattern`.

    `table[i]` is the length of the longest proper prefix of `pattern[: i + 1]`
    that is also a suffix of it. Runs in O(len(pattern)).
    """
    table = [0] * len(pattern)
    pos = 0
    for i in range(1, len(pattern)):
        while pos > 0 and pattern[i] != pattern[pos]:
            pos = table[pos - 1]
        if pattern[pos] == pattern[i]:
            pos += 1
            table[i] = pos
    return tuple(table)


@dataclass(frozen=True)
class Pattern:
    """Immutable search pattern with its failure table, shareable across scans."""

    data: bytes
    table: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        data = bytes(self.data)
        if not data:
            raise EmptyPattern("pattern must contain at least one byte")
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "table", compile_failure_table(data))

    def __len__(self) -> int:
        return len(self.data)
