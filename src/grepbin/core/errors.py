from __future__ import annotations


class GrepBinError(Exception):
    """Base class for errors reported by grepbin."""


class SourceUnavailable(GrepBinError):
    """A byte source could not be opened or read. The scan for that file is aborted."""

    def __init__(self, path: str | None, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path else message)


class InvalidSearchTerm(GrepBinError, ValueError):
    """The search term cannot be turned into a byte pattern."""


class EmptyPattern(InvalidSearchTerm):
    """The resolved byte pattern has no bytes."""


class ConfigError(GrepBinError):
    """Invalid or unreadable configuration."""
