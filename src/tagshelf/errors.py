# Exception classes for tagshelf.
# Template errors carry the pattern position where scanning stopped.
#
# Hierarchy:
#   TagshelfError
#     TemplateError: a pattern could not be compiled
#       MalformedToken: unknown tag name inside a token
#       UnexpectedCloser: closer or marker with no open token
#       NestedOpener: opener while a tag name is being composed
#       UnterminatedToken: pattern ended inside a token
#     ProbeError: ffprobe is missing or failed on a file

from __future__ import annotations

from typing import Optional


class TagshelfError(Exception):
    """
    Base exception for all tagshelf errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (pattern position, path...).
    """

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class TemplateError(TagshelfError):
    """
    Raised when a pattern cannot be compiled.

    Template errors are per-file: the organizer skips the file and keeps
    going. Since an unknown tag name fails for every file alike, the pattern
    is also checked once before a batch starts.
    """


class MalformedToken(TemplateError):
    """Raised when a token names a tag outside the registry."""

    def __init__(self, raw: str, position: int) -> None:
        super().__init__(
            f"Unknown tag '{raw}' in token ending at position {position}",
            details={"raw": raw, "position": position},
        )
        self.raw = raw
        self.position = position


class UnexpectedCloser(TemplateError):
    """Raised when '}', '?' or '+' appears outside of a token."""

    def __init__(self, char: str, position: int) -> None:
        super().__init__(
            f"Unexpected '{char}' at position {position} (no token is open)",
            details={"char": char, "position": position},
        )
        self.char = char
        self.position = position


class NestedOpener(TemplateError):
    """Raised when '{' appears while a tag name is still being composed."""

    def __init__(self, position: int) -> None:
        super().__init__(
            f"Nested '{{' at position {position}",
            details={"position": position},
        )
        self.position = position


class UnterminatedToken(TemplateError):
    """Raised when the pattern ends before the open token is closed."""

    def __init__(self, position: int) -> None:
        super().__init__(
            f"Token opened at position {position} is never closed",
            details={"position": position},
        )
        self.position = position


class ProbeError(TagshelfError):
    """
    Raised when tags cannot be read from a music file.

    Common causes:
        - ffprobe is not installed or not on PATH
        - the file is not a readable audio container
    """
