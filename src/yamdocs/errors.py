"""Error and diagnostic types shared by every pipeline stage.

Two fatal errors abort the conversion of one document:

- ``LexError``   -- the text cannot be tokenised (invalid UTF-8, tab
  indentation, characters YAML forbids).
- ``ParseError`` -- the tokens do not form a supported YAML structure.

Non-fatal findings are collected as ``Diagnostic`` values and returned next
to the best-effort result.  Every error and diagnostic carries the source
``Span`` it refers to.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

from yamdocs.span import Span

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "LexError",
    "ParseError",
    "ParseErrorKind",
    "YamdocsError",
]


class YamdocsError(Exception):
    """Base class for fatal per-document conversion errors."""

    def __init__(self, message: str, span: Span | None = None) -> None:
        self.message = message
        self.span = span
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.message} (at {self.span})"


class LexError(YamdocsError):
    """Raised when the input cannot be turned into tokens."""


class ParseErrorKind(StrEnum):
    """Categories of structural parse failures."""

    UNTERMINATED_FLOW = auto()
    INCONSISTENT_INDENTATION = auto()
    UNSUPPORTED = auto()
    SYNTAX = auto()


class ParseError(YamdocsError):
    """Raised when the token stream is not a structure the parser accepts."""

    def __init__(
        self, message: str, kind: ParseErrorKind, span: Span | None = None
    ) -> None:
        self.kind = kind
        super().__init__(message, span)


class DiagnosticKind(StrEnum):
    """Categories of non-fatal parse findings."""

    DUPLICATE_KEY = auto()
    UNRESOLVED_ALIAS = auto()
    IGNORED_DOCUMENTS = auto()


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal warning produced while parsing.

    Attributes:
        kind:    What was found.
        message: Human-readable description.
        span:    Where in the source it was found.
    """

    kind: DiagnosticKind
    message: str
    span: Span

    def __str__(self) -> str:
        return f"{self.span}: {self.message}"
