"""Span: a region of YAML source text.

Positions are stored 0-based, exactly as PyYAML reports them on its marks
(``line``, ``column``, ``index``).  ``index`` counts characters, not bytes.
``str(span)`` renders the 1-based ``line:column`` form users expect.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["Span"]


@dataclass(frozen=True, slots=True)
class Span:
    """Start/end position of a token or node in the source text.

    Attributes:
        start_line:   0-based line of the first character.
        start_column: 0-based column of the first character.
        end_line:     0-based line just after the last character.
        end_column:   0-based column just after the last character.
        start_index:  Character offset of the first character.
        end_index:    Character offset just after the last character.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_index: int = 0
    end_index: int = 0

    @classmethod
    def from_marks(cls, start: Any, end: Any) -> Span:
        """Build a span from a pair of PyYAML ``Mark`` objects."""
        return cls(
            start_line=start.line,
            start_column=start.column,
            end_line=end.line,
            end_column=end.column,
            start_index=start.index,
            end_index=end.index,
        )

    @classmethod
    def point(cls, line: int, column: int, index: int = 0) -> Span:
        """A zero-width span at one position."""
        return cls(line, column, line, column, index, index)

    def cover(self, other: Span) -> Span:
        """Smallest span containing both ``self`` and ``other``."""
        first = self if self.start_index <= other.start_index else other
        last = self if self.end_index >= other.end_index else other
        return Span(
            start_line=first.start_line,
            start_column=first.start_column,
            end_line=last.end_line,
            end_column=last.end_column,
            start_index=first.start_index,
            end_index=last.end_index,
        )

    def __str__(self) -> str:
        return f"{self.start_line + 1}:{self.start_column + 1}"
