"""ConversionResult dataclass for conversion output.

This module provides the rich result type returned by convert() calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from yamdocs.errors import Diagnostic
from yamdocs.tables.planner import TablePlan

__all__ = ["ConversionResult"]


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Rich result of a convert() call.

    Attributes:
        markdown: Rendered markdown, ending with a newline.
        plan: The table plan the markdown was rendered from.
        diagnostics: Non-fatal findings from parsing (duplicate keys,
            unresolved aliases, ignored documents), in source order.
        computation_time_ms: Wall-clock duration of the conversion in milliseconds.
    """

    markdown: str
    plan: TablePlan
    diagnostics: tuple[Diagnostic, ...]
    computation_time_ms: float

    @property
    def ok(self) -> bool:
        """True when the conversion produced no diagnostics."""
        return not self.diagnostics
