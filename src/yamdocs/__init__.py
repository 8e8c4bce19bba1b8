"""yamdocs - context-aware markdown tables for commented YAML files."""

from __future__ import annotations

from yamdocs.api import (
    convert,
    extract_context,
    parse,
    plan_tables,
    render_markdown,
    to_markdown,
)
from yamdocs.cache import ConversionCache
from yamdocs.converter import DocumentConverter
from yamdocs.errors import (
    Diagnostic,
    DiagnosticKind,
    LexError,
    ParseError,
    ParseErrorKind,
    YamdocsError,
)
from yamdocs.result import ConversionResult
from yamdocs.tables.config import RenderConfig

__version__: str = "0.1.0"
__all__: list[str] = [
    "ConversionCache",
    "ConversionResult",
    "Diagnostic",
    "DiagnosticKind",
    "DocumentConverter",
    "LexError",
    "ParseError",
    "ParseErrorKind",
    "RenderConfig",
    "YamdocsError",
    "convert",
    "extract_context",
    "parse",
    "plan_tables",
    "render_markdown",
    "to_markdown",
]
