"""Public API functions for yamdocs.

This module exposes each pipeline stage as a plain function (parse,
extract_context, plan_tables, render_markdown) plus the end-to-end convert
and to_markdown.  Each call creates fresh stage objects to guarantee zero
global state between calls.
"""

from __future__ import annotations

from yamdocs.converter import DocumentConverter
from yamdocs.result import ConversionResult
from yamdocs.syntax.lexer import Lexer
from yamdocs.syntax.parser import StructuralParser
from yamdocs.tables.config import RenderConfig
from yamdocs.tables.planner import TablePlan, TablePlanner
from yamdocs.tables.renderer import MarkdownRenderer
from yamdocs.tree.context import AnnotatedDocument, ContextExtractor
from yamdocs.tree.nodes import Document

__all__ = [
    "convert",
    "extract_context",
    "parse",
    "plan_tables",
    "render_markdown",
    "to_markdown",
]


def parse(source: str | bytes) -> Document:
    """Parse the first YAML document of ``source`` into a Document Tree.

    Args:
        source: YAML text, or UTF-8 encoded bytes.

    Returns:
        A ``Document`` whose nodes carry source spans and attached comments,
        plus the diagnostics found while parsing.

    Raises:
        LexError:   On invalid UTF-8, tab indentation or forbidden characters.
        ParseError: On structurally invalid or unsupported YAML.
    """
    return StructuralParser(Lexer(source)).parse()


def extract_context(document: Document) -> AnnotatedDocument:
    """Attach a description, type and default to every node of ``document``."""
    return ContextExtractor().extract(document)


def plan_tables(
    annotated: AnnotatedDocument,
    config: RenderConfig | None = None,
) -> TablePlan:
    """Decide the markdown tables for an annotated document.

    Args:
        annotated: Output of ``extract_context``.
        config:    Planning options.  Defaults to ``RenderConfig()`` when None.
    """
    return TablePlanner(config).plan(annotated)


def render_markdown(plan: TablePlan, config: RenderConfig | None = None) -> str:
    """Serialise a table plan to markdown text ending with a newline."""
    return MarkdownRenderer(config).render(plan)


def convert(
    source: str | bytes,
    config: RenderConfig | None = None,
) -> ConversionResult:
    """Convert YAML to markdown and return a rich ConversionResult.

    Creates a fresh ``DocumentConverter`` per call.

    Args:
        source: YAML text, or UTF-8 encoded bytes.  Only the first document
                of a multi-document stream is converted.
        config: Planning and rendering options.  Defaults to
                ``RenderConfig()`` when None.

    Returns:
        A ``ConversionResult`` with markdown, plan, diagnostics and
        computation_time_ms populated.

    Raises:
        LexError, ParseError: As ``parse``.
    """
    return DocumentConverter(config).convert(source)


def to_markdown(source: str | bytes, config: RenderConfig | None = None) -> str:
    """Return only the markdown of ``convert(source, config)``."""
    return convert(source, config=config).markdown
