"""DocumentConverter: orchestrator that wires the five pipeline stages.

This is the central wiring layer between the stage classes and the public
API.  ``convert()`` runs, strictly forward:

    text -> Lexer -> StructuralParser -> ContextExtractor
         -> TablePlanner -> MarkdownRenderer

and wraps the markdown in a ``ConversionResult`` with the plan, the parse
diagnostics and timing data.  Every stage output is immutable and consumed
once; the converter keeps no per-document state, so one instance can
convert any number of documents.
"""

from __future__ import annotations

import logging
import time

from yamdocs.result import ConversionResult
from yamdocs.syntax.lexer import Lexer
from yamdocs.syntax.parser import StructuralParser
from yamdocs.tables.config import RenderConfig
from yamdocs.tables.planner import TablePlanner
from yamdocs.tables.renderer import MarkdownRenderer
from yamdocs.tree.context import ContextExtractor

__all__ = ["DocumentConverter"]

logger = logging.getLogger(__name__)


class DocumentConverter:
    """Orchestrator for YAML-to-markdown conversion.

    Example::

        from yamdocs.converter import DocumentConverter

        converter = DocumentConverter()
        result = converter.convert("# How many\\nreplicaCount: 1\\n")
        print(result.markdown)
        # ### Values
        #
        # | Key | Type | Default | Description |
        # | --- | --- | --- | --- |
        # | replicaCount | integer | 1 | How many |
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialise the converter.

        Args:
            config: Planning and rendering options.  Defaults to
                ``RenderConfig()``.
        """
        self._config: RenderConfig = config if config is not None else RenderConfig()
        self._extractor = ContextExtractor()
        self._planner = TablePlanner(self._config)
        self._renderer = MarkdownRenderer(self._config)

    @property
    def config(self) -> RenderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def convert(self, source: str | bytes) -> ConversionResult:
        """Convert the first YAML document of ``source`` to markdown.

        Args:
            source: YAML text, or UTF-8 encoded bytes.

        Returns:
            A ``ConversionResult`` with markdown, plan, diagnostics and timing.

        Raises:
            LexError:   If the input cannot be tokenised.
            ParseError: If the input is not a supported YAML structure.
        """
        t0 = time.perf_counter()

        document = StructuralParser(Lexer(source)).parse()
        annotated = self._extractor.extract(document)
        plan = self._planner.plan(annotated)
        markdown = self._renderer.render(plan)

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug(
            "converted document into %d table(s) in %.2f ms",
            len(plan.tables),
            elapsed_ms,
        )
        return ConversionResult(
            markdown=markdown,
            plan=plan,
            diagnostics=annotated.diagnostics,
            computation_time_ms=elapsed_ms,
        )
