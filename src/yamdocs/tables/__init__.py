"""tables subpackage: table planning and markdown rendering.

Example::

    from yamdocs.tables import MarkdownRenderer, RenderConfig, TablePlanner

    config = RenderConfig(max_inline_sequence_items=3)
    plan = TablePlanner(config).plan(annotated)
    markdown = MarkdownRenderer(config).render(plan)
"""

from __future__ import annotations

from yamdocs.tables.config import RenderConfig
from yamdocs.tables.planner import COLUMNS, Row, Table, TablePlan, TablePlanner
from yamdocs.tables.renderer import MarkdownRenderer

__all__ = ["COLUMNS", "MarkdownRenderer", "RenderConfig", "Row", "Table", "TablePlan", "TablePlanner"]
