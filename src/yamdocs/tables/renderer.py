"""MarkdownRenderer: serialises a ``TablePlan`` to markdown text.

Each table becomes a heading, a header row, a separator row and one line per
row.  Cell text is made single-line (newlines become one space) and pipes
are escaped.  Defaults that markdown would mangle (emphasis characters,
surrounding whitespace, empty strings, flow collections) are written as
inline code spans.

Output is a pure function of the plan and the config: rendering the same
plan twice yields the same string.
"""

from __future__ import annotations

import logging
import re

from tabulate import tabulate

from yamdocs.tables.config import RenderConfig
from yamdocs.tables.planner import Row, Table, TablePlan
from yamdocs.tree.context import TypeTag

__all__ = ["MarkdownRenderer", "code_span", "escape_cell"]

logger = logging.getLogger(__name__)

_LINE_BREAKS = "\n\r\x85\u2028\u2029"
_NEWLINES = re.compile(r"\s*[\n\r\x85\u2028\u2029]+\s*")

# Characters with inline markdown meaning inside a table cell.
_CODE_LIKE = re.compile(r"[*_`<>\\~\[\]]")
_KEY_ESCAPES = re.compile(r"([\\`*<>~])")

# Empty collections: the only object/array rows that carry a plain default.
_EMPTY_CONTAINERS = frozenset({TypeTag.OBJECT, TypeTag.ARRAY})


def _one_line(text: str) -> str:
    return _NEWLINES.sub(" ", text.strip(_LINE_BREAKS))


def escape_cell(text: str) -> str:
    """Make ``text`` safe for one table cell: single line, pipes escaped."""
    return _one_line(text).replace("|", "\\|")


def code_span(text: str) -> str:
    """Wrap ``text`` in an inline code span that shows it verbatim."""
    text = _one_line(text)
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    fence = "`" * (longest + 1)
    if text.strip(" ") and (text[0] in " `" or text[-1] in " `"):
        text = f" {text} "
    return f"{fence}{text}{fence}"


def _needs_code(text: str) -> bool:
    return not text or text != text.strip() or bool(_CODE_LIKE.search(text))


class MarkdownRenderer:
    """Renders a ``TablePlan`` as markdown.

    With ``align_columns`` set, table bodies are laid out by ``tabulate``
    (GitHub format) so the columns line up in plain text as well.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or RenderConfig()

    @property
    def config(self) -> RenderConfig:
        return self._config

    def render(self, plan: TablePlan) -> str:
        """Return the markdown for every table of ``plan``, newline terminated."""
        blocks = [self._render_table(table) for table in plan.tables]
        markdown = "\n\n".join(blocks) + "\n"
        logger.debug("rendered %d table(s), %d character(s)", len(blocks), len(markdown))
        return markdown

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _heading(self, table: Table) -> str:
        title = _KEY_ESCAPES.sub(r"\\\1", table.title)
        return f"{'#' * self._config.heading_level} {title}"

    def _render_table(self, table: Table) -> str:
        header = list(table.columns)
        body = [self._cells(row)[: len(header)] for row in table.rows]
        if self._config.align_columns:
            lines = tabulate(
                body,
                headers=header,
                tablefmt="github",
                disable_numparse=True,
                stralign="left",
            )
        else:
            lines = "\n".join(
                [
                    _line(header),
                    _line(["---"] * len(header)),
                    *(_line(cells) for cells in body),
                ]
            )
        return f"{self._heading(table)}\n\n{lines}"

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------

    def _cells(self, row: Row) -> list[str]:
        key = escape_cell(_KEY_ESCAPES.sub(r"\\\1", row.key))
        return [
            key,
            str(row.type_hint),
            self._default_cell(row, key),
            escape_cell(row.description or ""),
        ]

    def _default_cell(self, row: Row, key: str) -> str:
        if row.link is not None:
            return f"[{key}](#{row.link})"
        if row.default is None:
            return ""
        text = _one_line(row.default)
        if row.compact:
            return escape_cell(code_span(text))
        if row.type_hint in _EMPTY_CONTAINERS:
            return text
        if not text:
            return code_span('""')
        if _needs_code(text):
            return escape_cell(code_span(text))
        return escape_cell(text)


def _line(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"
