"""TablePlanner: decides which markdown tables exist and what rows they hold.

Input is an ``AnnotatedDocument``; output is an immutable ``TablePlan``.

Boundary rules:

1. The document root starts the first table.  A root that is a sequence
   or a scalar gets a single ``(root)`` row.
2. A non-empty nested mapping either spawns its own table (the parent
   keeps one ``object`` row linking to it) or is flattened into the parent,
   its children becoming extra rows with dot-joined keys.  It spawns a
   table when its subtree is *documented* (some leaf has a description), or
   always when ``documented_threshold`` is off.  A flattened mapping keeps
   its own row only if it carries a description itself.
3. A sequence is one row whose Default is a compact rendering of its
   first ``max_inline_sequence_items`` items, unless an element is a
   documented mapping or carries a description somewhere beneath it: then
   every mapping element spawns a ``key[n]`` table and other elements
   become ``key[n]`` rows of their own, so no item description is lost.

A mapping with any described leaf always gets its own table, however small.
In a file like::

    replicaCount: 1
    image:
      repository: nginx # container image

``image.repository`` is therefore listed under an ``image`` table linked
from the root, not as a dotted row next to ``replicaCount``.

Rows keep source order.  Tables come depth-first: each table is followed
by the tables it spawned, in the order it spawned them.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

from yamdocs.tables.config import RenderConfig
from yamdocs.tree.context import AnnotatedDocument, Context, TypeTag, format_path
from yamdocs.tree.nodes import (
    Mapping,
    Node,
    Path,
    Scalar,
    ScalarKind,
    ScalarStyle,
    Sequence,
)

__all__ = ["COLUMNS", "Row", "Table", "TablePlan", "TablePlanner", "slugify"]

logger = logging.getLogger(__name__)

COLUMNS: tuple[str, ...] = ("Key", "Type", "Default", "Description")

ROOT_KEY = "(root)"

_ELLIPSIS = "..."

# Anything a plain flow scalar could not hold without quoting.
_FLOW_UNSAFE = re.compile(r"""^$|^\s|\s$|[,\[\]{}#&*!|>'"%@`]|: |:$|^[-?:](?:\s|$)""")


@dataclass(frozen=True, slots=True)
class Row:
    """One row of a table.

    Attributes:
        path:        Path of the node the row describes.
        key:         Key column text (the node's display path).
        type_hint:   Type column.
        default:     Default column text, or None for an empty cell.
        description: Description column text, or None.
        link:        Anchor of the table this row's node spawned, if any.
        compact:     True when ``default`` is a flow-style rendering of a
                     non-empty collection.
    """

    path: Path
    key: str
    type_hint: TypeTag
    default: str | None
    description: str | None
    link: str | None = None
    compact: bool = False


@dataclass(frozen=True, slots=True)
class Table:
    """One markdown table.

    Attributes:
        path:    Path of the node the table describes (``()`` for the root).
        title:   Heading text.
        anchor:  Unique slug of the heading, target of ``Row.link``.
        rows:    Rows in source order.
        columns: Column names; "Description" is dropped when no row has one.
    """

    path: Path
    title: str
    anchor: str
    rows: tuple[Row, ...]
    columns: tuple[str, ...] = COLUMNS


@dataclass(frozen=True, slots=True)
class TablePlan:
    """Ordered tables of one document; the first describes the root."""

    tables: tuple[Table, ...]

    def table(self, path: Path) -> Table:
        """Return the table whose root node is at ``path``.

        Raises:
            KeyError: If no table was planned for ``path``.
        """
        for table in self.tables:
            if table.path == path:
                return table
        raise KeyError(format_path(path))


def slugify(title: str) -> str:
    """GitHub-style heading anchor: lowercase, punctuation dropped, spaces to ``-``."""
    slug = re.sub(r"[^\w\- ]", "", title.strip().lower())
    return slug.replace(" ", "-")


@dataclass(slots=True)
class _PendingTable:
    path: Path
    node: Node | None
    title: str
    anchor: str


class TablePlanner:
    """Turns a context-annotated document into a ``TablePlan``.

    A planner holds no per-document state; ``plan`` can be called
    repeatedly.

    Example::

        annotated = ContextExtractor().extract(parse(text))
        plan = TablePlanner(RenderConfig()).plan(annotated)
        [table.title for table in plan.tables]   # ["Values", "image"]
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or RenderConfig()

    @property
    def config(self) -> RenderConfig:
        return self._config

    def plan(self, annotated: AnnotatedDocument) -> TablePlan:
        """Plan the tables for ``annotated``.  Never raises on a valid tree."""
        run = _PlanRun(self._config, annotated)
        plan = run.build()
        logger.debug(
            "planned %d table(s), %d row(s)",
            len(plan.tables),
            sum(len(t.rows) for t in plan.tables),
        )
        return plan


class _PlanRun:
    """State of planning one document."""

    def __init__(self, config: RenderConfig, annotated: AnnotatedDocument) -> None:
        self._config = config
        self._contexts = annotated.contexts
        self._root = annotated.root
        self._documented: dict[Path, bool] = {}
        self._anchors: set[str] = set()
        if self._root is not None:
            self._mark_documented(self._root, ())

    # ------------------------------------------------------------------
    # Documented subtrees
    # ------------------------------------------------------------------

    def _mark_documented(self, node: Node, path: Path) -> bool:
        match node:
            case Mapping(entries=entries) if entries:
                found = False
                for entry in entries:
                    found |= self._mark_documented(
                        entry.value, (*path, entry.key.key_name)
                    )
            case Sequence(items=items) if items:
                found = False
                for index, item in enumerate(items):
                    found |= self._mark_documented(item, (*path, index))
            case _:
                found = self._contexts[path].description is not None
        self._documented[path] = found
        return found

    def _spawns(self, node: Node, path: Path) -> bool:
        if not isinstance(node, Mapping) or not node.entries:
            return False
        return not self._config.documented_threshold or self._documented[path]

    def _splits_on(self, item: Node, path: Path) -> bool:
        """True when a sequence item forces its sequence out of compact form."""
        if isinstance(item, Mapping) and item.entries:
            return self._spawns(item, path)
        return self._documented[path]

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _anchor(self, title: str) -> str:
        slug = slugify(title) or "table"
        candidate = slug
        suffix = 0
        while candidate in self._anchors:
            suffix += 1
            candidate = f"{slug}-{suffix}"
        self._anchors.add(candidate)
        return candidate

    def build(self) -> TablePlan:
        root_title = self._config.root_title
        root = _PendingTable((), self._root, root_title, self._anchor(root_title))
        tables: list[Table] = []
        self._emit(root, tables)
        return TablePlan(tables=tuple(tables))

    def _emit(self, pending: _PendingTable, tables: list[Table]) -> None:
        rows: list[Row] = []
        spawned: list[_PendingTable] = []
        match pending.node:
            case Mapping():
                self._mapping_rows(pending.node, pending.path, rows, spawned)
            case None:
                pass
            case _:
                rows.append(self._root_row(pending.node))

        columns = COLUMNS
        if not any(row.description for row in rows):
            columns = COLUMNS[:-1]
        tables.append(
            Table(
                path=pending.path,
                title=pending.title,
                anchor=pending.anchor,
                rows=tuple(rows),
                columns=columns,
            )
        )
        for child in spawned:
            self._emit(child, tables)

    def _spawn(self, node: Node, path: Path, spawned: list[_PendingTable]) -> str:
        title = format_path(path)
        anchor = self._anchor(title)
        spawned.append(_PendingTable(path, node, title, anchor))
        return anchor

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def _root_row(self, node: Node) -> Row:
        context = self._contexts[()]
        if isinstance(node, Sequence) and node.items:
            return Row(
                path=(),
                key=ROOT_KEY,
                type_hint=context.type_hint,
                default=self._compact(node),
                description=context.description,
                compact=True,
            )
        return self._leaf_row(context, key=ROOT_KEY)

    def _leaf_row(self, context: Context, key: str | None = None) -> Row:
        return Row(
            path=context.path,
            key=key or context.display_path,
            type_hint=context.type_hint,
            default=context.default,
            description=context.description,
        )

    def _link_row(self, context: Context, anchor: str) -> Row:
        return Row(
            path=context.path,
            key=context.display_path,
            type_hint=context.type_hint,
            default=None,
            description=context.description,
            link=anchor,
        )

    def _mapping_rows(
        self,
        mapping: Mapping,
        path: Path,
        rows: list[Row],
        spawned: list[_PendingTable],
    ) -> None:
        for entry in mapping.entries:
            self._node_rows(entry.value, (*path, entry.key.key_name), rows, spawned)

    def _node_rows(
        self,
        node: Node,
        path: Path,
        rows: list[Row],
        spawned: list[_PendingTable],
    ) -> None:
        context = self._contexts[path]
        match node:
            case Mapping(entries=entries) if entries:
                if self._spawns(node, path):
                    rows.append(self._link_row(context, self._spawn(node, path, spawned)))
                    return
                if context.description is not None:
                    rows.append(self._leaf_row(context))
                self._mapping_rows(node, path, rows, spawned)
            case Sequence(items=items) if items:
                self._sequence_rows(node, path, rows, spawned)
            case _:
                rows.append(self._leaf_row(context))

    def _sequence_rows(
        self,
        sequence: Sequence,
        path: Path,
        rows: list[Row],
        spawned: list[_PendingTable],
    ) -> None:
        context = self._contexts[path]
        split = any(
            self._splits_on(item, (*path, index))
            for index, item in enumerate(sequence.items)
        )
        if not split:
            rows.append(
                Row(
                    path=path,
                    key=context.display_path,
                    type_hint=context.type_hint,
                    default=self._compact(sequence),
                    description=context.description,
                    compact=True,
                )
            )
            return

        rows.append(self._leaf_row(context))
        for index, item in enumerate(sequence.items):
            item_path = (*path, index)
            item_context = self._contexts[item_path]
            match item:
                case Mapping(entries=entries) if entries:
                    anchor = self._spawn(item, item_path, spawned)
                    rows.append(self._link_row(item_context, anchor))
                case _:
                    self._node_rows(item, item_path, rows, spawned)

    # ------------------------------------------------------------------
    # Compact collections
    # ------------------------------------------------------------------

    def _compact(self, node: Node) -> str:
        limit = self._config.max_inline_sequence_items
        match node:
            case Sequence(items=items):
                parts = [self._compact(item) for item in items[:limit]]
                if len(items) > limit:
                    parts.append(_ELLIPSIS)
                return "[" + ", ".join(parts) + "]"
            case Mapping(entries=entries):
                parts = [
                    f"{_flow_scalar(entry.key)}: {self._compact(entry.value)}"
                    for entry in entries[:limit]
                ]
                if len(entries) > limit:
                    parts.append(_ELLIPSIS)
                return "{" + ", ".join(parts) + "}"
            case Scalar():
                return _flow_scalar(node)


def _flow_scalar(scalar: Scalar) -> str:
    """A scalar written the way it could appear inside a flow collection."""
    if scalar.alias:
        return scalar.text
    if scalar.kind is ScalarKind.NULL and not scalar.text.strip():
        return "null"
    if scalar.kind is not ScalarKind.STRING:
        return scalar.text.strip()
    if scalar.style in (ScalarStyle.SINGLE_QUOTED, ScalarStyle.DOUBLE_QUOTED):
        if "\n" not in scalar.text:
            return scalar.text.strip()
    value = str(scalar.value)
    if scalar.style is ScalarStyle.PLAIN and not _FLOW_UNSAFE.search(value):
        return value
    return json.dumps(value, ensure_ascii=False)
