"""ContextExtractor: per-node description, type, default and path.

Walks a ``Document`` once and produces one ``Context`` per node, keyed by the
node's path.  The tree itself is left untouched; later stages look contexts
up by path.

Description rules:

1. Leading comments, joined in source order with single spaces.
2. Otherwise the trailing comment.
3. Otherwise None.

A leading ``--`` marker (the helm-docs convention, ``# -- The image tag``)
is stripped from the description.

Extraction is total: every tree yields a context for every node.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum, auto

from yamdocs.errors import Diagnostic
from yamdocs.tree.nodes import (
    Comment,
    CommentPosition,
    Document,
    Mapping,
    Node,
    Path,
    Scalar,
    ScalarKind,
    Sequence,
)

__all__ = ["AnnotatedDocument", "Context", "ContextExtractor", "TypeTag", "format_path"]

logger = logging.getLogger(__name__)

_HELM_DOCS_MARKER = re.compile(r"^--(?:\s+|$)")

# Keys that would read ambiguously once dot-joined.
_NEEDS_QUOTING = re.compile(r"[.\[\]\s\"]|^$")


class TypeTag(StrEnum):
    """Type reported in the Type column.

    StrEnum values are the lowercased member names.
    """

    STRING = auto()
    INTEGER = auto()
    FLOAT = auto()
    BOOLEAN = auto()
    NULL = auto()
    OBJECT = auto()
    ARRAY = auto()


_SCALAR_TAGS: dict[ScalarKind, TypeTag] = {
    ScalarKind.STRING: TypeTag.STRING,
    ScalarKind.INTEGER: TypeTag.INTEGER,
    ScalarKind.FLOAT: TypeTag.FLOAT,
    ScalarKind.BOOLEAN: TypeTag.BOOLEAN,
    ScalarKind.NULL: TypeTag.NULL,
}


def format_path(path: Path) -> str:
    """Render a path as ``a.b[0].c``.

    Keys containing dots, brackets, quotes or whitespace (and empty keys)
    are written in bracket form, ``["a.b"]``, so distinct paths never render
    the same way.
    """
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif _NEEDS_QUOTING.search(segment):
            escaped = segment.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'["{escaped}"]')
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class Context:
    """Semantic metadata for one node.

    Attributes:
        path:        Path from the document root (unique per node).
        description: Prose from the node's comments, or None.
        type_hint:   Inferred type.
        default:     Rendered value for leaves and empty containers, else None.
    """

    path: Path
    description: str | None
    type_hint: TypeTag
    default: str | None

    @property
    def display_path(self) -> str:
        return format_path(self.path)


@dataclass(frozen=True, slots=True)
class AnnotatedDocument:
    """A Document Tree plus the contexts extracted from it.

    Attributes:
        root:        Root node, or None for an empty document.
        contexts:    Context of every node, keyed by path, in document order.
        diagnostics: Diagnostics carried over from parsing.
    """

    root: Node | None
    contexts: dict[Path, Context] = field(default_factory=dict)
    diagnostics: tuple[Diagnostic, ...] = ()

    def context(self, path: Path) -> Context:
        return self.contexts[path]


def _clean(text: str) -> str:
    return _HELM_DOCS_MARKER.sub("", text.strip()).strip()


def describe(comments: tuple[Comment, ...]) -> str | None:
    """Description for a node carrying ``comments``; leading ones win."""
    leading = [
        _clean(c.text) for c in comments if c.position is CommentPosition.LEADING
    ]
    leading = [text for text in leading if text]
    if leading:
        return " ".join(leading)
    for comment in comments:
        if comment.position is CommentPosition.TRAILING:
            return _clean(comment.text) or None
    return None


def scalar_default(scalar: Scalar) -> str:
    """The Default column text for a scalar leaf."""
    if scalar.alias:
        return scalar.text
    match scalar.kind:
        case ScalarKind.STRING:
            return str(scalar.value)
        case ScalarKind.NULL:
            return "null"
        case _:
            return scalar.text.strip()


class ContextExtractor:
    """Attaches a ``Context`` to every node of a document.

    Example::

        annotated = ContextExtractor().extract(parse("# How many\\nreplicas: 1\\n"))
        annotated.contexts[("replicas",)].description   # "How many"
        annotated.contexts[("replicas",)].type_hint     # TypeTag.INTEGER
    """

    def extract(self, document: Document) -> AnnotatedDocument:
        contexts: dict[Path, Context] = {}
        if document.root is not None:
            self._visit(document.root, (), contexts)
        logger.debug("extracted %d context(s)", len(contexts))
        return AnnotatedDocument(
            root=document.root,
            contexts=contexts,
            diagnostics=document.diagnostics,
        )

    def _visit(self, node: Node, path: Path, contexts: dict[Path, Context]) -> None:
        match node:
            case Scalar():
                contexts[path] = Context(
                    path=path,
                    description=describe(node.comments),
                    type_hint=_SCALAR_TAGS[node.kind],
                    default=scalar_default(node),
                )
            case Mapping(entries=entries):
                contexts[path] = Context(
                    path=path,
                    description=describe(node.comments),
                    type_hint=TypeTag.OBJECT,
                    default=None if entries else "{}",
                )
                for entry in entries:
                    self._visit(entry.value, (*path, entry.key.key_name), contexts)
            case Sequence(items=items):
                contexts[path] = Context(
                    path=path,
                    description=describe(node.comments),
                    type_hint=TypeTag.ARRAY,
                    default=None if items else "[]",
                )
                for index, item in enumerate(items):
                    self._visit(item, (*path, index), contexts)
