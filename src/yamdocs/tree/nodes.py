"""Document Tree node types for parsed YAML.

A parsed document is a strict ownership tree built from three frozen node
kinds -- ``Mapping``, ``Sequence`` and ``Scalar`` -- joined in the closed
``Node`` union.  Consumers dispatch with ``match`` over the three kinds.

Nodes are never mutated once the parser returns them.  Comment attachment
produces a new tree (see ``yamdocs.tree.comments``) rather than editing the
one it was given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from yamdocs.errors import Diagnostic
from yamdocs.span import Span

__all__ = [
    "Comment",
    "CommentPosition",
    "Document",
    "Mapping",
    "MappingEntry",
    "Node",
    "Path",
    "Scalar",
    "ScalarKind",
    "ScalarStyle",
    "Sequence",
]

# Key path from the document root: str segments for mapping keys, int for
# sequence indices.  The root node has the empty path.
Path = tuple[str | int, ...]


class ScalarKind(StrEnum):
    """Inferred type of a scalar leaf.

    StrEnum values are the lowercased member names:
    - STRING  -> "string"
    - INTEGER -> "integer"
    - FLOAT   -> "float"
    - BOOLEAN -> "boolean"
    - NULL    -> "null"
    """

    STRING = auto()
    INTEGER = auto()
    FLOAT = auto()
    BOOLEAN = auto()
    NULL = auto()


class ScalarStyle(StrEnum):
    """How a scalar was written in the source."""

    PLAIN = auto()
    SINGLE_QUOTED = auto()
    DOUBLE_QUOTED = auto()
    LITERAL = auto()
    FOLDED = auto()


class CommentPosition(StrEnum):
    """Where a comment sits relative to the node it is attached to.

    - LEADING:  on the lines directly above the node.
    - TRAILING: on the node's line, after its value.
    """

    LEADING = auto()
    TRAILING = auto()


@dataclass(frozen=True, slots=True)
class Comment:
    """A ``#`` comment recovered from the source.

    Attributes:
        text:     Comment body with the ``#`` marker and surrounding
                  whitespace removed.
        span:     Location of the whole comment, marker included.
        own_line: True when only whitespace precedes the comment on its line.
        position: Set once the comment is attached to a node; None while the
                  comment is unattached (free).
    """

    text: str
    span: Span
    own_line: bool
    position: CommentPosition | None = None


@dataclass(frozen=True, slots=True)
class Scalar:
    """A typed leaf value.

    Attributes:
        kind:     Inferred type (see ScalarKind).
        value:    Python value: str, int, float, bool or None.
        text:     Verbatim source text, quotes and block headers included.
        span:     Location in the source.
        style:    How the scalar was written.
        anchor:   Anchor name declared on the scalar (``&name``), if any.
        alias:    True when the scalar stands in for an unresolved ``*alias``.
        comments: Comments attached to this node.
    """

    kind: ScalarKind
    value: Any
    text: str
    span: Span
    style: ScalarStyle = ScalarStyle.PLAIN
    anchor: str | None = None
    alias: bool = False
    comments: tuple[Comment, ...] = ()

    @property
    def key_name(self) -> str:
        """This scalar rendered as a mapping key."""
        if self.kind is ScalarKind.STRING:
            return str(self.value)
        return self.text.strip()


@dataclass(frozen=True, slots=True)
class MappingEntry:
    """One ``key: value`` pair of a mapping."""

    key: Scalar
    value: Node


@dataclass(frozen=True, slots=True)
class Mapping:
    """An ordered mapping; entry order is the source order.

    Attributes:
        entries:       Key/value pairs, duplicate keys already collapsed.
        span:          Location in the source.
        flow:          True for ``{...}`` flow mappings.
        anchor:        Anchor name, if any.
        comments:      Comments documenting this node.
        free_comments: Comments inside this mapping that document no node.
    """

    entries: tuple[MappingEntry, ...]
    span: Span
    flow: bool = False
    anchor: str | None = None
    comments: tuple[Comment, ...] = ()
    free_comments: tuple[Comment, ...] = ()


@dataclass(frozen=True, slots=True)
class Sequence:
    """An ordered sequence of nodes.

    Attributes:
        items:         Child nodes in source order.
        span:          Location in the source.
        flow:          True for ``[...]`` flow sequences.
        anchor:        Anchor name, if any.
        comments:      Comments documenting this node.
        free_comments: Comments inside this sequence that document no node.
        markers:       Span of each item's ``-`` marker (block sequences only).
    """

    items: tuple[Node, ...]
    span: Span
    flow: bool = False
    anchor: str | None = None
    comments: tuple[Comment, ...] = ()
    free_comments: tuple[Comment, ...] = ()
    markers: tuple[Span, ...] = ()


Node = Mapping | Sequence | Scalar


@dataclass(frozen=True, slots=True)
class Document:
    """The parsed, comment-annotated form of one YAML document.

    Attributes:
        root:        Root node, or None for a document with no content.
        diagnostics: Non-fatal findings from lexing and parsing.
        comments:    Every comment in the document, in source order.
        free_comments: Comments that could not be placed inside any container
                     (for example around a scalar root).
    """

    root: Node | None
    diagnostics: tuple[Diagnostic, ...] = ()
    comments: tuple[Comment, ...] = ()
    free_comments: tuple[Comment, ...] = ()
