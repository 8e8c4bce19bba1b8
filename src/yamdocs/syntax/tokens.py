"""Token types produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from yamdocs.span import Span

__all__ = ["CollectionKind", "Token", "TokenKind"]


class TokenKind(StrEnum):
    """Kinds of tokens in the lexer's output stream.

    - INDENT / DEDENT:       a block collection opens / closes.
    - KEY:                   a mapping key followed by ``:``.
    - SCALAR_VALUE:          a scalar in value position.
    - BLOCK_SEQUENCE_MARKER: a ``-`` item indicator.
    - FLOW_START / FLOW_END: ``[``/``{`` and ``]``/``}``.
    - FLOW_ENTRY:            ``,`` inside a flow collection.
    - ANCHOR / ALIAS / TAG:  node properties and ``*alias`` references.
    - COMMENT:               a ``#`` comment.
    - DOCUMENT_END:          end of the first document (always the last token).
    """

    INDENT = auto()
    DEDENT = auto()
    KEY = auto()
    SCALAR_VALUE = auto()
    BLOCK_SEQUENCE_MARKER = auto()
    FLOW_START = auto()
    FLOW_END = auto()
    FLOW_ENTRY = auto()
    ANCHOR = auto()
    ALIAS = auto()
    TAG = auto()
    COMMENT = auto()
    DOCUMENT_END = auto()


class CollectionKind(StrEnum):
    """Which collection an INDENT or FLOW_START token opens."""

    MAPPING = auto()
    SEQUENCE = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical token.

    Attributes:
        kind:       Token kind.
        span:       Location in the source.
        value:      Scalar value (str) for SCALAR_VALUE and KEY; anchor or
                    alias name for ANCHOR/ALIAS; tag for TAG; comment text
                    for COMMENT.  None otherwise, and None for a KEY whose
                    key is not a scalar.
        text:       Verbatim source text of the token (of the key scalar for
                    KEY).
        style:      PyYAML scalar style (None, "'", '"', "|", ">") for
                    SCALAR_VALUE and KEY.
        collection: For INDENT, FLOW_START and FLOW_END.
        own_line:   For COMMENT: only whitespace precedes it on its line.
        more_documents: For DOCUMENT_END: another document follows.
        key_span:   For KEY: span of the key scalar (``span`` covers the
                    whole ``key:`` run).
        key_tag:    For KEY: tag written on the key scalar, if any.
    """

    kind: TokenKind
    span: Span
    value: Any = None
    text: str = ""
    style: str | None = None
    collection: CollectionKind | None = None
    own_line: bool = False
    more_documents: bool = False
    key_span: Span | None = None
    key_tag: str | None = None
