"""StructuralParser: builds a Document Tree from the lexer's token stream.

Recursive descent over ``Token`` objects, one method per collection form:

- block mapping:       INDENT(mapping) (KEY value?)* DEDENT
- block sequence:      INDENT(sequence) (MARKER value?)* DEDENT
- indentless sequence: (MARKER value?)+ directly after a KEY
- flow sequence:       FLOW_START (entry (FLOW_ENTRY entry)*)? FLOW_END
- flow mapping:        FLOW_START (pair (FLOW_ENTRY pair)*)? FLOW_END

The parser itself ignores comments: COMMENT tokens are set aside as they go
past and handed to ``attach_comments`` once the tree is complete.

Duplicate keys keep the last value (in the position of the first
occurrence) and produce a diagnostic, as do unresolved aliases and ignored
trailing documents.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from yamdocs.errors import Diagnostic, DiagnosticKind, ParseError, ParseErrorKind
from yamdocs.span import Span
from yamdocs.syntax.lexer import Lexer
from yamdocs.syntax.resolver import COLLECTION_TAGS, CORE_TAGS, resolve_scalar
from yamdocs.syntax.tokens import CollectionKind, Token, TokenKind
from yamdocs.tree.comments import attach_comments
from yamdocs.tree.nodes import (
    Comment,
    Document,
    Mapping,
    MappingEntry,
    Node,
    Scalar,
    ScalarKind,
    ScalarStyle,
    Sequence,
)

__all__ = ["StructuralParser", "parse"]

logger = logging.getLogger(__name__)

_STYLES: dict[str | None, ScalarStyle] = {
    None: ScalarStyle.PLAIN,
    "'": ScalarStyle.SINGLE_QUOTED,
    '"': ScalarStyle.DOUBLE_QUOTED,
    "|": ScalarStyle.LITERAL,
    ">": ScalarStyle.FOLDED,
}

# Tokens that can begin a node in value position.
_NODE_START = frozenset(
    {
        TokenKind.INDENT,
        TokenKind.SCALAR_VALUE,
        TokenKind.FLOW_START,
        TokenKind.ALIAS,
        TokenKind.ANCHOR,
        TokenKind.TAG,
    }
)

# Deepest collection nesting accepted; every later stage recurses per level.
MAX_DEPTH = 200


class StructuralParser:
    """Consumes a token stream and produces a ``Document``.

    A parser instance handles one document; create a new one per call.

    Example::

        document = StructuralParser(Lexer("a: 1\\na: 2\\n")).parse()
        document.root.entries[0].value.value   # 2
        document.diagnostics[0].kind           # DiagnosticKind.DUPLICATE_KEY
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self._tokens: Iterator[Token] = iter(())
        self._lookahead: Token | None = None
        self._last_end: Span = Span.point(0, 0)
        self._comments: list[Comment] = []
        self._depth = 0
        self._diagnostics: list[Diagnostic] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self) -> Document:
        """Parse the first document of the lexer's source.

        Returns:
            A ``Document`` whose nodes carry their attached comments.

        Raises:
            LexError:   Propagated from the lexer.
            ParseError: On structurally invalid or unsupported input.
        """
        self._tokens = self._lexer.tokens()
        self._lookahead = None
        self._comments = []
        self._diagnostics = []
        self._depth = 0

        root: Node | None = None
        if self._peek().kind is not TokenKind.DOCUMENT_END:
            root = self._parse_node()

        end = self._next()
        if end.kind is not TokenKind.DOCUMENT_END:
            raise self._unexpected(end, "expected end of document")
        if end.more_documents:
            self._diagnostics.append(
                Diagnostic(
                    DiagnosticKind.IGNORED_DOCUMENTS,
                    "only the first document is converted; later documents "
                    "are ignored",
                    end.span,
                )
            )

        comments = tuple(self._comments)
        document_free: tuple[Comment, ...] = ()
        if root is not None:
            root, document_free = attach_comments(root, comments)
        else:
            document_free = comments

        logger.debug(
            "parsed document: %d comment(s), %d diagnostic(s)",
            len(comments),
            len(self._diagnostics),
        )
        return Document(
            root=root,
            diagnostics=tuple(self._diagnostics),
            comments=comments,
            free_comments=document_free,
        )

    # ------------------------------------------------------------------
    # Token access (COMMENT tokens are collected, never returned)
    # ------------------------------------------------------------------

    def _pull(self) -> Token:
        for token in self._tokens:
            if token.kind is TokenKind.COMMENT:
                self._comments.append(
                    Comment(text=token.value, span=token.span, own_line=token.own_line)
                )
                continue
            return token
        # The lexer always finishes with DOCUMENT_END; reaching here means
        # the parser read past it.
        raise ParseError(
            "unexpected end of token stream", ParseErrorKind.SYNTAX, self._last_end
        )

    def _peek(self) -> Token:
        if self._lookahead is None:
            self._lookahead = self._pull()
        return self._lookahead

    def _next(self) -> Token:
        token = self._peek()
        self._lookahead = None
        self._last_end = token.span
        return token

    def _unexpected(self, token: Token, expected: str) -> ParseError:
        return ParseError(
            f"{expected}, but found {token.kind}", ParseErrorKind.SYNTAX, token.span
        )

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _parse_node(self) -> Node:
        """Parse one node, including any anchor/tag properties before it."""
        anchor: str | None = None
        tag: str | None = None
        start: Span | None = None
        while self._peek().kind in (TokenKind.ANCHOR, TokenKind.TAG):
            prop = self._next()
            start = start or prop.span
            if prop.kind is TokenKind.ANCHOR:
                anchor = prop.value
            else:
                tag = self._check_tag(prop)

        token = self._peek()
        self._depth += 1
        if self._depth > MAX_DEPTH:
            raise ParseError(
                f"collections nested more than {MAX_DEPTH} levels deep",
                ParseErrorKind.SYNTAX,
                token.span,
            )
        match token.kind:
            case TokenKind.INDENT if token.collection is CollectionKind.MAPPING:
                node: Node = self._parse_block_mapping(anchor)
            case TokenKind.INDENT:
                node = self._parse_block_sequence(anchor)
            case TokenKind.FLOW_START if token.collection is CollectionKind.MAPPING:
                node = self._parse_flow_mapping(anchor)
            case TokenKind.FLOW_START:
                node = self._parse_flow_sequence(anchor)
            case TokenKind.SCALAR_VALUE:
                node = self._scalar(self._next(), tag=tag, anchor=anchor)
            case TokenKind.ALIAS:
                node = self._alias(self._next())
            case TokenKind.BLOCK_SEQUENCE_MARKER:
                node = self._parse_indentless_sequence(anchor)
            case _:
                # Properties with no content: an empty (null) node.
                at = start or token.span
                node = self._empty(
                    Span.point(at.end_line, at.end_column, at.end_index), anchor
                )
        self._depth -= 1
        return node

    def _check_tag(self, token: Token) -> str | None:
        if token.value in CORE_TAGS:
            return token.value
        if token.value in COLLECTION_TAGS:
            return None
        raise ParseError(
            f"unsupported tag {token.value!r}", ParseErrorKind.UNSUPPORTED, token.span
        )

    def _scalar(
        self, token: Token, tag: str | None = None, anchor: str | None = None
    ) -> Scalar:
        plain = token.style is None
        kind, value = resolve_scalar(token.value, plain, tag)
        return Scalar(
            kind=kind,
            value=value,
            text=token.text,
            span=token.span,
            style=_STYLES[token.style],
            anchor=anchor,
        )

    def _alias(self, token: Token) -> Scalar:
        self._diagnostics.append(
            Diagnostic(
                DiagnosticKind.UNRESOLVED_ALIAS,
                f"alias {token.text!r} is not resolved; kept as a literal",
                token.span,
            )
        )
        return Scalar(
            kind=ScalarKind.STRING,
            value=token.value,
            text=token.text,
            span=token.span,
            alias=True,
        )

    def _empty(self, at: Span, anchor: str | None = None) -> Scalar:
        return Scalar(
            kind=ScalarKind.NULL, value=None, text="", span=at, anchor=anchor
        )

    def _key(self, token: Token) -> Scalar:
        if token.key_span is None:
            raise ParseError(
                "complex or empty mapping keys are not supported",
                ParseErrorKind.UNSUPPORTED,
                token.span,
            )
        tag = None
        if token.key_tag is not None:
            tag = self._check_tag(
                Token(TokenKind.TAG, token.key_span, value=token.key_tag)
            )
        kind, value = resolve_scalar(token.value, token.style is None, tag)
        return Scalar(
            kind=kind,
            value=value,
            text=token.text,
            span=token.key_span,
            style=_STYLES[token.style],
        )

    def _after_key(self, key_token: Token) -> Span:
        span = key_token.span
        return Span.point(span.end_line, span.end_column, span.end_index)

    # ------------------------------------------------------------------
    # Block collections
    # ------------------------------------------------------------------

    def _parse_block_mapping(self, anchor: str | None) -> Mapping:
        start = self._next()
        span = start.span
        entries: list[MappingEntry] = []
        positions: dict[str, int] = {}

        while True:
            token = self._peek()
            if token.kind is TokenKind.DEDENT:
                self._next()
                break
            if token.kind is not TokenKind.KEY:
                raise self._indentation_error(token)
            key_token = self._next()
            key = self._key(key_token)

            following = self._peek().kind
            if following in _NODE_START:
                value = self._parse_node()
            elif following is TokenKind.BLOCK_SEQUENCE_MARKER:
                value = self._parse_indentless_sequence(None)
            else:
                value = self._empty(self._after_key(key_token))
            span = span.cover(key.span).cover(value.span)
            self._add_entry(entries, positions, MappingEntry(key, value))

        return Mapping(entries=tuple(entries), span=span, anchor=anchor)

    def _parse_block_sequence(self, anchor: str | None) -> Sequence:
        start = self._next()
        items: list[Node] = []
        markers: list[Span] = []

        while True:
            token = self._peek()
            if token.kind is TokenKind.DEDENT:
                self._next()
                break
            if token.kind is not TokenKind.BLOCK_SEQUENCE_MARKER:
                raise self._indentation_error(token)
            marker = self._next()
            markers.append(marker.span)
            items.append(self._sequence_item(marker))

        span = start.span
        if items:
            span = span.cover(items[-1].span)
        return Sequence(
            items=tuple(items), span=span, anchor=anchor, markers=tuple(markers)
        )

    def _parse_indentless_sequence(self, anchor: str | None) -> Sequence:
        span = self._peek().span
        items: list[Node] = []
        markers: list[Span] = []
        while self._peek().kind is TokenKind.BLOCK_SEQUENCE_MARKER:
            marker = self._next()
            span = span.cover(marker.span)
            markers.append(marker.span)
            items.append(self._sequence_item(marker))
        if items:
            span = span.cover(items[-1].span)
        return Sequence(
            items=tuple(items), span=span, anchor=anchor, markers=tuple(markers)
        )

    def _sequence_item(self, marker: Token) -> Node:
        if self._peek().kind in _NODE_START:
            return self._parse_node()
        end = marker.span
        return self._empty(Span.point(end.end_line, end.end_column, end.end_index))

    def _indentation_error(self, token: Token) -> ParseError:
        if token.kind is TokenKind.DOCUMENT_END:
            return self._unexpected(token, "expected a block collection to close")
        return ParseError(
            f"inconsistent indentation: {token.kind} does not line up with any "
            "enclosing block",
            ParseErrorKind.INCONSISTENT_INDENTATION,
            token.span,
        )

    # ------------------------------------------------------------------
    # Flow collections
    # ------------------------------------------------------------------

    def _parse_flow_sequence(self, anchor: str | None) -> Sequence:
        start = self._next()
        items: list[Node] = []

        while not self._flow_closed(start):
            token = self._peek()
            if token.kind is TokenKind.KEY:
                # "[a: 1]" -- a single-pair mapping inside a sequence
                key_token = self._next()
                key = self._key(key_token)
                value = self._flow_value(key_token)
                items.append(
                    Mapping(
                        entries=(MappingEntry(key, value),),
                        span=key.span.cover(value.span),
                        flow=True,
                    )
                )
            else:
                items.append(self._parse_node())
            self._flow_separator(start)

        end = self._next()
        return Sequence(
            items=tuple(items), span=start.span.cover(end.span), flow=True, anchor=anchor
        )

    def _parse_flow_mapping(self, anchor: str | None) -> Mapping:
        start = self._next()
        entries: list[MappingEntry] = []
        positions: dict[str, int] = {}

        while not self._flow_closed(start):
            token = self._next()
            if token.kind is TokenKind.KEY:
                key = self._key(token)
                value = self._flow_value(token)
            elif token.kind is TokenKind.SCALAR_VALUE:
                # "{x, y}" -- a key with no ':' has a null value
                key = self._scalar(token)
                end = token.span
                value = self._empty(
                    Span.point(end.end_line, end.end_column, end.end_index)
                )
            else:
                raise self._unexpected(token, "expected a flow mapping key")
            self._add_entry(entries, positions, MappingEntry(key, value))
            self._flow_separator(start)

        end = self._next()
        return Mapping(
            entries=tuple(entries),
            span=start.span.cover(end.span),
            flow=True,
            anchor=anchor,
        )

    def _flow_value(self, key_token: Token) -> Node:
        if self._peek().kind in (TokenKind.FLOW_ENTRY, TokenKind.FLOW_END):
            return self._empty(self._after_key(key_token))
        return self._parse_node()

    def _flow_closed(self, start: Token) -> bool:
        token = self._peek()
        if token.kind is TokenKind.DOCUMENT_END:
            raise ParseError(
                f"unterminated flow {start.collection}",
                ParseErrorKind.UNTERMINATED_FLOW,
                start.span,
            )
        return token.kind is TokenKind.FLOW_END

    def _flow_separator(self, start: Token) -> None:
        if self._flow_closed(start):
            return
        token = self._next()
        if token.kind is not TokenKind.FLOW_ENTRY:
            raise self._unexpected(token, "expected ',' or the end of the collection")

    # ------------------------------------------------------------------
    # Duplicate keys
    # ------------------------------------------------------------------

    def _add_entry(
        self,
        entries: list[MappingEntry],
        positions: dict[str, int],
        entry: MappingEntry,
    ) -> None:
        name = entry.key.key_name
        if name in positions:
            self._diagnostics.append(
                Diagnostic(
                    DiagnosticKind.DUPLICATE_KEY,
                    f"duplicate key {name!r}; the last value wins",
                    entry.key.span,
                )
            )
            entries[positions[name]] = entry
            return
        positions[name] = len(entries)
        entries.append(entry)


def parse(source: str | bytes) -> Document:
    """Parse the first YAML document in ``source`` into a Document Tree.

    Raises:
        LexError:   If the text cannot be tokenised.
        ParseError: If the tokens do not form a supported structure.
    """
    return StructuralParser(Lexer(source)).parse()
