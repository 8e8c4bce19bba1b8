"""Lexer: YAML text to a forward-only stream of ``Token`` objects.

The heavy lifting -- quoting, escapes, block scalars, flow context, simple
key detection -- is done by PyYAML's scanner (``yaml.scan``).  The PyYAML
scanner throws comments away, so the lexer puts them back: every stretch of
source between two consecutive scanner tokens holds nothing but whitespace
and comments, and the comment on a block scalar header line is recovered
from the scalar's own text.

Scanner tokens are then mapped onto ``TokenKind``:

- ``BlockMappingStart``/``BlockSequenceStart`` -> INDENT, ``BlockEnd`` -> DEDENT
- ``Key`` + key ``Scalar`` + ``Value``           -> one KEY token
- ``Scalar``                                   -> SCALAR_VALUE
- ``BlockEntry``                               -> BLOCK_SEQUENCE_MARKER
- flow start/end/entry, anchor, alias and tag tokens map one to one

Only the first document is tokenised.  The stream ends with exactly one
DOCUMENT_END token whose ``more_documents`` flag records whether anything
followed.
"""

from __future__ import annotations

import bisect
import logging
import re
from collections.abc import Iterator

import yaml

from yamdocs.errors import LexError, ParseError, ParseErrorKind
from yamdocs.span import Span
from yamdocs.syntax.tokens import CollectionKind, Token, TokenKind

__all__ = ["Lexer", "decode_source", "split_documents"]

logger = logging.getLogger(__name__)

# Characters PyYAML counts as line breaks once \r and \r\n are folded to \n.
_LINE_BREAKS = frozenset("\n\x85\u2028\u2029")

# Comment on a block scalar header line: "|-  # note" / ">2 # note"
_BLOCK_HEADER_COMMENT = re.compile(r"[|>][-+0-9]*[ \t]+(#[^\n]*)")

_SIMPLE_KINDS: dict[type, tuple[TokenKind, CollectionKind | None]] = {
    yaml.BlockMappingStartToken: (TokenKind.INDENT, CollectionKind.MAPPING),
    yaml.BlockSequenceStartToken: (TokenKind.INDENT, CollectionKind.SEQUENCE),
    yaml.BlockEndToken: (TokenKind.DEDENT, None),
    yaml.BlockEntryToken: (TokenKind.BLOCK_SEQUENCE_MARKER, None),
    yaml.FlowMappingStartToken: (TokenKind.FLOW_START, CollectionKind.MAPPING),
    yaml.FlowSequenceStartToken: (TokenKind.FLOW_START, CollectionKind.SEQUENCE),
    yaml.FlowMappingEndToken: (TokenKind.FLOW_END, CollectionKind.MAPPING),
    yaml.FlowSequenceEndToken: (TokenKind.FLOW_END, CollectionKind.SEQUENCE),
    yaml.FlowEntryToken: (TokenKind.FLOW_ENTRY, None),
}


def decode_source(source: str | bytes) -> str:
    """Return ``source`` as text with line endings folded to ``\\n``.

    Raises:
        LexError: If ``source`` is bytes that are not valid UTF-8.
    """
    if isinstance(source, bytes):
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            line = source.count(b"\n", 0, exc.start)
            column = exc.start - (source.rfind(b"\n", 0, exc.start) + 1)
            raise LexError(
                f"invalid UTF-8 byte sequence: {exc.reason}",
                Span.point(line, column, exc.start),
            ) from exc
    else:
        text = source
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _tag_text(value: tuple[str | None, str]) -> str:
    handle, suffix = value
    return f"{handle}{suffix}" if handle else suffix


class Lexer:
    """Turns YAML text into a lazy stream of tokens.

    Example::

        lexer = Lexer("replicaCount: 1  # how many\\n")
        [t.kind for t in lexer.tokens()]
        # [INDENT, KEY, SCALAR_VALUE, COMMENT, DEDENT, DOCUMENT_END]
    """

    def __init__(self, source: str | bytes) -> None:
        self.text = decode_source(source)
        self._line_starts = [0] + [
            i + 1 for i, ch in enumerate(self.text) if ch in _LINE_BREAKS
        ]
        self._cursor = 0
        self._pending: list[yaml.Token] = []
        self._scanner: Iterator[yaml.Token] | None = None
        self._scan_text: str | None = None

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def position(self, index: int) -> tuple[int, int]:
        """Return the 0-based ``(line, column)`` of a character offset."""
        line = bisect.bisect_right(self._line_starts, index) - 1
        return line, index - self._line_starts[line]

    def _span(self, start: int, end: int) -> Span:
        start_line, start_column = self.position(start)
        end_line, end_column = self.position(end)
        return Span(start_line, start_column, end_line, end_column, start, end)

    # ------------------------------------------------------------------
    # Scanner access
    # ------------------------------------------------------------------

    def _raw_tokens(self) -> Iterator[yaml.Token]:
        try:
            yield from yaml.scan(self._scannable(), Loader=yaml.SafeLoader)
        except yaml.reader.ReaderError as exc:
            line, column = self.position(exc.position)
            raise LexError(
                f"unacceptable character #x{exc.character:04x}: {exc.reason}",
                Span.point(line, column, exc.position),
            ) from exc
        except yaml.scanner.ScannerError as exc:
            raise self._translate(exc) from exc

    def _scannable(self) -> str:
        """Source text as handed to the scanner.

        PyYAML only accepts spaces between tokens, while YAML also allows
        tabs there (``a:\\t1``, ``a: 1\\t# note``).  Every tab the scanner
        trips over outside indentation is swapped for a space, one character
        for one, so marks and offsets still index ``self.text``.  Tabs inside
        quoted and block scalars never trip the scanner and are kept.
        """
        if self._scan_text is not None:
            return self._scan_text
        text = self.text
        if "\t" in text:
            while (tab := self._separator_tab(text)) is not None:
                text = f"{text[:tab]} {text[tab + 1:]}"
        self._scan_text = text
        return text

    def _separator_tab(self, text: str) -> int | None:
        """Offset of the first tab that stops the scanner, if it may be a space."""
        try:
            for _ in yaml.scan(text, Loader=yaml.SafeLoader):
                pass
        except yaml.scanner.ScannerError as exc:
            mark = exc.problem_mark
            if mark is None or text[mark.index : mark.index + 1] != "\t":
                return None
            if self._indents(mark.index):
                return None
            return mark.index
        return None

    def _indents(self, index: int) -> bool:
        """True when the tab at ``index`` sits in a content line's indentation."""
        _, column = self.position(index)
        if self.text[index - column : index].strip(" \t"):
            return False
        line_end = self.text.find("\n", index)
        rest = self.text[index : None if line_end == -1 else line_end].lstrip(" \t")
        return bool(rest) and not rest.startswith("#")

    def _translate(self, exc: yaml.scanner.ScannerError) -> LexError | ParseError:
        mark = exc.problem_mark
        span = Span.from_marks(mark, mark) if mark is not None else None
        if mark is not None and self.text[mark.index : mark.index + 1] == "\t":
            if self._indents(mark.index):
                return LexError("tab character used for indentation", span)
        return ParseError(exc.problem or str(exc), ParseErrorKind.SYNTAX, span)

    def _next_raw(self) -> yaml.Token | None:
        if self._pending:
            return self._pending.pop()
        assert self._scanner is not None
        return next(self._scanner, None)

    def _peek_raw(self) -> yaml.Token | None:
        token = self._next_raw()
        if token is not None:
            self._pending.append(token)
        return token

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _comment(self, start: int, end: int) -> Token:
        line, column = self.position(start)
        own_line = not self.text[start - column : start].strip()
        raw = self.text[start:end]
        return Token(
            kind=TokenKind.COMMENT,
            span=self._span(start, end),
            value=raw.lstrip("#").strip(),
            text=raw,
            own_line=own_line,
        )

    def _gap_comments(self, until: int) -> Iterator[Token]:
        """Yield the comments between the cursor and ``until``."""
        if until <= self._cursor:
            return
        gap_start = self._cursor
        gap = self.text[gap_start:until]
        self._cursor = until
        offset = 0
        while (hash_at := gap.find("#", offset)) != -1:
            line_end = gap.find("\n", hash_at)
            if line_end == -1:
                line_end = len(gap)
            yield self._comment(gap_start + hash_at, gap_start + line_end)
            offset = line_end

    def _advance(self, raw: yaml.Token) -> Iterator[Token]:
        """Emit gap comments before ``raw`` and move the cursor past it."""
        yield from self._gap_comments(raw.start_mark.index)
        self._cursor = max(self._cursor, raw.end_mark.index)

    # ------------------------------------------------------------------
    # Token stream
    # ------------------------------------------------------------------

    def tokens(self) -> Iterator[Token]:
        """Yield the tokens of the first document, ending with DOCUMENT_END.

        Raises:
            LexError:   On tab indentation or characters YAML forbids.
            ParseError: On other malformations the scanner detects.
        """
        self._scanner = self._raw_tokens()
        self._cursor = 0
        self._pending = []
        seen_content = False
        seen_start = False

        while (raw := self._next_raw()) is not None:
            if isinstance(raw, (yaml.StreamStartToken, yaml.DirectiveToken)):
                continue

            if isinstance(raw, yaml.DocumentStartToken):
                if not (seen_content or seen_start):
                    seen_start = True
                    yield from self._advance(raw)
                    continue
                yield from self._gap_comments(raw.start_mark.index)
                yield self._document_end(raw, more_documents=True)
                return

            if isinstance(raw, (yaml.DocumentEndToken, yaml.StreamEndToken)):
                yield from self._gap_comments(raw.start_mark.index)
                more = False
                if isinstance(raw, yaml.DocumentEndToken):
                    more = self._has_more_documents()
                yield self._document_end(raw, more_documents=more)
                return

            seen_content = True
            yield from self._advance(raw)

            if isinstance(raw, (yaml.KeyToken, yaml.ValueToken)):
                yield from self._key(raw)
            elif isinstance(raw, yaml.ScalarToken):
                yield self._scalar(raw)
                yield from self._block_header_comment(raw)
            elif isinstance(raw, yaml.AnchorToken):
                yield Token(TokenKind.ANCHOR, self._mark_span(raw), value=raw.value)
            elif isinstance(raw, yaml.AliasToken):
                yield Token(
                    TokenKind.ALIAS,
                    self._mark_span(raw),
                    value=raw.value,
                    text=self.text[raw.start_mark.index : raw.end_mark.index],
                )
            elif isinstance(raw, yaml.TagToken):
                yield Token(
                    TokenKind.TAG, self._mark_span(raw), value=_tag_text(raw.value)
                )
            else:
                kind, collection = _SIMPLE_KINDS[type(raw)]
                yield Token(kind, self._mark_span(raw), collection=collection)

    def _mark_span(self, raw: yaml.Token) -> Span:
        return Span.from_marks(raw.start_mark, raw.end_mark)

    def _document_end(self, raw: yaml.Token, *, more_documents: bool) -> Token:
        if more_documents:
            logger.debug("ignoring documents after the first at %s", raw.start_mark)
        return Token(
            TokenKind.DOCUMENT_END,
            self._mark_span(raw),
            more_documents=more_documents,
        )

    def _has_more_documents(self) -> bool:
        try:
            following = self._peek_raw()
        except (LexError, ParseError):
            # A later document that does not even scan is still a document.
            return True
        return following is not None and not isinstance(
            following, yaml.StreamEndToken
        )

    def _scalar(self, raw: yaml.ScalarToken) -> Token:
        return Token(
            TokenKind.SCALAR_VALUE,
            self._mark_span(raw),
            value=self._scalar_value(raw),
            text=self.text[raw.start_mark.index : raw.end_mark.index],
            style=None if raw.plain else raw.style,
        )

    def _scalar_value(self, raw: yaml.ScalarToken) -> str:
        # A one-line plain scalar is its own source text, tabs included.
        if raw.plain and self._scan_text is not self.text:
            if raw.start_mark.line == raw.end_mark.line:
                return self.text[raw.start_mark.index : raw.end_mark.index]
        return raw.value

    def _block_header_comment(self, raw: yaml.ScalarToken) -> Iterator[Token]:
        if raw.style not in ("|", ">"):
            return
        start = raw.start_mark.index
        match = _BLOCK_HEADER_COMMENT.match(self.text, start, raw.end_mark.index)
        if match is not None:
            yield self._comment(match.start(1), match.end(1))

    def _key(self, raw: yaml.Token) -> Iterator[Token]:
        """Fold ``Key [Tag] Scalar Value`` into one KEY token."""
        start = raw.start_mark
        end = raw.end_mark
        key_scalar: yaml.ScalarToken | None = None
        key_tag: str | None = None

        if isinstance(raw, yaml.KeyToken):
            following = self._peek_raw()
            if isinstance(following, yaml.TagToken):
                self._next_raw()
                yield from self._advance(following)
                key_tag = _tag_text(following.value)
                following = self._peek_raw()
            if isinstance(following, yaml.ScalarToken):
                key_scalar = following
                self._next_raw()
                yield from self._advance(following)
                end = following.end_mark
                following = self._peek_raw()
            if isinstance(following, yaml.ValueToken):
                self._next_raw()
                yield from self._advance(following)
                end = following.end_mark

        if key_scalar is None:
            yield Token(TokenKind.KEY, Span.from_marks(start, end), key_tag=key_tag)
            return
        yield Token(
            TokenKind.KEY,
            Span.from_marks(start, end),
            value=self._scalar_value(key_scalar),
            text=self.text[key_scalar.start_mark.index : key_scalar.end_mark.index],
            style=None if key_scalar.plain else key_scalar.style,
            key_span=self._mark_span(key_scalar),
            key_tag=key_tag,
        )


def split_documents(source: str | bytes) -> list[str]:
    """Split a multi-document stream into one text per document.

    Cuts are made at each document start (``---``) or end (``...``) marker
    that PyYAML's scanner reports, so markers inside scalars are never
    mistaken for boundaries.  Each returned text keeps its own ``---`` line.
    Pieces holding only comments or markers are merged into the document
    that follows them (or, at the end, the one before).

    Raises:
        LexError, ParseError: As for ``Lexer.tokens``.
    """
    lexer = Lexer(source)
    text = lexer.text
    cuts: list[int] = []
    for raw in lexer._raw_tokens():
        if isinstance(raw, yaml.DocumentStartToken):
            cuts.append(raw.start_mark.index)
        elif isinstance(raw, yaml.DocumentEndToken):
            cuts.append(raw.end_mark.index)

    pieces: list[str] = []
    previous = 0
    for cut in [*cuts, len(text)]:
        if _has_content(text[previous:cut]):
            pieces.append(text[previous:cut])
            previous = cut
    if pieces and previous < len(text):
        # Trailing comments and "..." stay with the last document.
        pieces[-1] += text[previous:]
    return pieces or [text]


def _has_content(piece: str) -> bool:
    for line in piece.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and stripped not in ("---", "..."):
            return True
    return False
