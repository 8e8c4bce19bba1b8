"""Tests for the Lexer token source and split_documents."""

from __future__ import annotations

import pytest

from yamdocs.errors import LexError, ParseError, ParseErrorKind
from yamdocs.syntax.lexer import Lexer, decode_source, split_documents
from yamdocs.syntax.tokens import CollectionKind, Token, TokenKind

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _tokens(text: str | bytes) -> list[Token]:
    return list(Lexer(text).tokens())


def _kinds(text: str | bytes) -> list[TokenKind]:
    return [token.kind for token in _tokens(text)]


def _comments(text: str) -> list[Token]:
    return [t for t in _tokens(text) if t.kind is TokenKind.COMMENT]


# ---------------------------------------------------------------------------
# Token kinds
# ---------------------------------------------------------------------------


class TestTokenKinds:
    def test_simple_mapping(self) -> None:
        assert _kinds("a: 1\n") == [
            TokenKind.INDENT,
            TokenKind.KEY,
            TokenKind.SCALAR_VALUE,
            TokenKind.DEDENT,
            TokenKind.DOCUMENT_END,
        ]

    def test_indent_carries_collection_kind(self) -> None:
        tokens = _tokens("- a\n")
        assert tokens[0].kind is TokenKind.INDENT
        assert tokens[0].collection is CollectionKind.SEQUENCE
        assert tokens[1].kind is TokenKind.BLOCK_SEQUENCE_MARKER

    def test_nested_mapping_indents_twice(self) -> None:
        kinds = _kinds("a:\n  b: 1\n")
        assert kinds.count(TokenKind.INDENT) == 2
        assert kinds.count(TokenKind.DEDENT) == 2

    def test_flow_sequence(self) -> None:
        assert _kinds("[1, 2]\n") == [
            TokenKind.FLOW_START,
            TokenKind.SCALAR_VALUE,
            TokenKind.FLOW_ENTRY,
            TokenKind.SCALAR_VALUE,
            TokenKind.FLOW_END,
            TokenKind.DOCUMENT_END,
        ]

    def test_flow_mapping_start_kind(self) -> None:
        tokens = _tokens("{a: 1}\n")
        assert tokens[0].kind is TokenKind.FLOW_START
        assert tokens[0].collection is CollectionKind.MAPPING
        assert tokens[1].kind is TokenKind.KEY

    def test_anchor_and_alias(self) -> None:
        tokens = _tokens("a: &x 1\nb: *x\n")
        anchors = [t for t in tokens if t.kind is TokenKind.ANCHOR]
        aliases = [t for t in tokens if t.kind is TokenKind.ALIAS]
        assert anchors[0].value == "x"
        assert aliases[0].value == "x"
        assert aliases[0].text == "*x"

    def test_tag_text(self) -> None:
        tags = [t for t in _tokens("a: !!str 1\n") if t.kind is TokenKind.TAG]
        assert tags[0].value == "!!str"

    def test_empty_input_is_just_document_end(self) -> None:
        assert _kinds("") == [TokenKind.DOCUMENT_END]


class TestKeyTokens:
    def test_key_folds_scalar_and_colon(self) -> None:
        key = _tokens("replicaCount: 1\n")[1]
        assert key.kind is TokenKind.KEY
        assert key.value == "replicaCount"
        assert key.text == "replicaCount"
        assert key.style is None
        assert key.key_span is not None
        assert key.key_span.start_column == 0
        assert key.key_span.end_column == len("replicaCount")

    def test_quoted_key_keeps_style(self) -> None:
        key = _tokens('"a.b": 1\n')[1]
        assert key.value == "a.b"
        assert key.text == '"a.b"'
        assert key.style == '"'

    def test_complex_key_has_no_key_span(self) -> None:
        keys = [t for t in _tokens("? [a, b]\n: 1\n") if t.kind is TokenKind.KEY]
        assert keys[0].key_span is None


class TestScalarTokens:
    def test_plain_scalar_text_excludes_trailing_space(self) -> None:
        value = _tokens("a: nginx   \n")[2]
        assert value.kind is TokenKind.SCALAR_VALUE
        assert value.value == "nginx"
        assert value.text == "nginx"
        assert value.style is None

    def test_quoted_scalar(self) -> None:
        value = _tokens("tag: '1.25'\n")[2]
        assert value.value == "1.25"
        assert value.text == "'1.25'"
        assert value.style == "'"

    def test_literal_block_scalar(self) -> None:
        value = _tokens("a: |\n  line one\n  line two\n")[2]
        assert value.style == "|"
        assert value.value == "line one\nline two\n"


class TestTabSeparators:
    def test_tab_after_colon(self) -> None:
        key, value = _tokens("a:\t1\n")[1:3]
        assert key.value == "a"
        assert value.value == "1"
        assert value.span.start_column == 3

    def test_tab_before_comment(self) -> None:
        tokens = _tokens("a: 1\t# c\n")
        assert tokens[2].value == "1"
        comments = [t for t in tokens if t.kind is TokenKind.COMMENT]
        assert [c.value for c in comments] == ["c"]
        assert comments[0].span.start_column == 5
        assert comments[0].own_line is False

    def test_tab_inside_plain_scalar_is_kept(self) -> None:
        value = _tokens("a: x\ty\n")[2]
        assert value.value == "x\ty"
        assert value.text == "x\ty"

    def test_tab_inside_quoted_scalar_is_kept(self) -> None:
        assert _tokens('a: "x\ty"\n')[2].value == "x\ty"

    def test_tab_before_own_line_comment(self) -> None:
        comments = _comments("a: 1\n\t# note\nb: 2\n")
        assert [c.value for c in comments] == ["note"]
        assert comments[0].own_line is True

    def test_tab_in_flow_collection(self) -> None:
        values = [t.value for t in _tokens("a: [1,\t2]\n") if t.kind is TokenKind.SCALAR_VALUE]
        assert values == ["1", "2"]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class TestComments:
    def test_trailing_comment(self) -> None:
        comments = _comments("replicaCount: 1  # how many\n")
        assert len(comments) == 1
        assert comments[0].value == "how many"
        assert comments[0].text == "# how many"
        assert comments[0].own_line is False

    def test_own_line_comment(self) -> None:
        comments = _comments("# Number of replicas\nreplicaCount: 1\n")
        assert comments[0].value == "Number of replicas"
        assert comments[0].own_line is True
        assert comments[0].span.start_line == 0

    def test_comment_is_emitted_before_the_following_token(self) -> None:
        kinds = _kinds("# doc\na: 1\n")
        assert kinds[0] is TokenKind.COMMENT

    def test_hash_inside_quotes_is_not_a_comment(self) -> None:
        assert _comments('a: "x # y"\n') == []

    def test_hash_inside_plain_scalar_is_not_a_comment(self) -> None:
        assert _comments("url: http://host/#anchor\n") == []

    def test_block_scalar_header_comment(self) -> None:
        comments = _comments("a: |  # keep newlines\n  text\n")
        assert [c.value for c in comments] == ["keep newlines"]
        assert comments[0].span.start_line == 0

    def test_comment_inside_flow_collection(self) -> None:
        comments = _comments("a: [\n  1, # one\n  2\n]\n")
        assert [c.value for c in comments] == ["one"]

    def test_multiple_hashes_are_stripped(self) -> None:
        assert _comments("## Section\na: 1\n")[0].value == "Section"

    def test_trailing_comment_at_end_of_input(self) -> None:
        comments = _comments("a: 1\n# footer")
        assert [c.value for c in comments] == ["footer"]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class TestDocuments:
    def test_single_document_has_no_more(self) -> None:
        end = _tokens("a: 1\n")[-1]
        assert end.kind is TokenKind.DOCUMENT_END
        assert end.more_documents is False

    def test_leading_document_marker_is_allowed(self) -> None:
        end = _tokens("---\na: 1\n")[-1]
        assert end.more_documents is False

    def test_second_document_is_flagged(self) -> None:
        tokens = _tokens("a: 1\n---\nb: 2\n")
        assert tokens[-1].kind is TokenKind.DOCUMENT_END
        assert tokens[-1].more_documents is True
        values = [t.value for t in tokens if t.kind is TokenKind.KEY]
        assert values == ["a"]

    def test_document_end_marker_without_more(self) -> None:
        assert _tokens("a: 1\n...\n")[-1].more_documents is False

    def test_document_end_marker_with_more(self) -> None:
        assert _tokens("a: 1\n...\n---\nb: 2\n")[-1].more_documents is True


class TestSplitDocuments:
    def test_single_document(self) -> None:
        assert split_documents("a: 1\n") == ["a: 1\n"]

    def test_two_documents(self) -> None:
        pieces = split_documents("a: 1\n---\nb: 2\n")
        assert pieces == ["a: 1\n", "---\nb: 2\n"]

    def test_header_comment_stays_with_first_document(self) -> None:
        pieces = split_documents("# header\n---\na: 1\n---\nb: 2\n")
        assert len(pieces) == 2
        assert pieces[0].startswith("# header\n---\na: 1")

    def test_marker_inside_block_scalar_is_not_a_boundary(self) -> None:
        text = "a: |\n  ---\n  text\n"
        assert split_documents(text) == [text]


# ---------------------------------------------------------------------------
# Positions and decoding
# ---------------------------------------------------------------------------


class TestPositions:
    def test_position_of_offset(self) -> None:
        lexer = Lexer("ab\ncd\n")
        assert lexer.position(0) == (0, 0)
        assert lexer.position(4) == (1, 1)

    def test_crlf_is_folded(self) -> None:
        assert decode_source(b"a: 1\r\nb: 2\r\n") == "a: 1\nb: 2\n"

    def test_bytes_are_decoded(self) -> None:
        key = _tokens("caf\u00e9: 1\n".encode())[1]
        assert key.value == "caf\u00e9"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestLexErrors:
    def test_invalid_utf8(self) -> None:
        with pytest.raises(LexError, match="UTF-8") as exc_info:
            _tokens(b"a: 1\nb: \xff\n")
        span = exc_info.value.span
        assert span is not None
        assert (span.start_line, span.start_column) == (1, 3)

    def test_tab_indentation(self) -> None:
        with pytest.raises(LexError, match="tab character used for indentation") as exc_info:
            _tokens("a:\n\tb: 1\n")
        assert exc_info.value.span is not None
        assert exc_info.value.span.start_line == 1

    def test_forbidden_control_character(self) -> None:
        with pytest.raises(LexError, match="#x0007"):
            _tokens("a: \x07\n")

    def test_error_message_has_one_based_location(self) -> None:
        with pytest.raises(LexError, match=r"\(at 2:1\)"):
            _tokens("a:\n\tb: 1\n")


class TestScannerErrors:
    def test_other_scanner_errors_are_syntax_errors(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _tokens("a: 1\n b: 2\n")
        assert exc_info.value.kind is ParseErrorKind.SYNTAX
        assert exc_info.value.span is not None
