"""Tests for ContextExtractor, describe(), scalar_default() and format_path()."""

from __future__ import annotations

import pytest

from yamdocs.span import Span
from yamdocs.syntax.parser import parse
from yamdocs.tree.context import (
    AnnotatedDocument,
    ContextExtractor,
    TypeTag,
    describe,
    format_path,
    scalar_default,
)
from yamdocs.tree.nodes import Comment, CommentPosition, Scalar, ScalarKind, ScalarStyle


def _extract(text: str) -> AnnotatedDocument:
    return ContextExtractor().extract(parse(text))


def _comment(text: str, position: CommentPosition | None) -> Comment:
    return Comment(text=text, span=Span.point(0, 0), own_line=True, position=position)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestFormatPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ((), ""),
            (("image",), "image"),
            (("image", "tag"), "image.tag"),
            (("ports", 0), "ports[0]"),
            (("ports", 0, "name"), "ports[0].name"),
            ((0, "a"), "[0].a"),
        ],
    )
    def test_plain_paths(self, path: tuple[str | int, ...], expected: str) -> None:
        assert format_path(path) == expected

    def test_dotted_key_is_bracketed(self) -> None:
        assert format_path(("annotations", "app.kubernetes.io/name")) == (
            'annotations["app.kubernetes.io/name"]'
        )

    def test_bracketed_first_segment(self) -> None:
        assert format_path(("a b",)) == '["a b"]'

    def test_empty_key(self) -> None:
        assert format_path(("a", "")) == 'a[""]'

    def test_quote_is_escaped(self) -> None:
        assert format_path(('say "hi"',)) == '["say \\"hi\\""]'

    def test_distinct_paths_render_distinctly(self) -> None:
        """``{"a.b": 1}`` and ``{a: {b: 1}}`` must not share a display path."""
        assert format_path(("a.b",)) != format_path(("a", "b"))


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


class TestDescribe:
    def test_no_comments(self) -> None:
        assert describe(()) is None

    def test_leading_joined_with_spaces(self) -> None:
        comments = (
            _comment("Number of", CommentPosition.LEADING),
            _comment("replicas", CommentPosition.LEADING),
        )
        assert describe(comments) == "Number of replicas"

    def test_leading_wins_over_trailing(self) -> None:
        comments = (
            _comment("above", CommentPosition.LEADING),
            _comment("beside", CommentPosition.TRAILING),
        )
        assert describe(comments) == "above"

    def test_trailing_used_alone(self) -> None:
        assert describe((_comment("beside", CommentPosition.TRAILING),)) == "beside"

    def test_helm_docs_marker_is_stripped(self) -> None:
        assert describe((_comment("-- The image tag", CommentPosition.LEADING),)) == (
            "The image tag"
        )

    def test_double_dash_inside_text_is_kept(self) -> None:
        assert describe((_comment("use --force", CommentPosition.LEADING),)) == (
            "use --force"
        )

    def test_empty_comments_give_no_description(self) -> None:
        assert describe((_comment("", CommentPosition.LEADING),)) is None


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestScalarDefault:
    def _scalar(
        self,
        kind: ScalarKind,
        value: object,
        text: str,
        style: ScalarStyle = ScalarStyle.PLAIN,
        alias: bool = False,
    ) -> Scalar:
        return Scalar(
            kind=kind,
            value=value,
            text=text,
            span=Span.point(0, 0),
            style=style,
            alias=alias,
        )

    def test_string_is_unquoted(self) -> None:
        scalar = self._scalar(ScalarKind.STRING, "1.25", '"1.25"', ScalarStyle.DOUBLE_QUOTED)
        assert scalar_default(scalar) == "1.25"

    def test_integer_keeps_source_text(self) -> None:
        assert scalar_default(self._scalar(ScalarKind.INTEGER, 255, "0xFF")) == "0xFF"

    def test_boolean_keeps_source_text(self) -> None:
        assert scalar_default(self._scalar(ScalarKind.BOOLEAN, True, "True")) == "True"

    def test_null_renders_as_null(self) -> None:
        assert scalar_default(self._scalar(ScalarKind.NULL, None, "")) == "null"
        assert scalar_default(self._scalar(ScalarKind.NULL, None, "~")) == "null"

    def test_alias_keeps_marker(self) -> None:
        alias = self._scalar(ScalarKind.STRING, "base", "*base", alias=True)
        assert scalar_default(alias) == "*base"


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


class TestContextExtractor:
    def test_every_node_gets_a_context(self) -> None:
        annotated = _extract("a: 1\nb:\n  c: [x, y]\n")
        assert list(annotated.contexts) == [
            (),
            ("a",),
            ("b",),
            ("b", "c"),
            ("b", "c", 0),
            ("b", "c", 1),
        ]

    def test_type_hints(self) -> None:
        annotated = _extract(
            "s: text\ni: 1\nf: 1.5\nb: true\nn: null\no:\n  k: v\na: [1]\n"
        )
        hints = {
            path[0]: annotated.context(path).type_hint
            for path in annotated.contexts
            if len(path) == 1
        }
        assert hints["s"] is TypeTag.STRING
        assert hints["i"] is TypeTag.INTEGER
        assert hints["f"] is TypeTag.FLOAT
        assert hints["b"] is TypeTag.BOOLEAN
        assert hints["n"] is TypeTag.NULL
        assert hints["o"] is TypeTag.OBJECT
        assert hints["a"] is TypeTag.ARRAY

    def test_quoted_number_is_a_string(self) -> None:
        context = _extract('tag: "1.25"\n').context(("tag",))
        assert context.type_hint is TypeTag.STRING
        assert context.default == "1.25"

    def test_empty_containers_have_defaults(self) -> None:
        annotated = _extract("o: {}\na: []\n")
        assert annotated.context(("o",)).default == "{}"
        assert annotated.context(("a",)).default == "[]"

    def test_non_empty_containers_have_no_default(self) -> None:
        annotated = _extract("o:\n  k: v\na: [1]\n")
        assert annotated.context(("o",)).default is None
        assert annotated.context(("a",)).default is None

    def test_descriptions_follow_comments(self) -> None:
        annotated = _extract("# Number of replicas\nreplicaCount: 1 # ignored\ntag: x # the tag\n")
        assert annotated.context(("replicaCount",)).description == "Number of replicas"
        assert annotated.context(("tag",)).description == "the tag"

    def test_display_path(self) -> None:
        annotated = _extract("ports:\n  - name: http\n")
        assert annotated.context(("ports", 0, "name")).display_path == "ports[0].name"

    def test_diagnostics_are_carried_over(self) -> None:
        annotated = _extract("a: 1\na: 2\n")
        assert len(annotated.diagnostics) == 1

    def test_empty_document(self) -> None:
        annotated = _extract("# only a comment\n")
        assert annotated.root is None
        assert annotated.contexts == {}

    def test_unknown_path_raises(self) -> None:
        with pytest.raises(KeyError):
            _extract("a: 1\n").context(("missing",))
