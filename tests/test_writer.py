"""Tests for marker-region injection and extraction."""

from __future__ import annotations

import pytest

from yamdocs.writer import END_MARKER, START_MARKER, MarkerError, extract_region, inject

README = f"""\
# My chart

Intro text.

{START_MARKER}
old tables
{END_MARKER}

Footer text.
"""


class TestInject:
    def test_replaces_only_the_region(self) -> None:
        updated = inject(README, "### Values\n\n| a |\n")
        assert updated == (
            "# My chart\n\nIntro text.\n\n"
            f"{START_MARKER}\n\n### Values\n\n| a |\n\n{END_MARKER}\n\nFooter text.\n"
        )

    def test_is_idempotent(self) -> None:
        once = inject(README, "new\n")
        assert inject(once, "new\n") == once

    def test_empty_region(self) -> None:
        document = f"{START_MARKER}{END_MARKER}"
        assert inject(document, "x") == f"{START_MARKER}\n\nx\n\n{END_MARKER}"

    def test_custom_markers(self) -> None:
        document = "before <!-- a --> old <!-- b --> after"
        updated = inject(document, "new", start_marker="<!-- a -->", end_marker="<!-- b -->")
        assert updated == "before <!-- a -->\n\nnew\n\n<!-- b --> after"


class TestExtractRegion:
    def test_returns_region_without_surrounding_newlines(self) -> None:
        assert extract_region(README) == "old tables"

    def test_round_trip_with_inject(self) -> None:
        assert extract_region(inject(README, "\n\nfresh\n")) == "fresh"


class TestMarkerErrors:
    def test_missing_start(self) -> None:
        with pytest.raises(MarkerError, match="start marker"):
            extract_region(f"text\n{END_MARKER}\n")

    def test_missing_end(self) -> None:
        with pytest.raises(MarkerError, match="end marker"):
            inject(f"{START_MARKER}\ntext\n", "x")

    def test_repeated_start(self) -> None:
        with pytest.raises(MarkerError, match="more than once"):
            extract_region(f"{START_MARKER}\n{START_MARKER}\n{END_MARKER}\n")

    def test_end_before_start(self) -> None:
        with pytest.raises(MarkerError, match="before the start marker"):
            extract_region(f"{END_MARKER}\n{START_MARKER}\n")

    def test_is_a_value_error(self) -> None:
        assert issubclass(MarkerError, ValueError)
