"""Tests for RenderConfig defaults, validation and immutability.

Verifies:
- Default values match the documented defaults
- Out-of-range values raise ValueError naming the field
- The dataclass is frozen
"""

from __future__ import annotations

import dataclasses

import pytest

from yamdocs.tables.config import RenderConfig


class TestDefaults:
    def test_default_values(self) -> None:
        config = RenderConfig()
        assert config.max_inline_sequence_items == 5
        assert config.documented_threshold is True
        assert config.heading_level == 3
        assert config.root_title == "Values"
        assert config.align_columns is False

    def test_equal_by_value(self) -> None:
        assert RenderConfig(heading_level=2) == RenderConfig(heading_level=2)


class TestValidation:
    @pytest.mark.parametrize("items", [0, -1])
    def test_max_items_must_be_positive(self, items: int) -> None:
        with pytest.raises(ValueError, match="max_inline_sequence_items"):
            RenderConfig(max_inline_sequence_items=items)

    def test_single_item_is_allowed(self) -> None:
        assert RenderConfig(max_inline_sequence_items=1).max_inline_sequence_items == 1

    @pytest.mark.parametrize("level", [0, 7])
    def test_heading_level_range(self, level: int) -> None:
        with pytest.raises(ValueError, match="heading_level"):
            RenderConfig(heading_level=level)

    @pytest.mark.parametrize("level", [1, 6])
    def test_heading_level_bounds_are_inclusive(self, level: int) -> None:
        assert RenderConfig(heading_level=level).heading_level == level

    @pytest.mark.parametrize("title", ["", "   ", "two\nlines"])
    def test_root_title_must_be_one_non_empty_line(self, title: str) -> None:
        with pytest.raises(ValueError, match="root_title"):
            RenderConfig(root_title=title)


class TestImmutability:
    def test_frozen(self) -> None:
        config = RenderConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.heading_level = 2  # type: ignore[misc]

    def test_replace_validates(self) -> None:
        with pytest.raises(ValueError):
            dataclasses.replace(RenderConfig(), heading_level=9)
