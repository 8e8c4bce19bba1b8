"""RenderConfig: options consumed by the table planner and renderer.

RenderConfig is a frozen (immutable) dataclass.  Callers pass it in
explicitly; nothing is read from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["RenderConfig"]


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable configuration for planning and rendering tables.

    Attributes:
        max_inline_sequence_items: How many items of a sequence are shown in
            its Default cell before the ``...`` marker (>= 1).
        documented_threshold: When True, a nested mapping spawns its own
            table only if its subtree has a described leaf; undocumented
            mappings are flattened into the parent table.  When False, every
            non-empty nested mapping spawns a table.
        heading_level: Markdown heading level of table titles, 1 to 6.
        root_title: Heading of the table for the document root.
        align_columns: Pad cells so the columns line up in plain text.
    """

    max_inline_sequence_items: int = 5
    documented_threshold: bool = True
    heading_level: int = 3
    root_title: str = "Values"
    align_columns: bool = False

    def __post_init__(self) -> None:
        if self.max_inline_sequence_items < 1:
            msg = (
                "max_inline_sequence_items must be >= 1, "
                f"got {self.max_inline_sequence_items}"
            )
            raise ValueError(msg)
        if not 1 <= self.heading_level <= 6:
            msg = f"heading_level must be in [1, 6], got {self.heading_level}"
            raise ValueError(msg)
        if not self.root_title.strip() or "\n" in self.root_title:
            msg = f"root_title must be a non-empty single line, got {self.root_title!r}"
            raise ValueError(msg)
