"""Deterministic YAML generators for performance benchmarks.

All generators produce fixed, reproducible text. No random values.
Three tiers: 10-key flat, 100-key nested, 1000-key deeply nested.
Each tier provides a "documented" variant (a comment above every leaf, so
every mapping spawns a table) and an "undocumented" variant (everything is
flattened into one table).
"""

from __future__ import annotations

import pytest


def generate_flat_values(num_keys: int, documented: bool, prefix: str = "key") -> str:
    """Generate a flat mapping with deterministic string values."""
    lines: list[str] = []
    for i in range(num_keys):
        if documented:
            lines.append(f"# -- Description of {prefix}_{i}")
        lines.append(f"{prefix}_{i}: value_{i}")
    return "\n".join(lines) + "\n"


def _section(name: str, depth: int, width: int, documented: bool, indent: int) -> list[str]:
    """One mapping ``width`` keys wide, nested ``depth`` levels deep."""
    pad = "  " * indent
    lines = [f"{pad}{name}:"]
    for k in range(width):
        if documented:
            lines.append(f"{pad}  # -- Leaf {name}_{k}")
        lines.append(f"{pad}  {name}_{k}: {k}")
    lines.append(f"{pad}  {name}_list: [a, b, c, d, e, f, g]")
    if depth > 1:
        lines.extend(_section(f"{name}_inner", depth - 1, width, documented, indent + 1))
    return lines


def _make_nested_100(documented: bool) -> str:
    """Generate 100-key nested values.

    Structure: 10 sections x (9 leaf keys + 1 list) = 100 keys.
    """
    lines: list[str] = []
    for i in range(10):
        lines.extend(_section(f"section_{i}", 1, 9, documented, 0))
    return "\n".join(lines) + "\n"


def _make_nested_1000(documented: bool) -> str:
    """Generate ~1000-key deeply nested values.

    Structure: 20 sections x 4 levels x (11 leaf keys + 1 list).
    """
    lines: list[str] = []
    for i in range(20):
        lines.extend(_section(f"section_{i}", 4, 11, documented, 0))
    return "\n".join(lines) + "\n"


# --- Fixtures for each size tier ---


@pytest.fixture
def values_10key_documented() -> str:
    """10-key flat values, every key commented."""
    return generate_flat_values(10, documented=True)


@pytest.fixture
def values_10key_undocumented() -> str:
    return generate_flat_values(10, documented=False)


@pytest.fixture
def values_100key_documented() -> str:
    """100-key nested values (10 sections, one table each)."""
    return _make_nested_100(documented=True)


@pytest.fixture
def values_100key_undocumented() -> str:
    return _make_nested_100(documented=False)


@pytest.fixture
def values_1000key_documented() -> str:
    """~1000-key deeply nested values (80 tables)."""
    return _make_nested_1000(documented=True)


@pytest.fixture
def values_1000key_undocumented() -> str:
    return _make_nested_1000(documented=False)
