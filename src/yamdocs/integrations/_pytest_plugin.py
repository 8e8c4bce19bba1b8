"""pytest plugin for yamdocs.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any

import pytest

from yamdocs import RenderConfig, to_markdown
from yamdocs.writer import END_MARKER, START_MARKER, extract_region


@pytest.fixture(scope="session")
def assert_values_doc_fresh() -> Any:
    """Fixture that returns a callable documentation freshness asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to to_markdown() which builds a fresh pipeline per call).

    Usage in tests::

        def test_readme_is_current(assert_values_doc_fresh):
            assert_values_doc_fresh("chart/values.yaml", "chart/README.md")

    Returns:
        A callable ``_assert(values_path, markdown_path, config=None) -> None``
        that raises ``AssertionError`` when the markdown is out of date.
    """

    def _assert(
        values_path: str | Path,
        markdown_path: str | Path,
        config: RenderConfig | None = None,
    ) -> None:
        """Assert that ``markdown_path`` holds the current tables for ``values_path``.

        When the markdown file contains the yamdocs markers only the marked
        region is compared; otherwise the whole file is.

        Raises:
            AssertionError: When the documentation is stale, with a unified
                diff from the current content to the expected one.
        """
        expected = to_markdown(Path(values_path).read_bytes(), config=config)
        content = Path(markdown_path).read_text(encoding="utf-8")
        if START_MARKER in content or END_MARKER in content:
            actual = extract_region(content)
            expected = expected.strip("\n")
        else:
            actual = content
        # A missing or extra final newline is not staleness.
        if actual.rstrip("\n") == expected.rstrip("\n"):
            return
        diff = "".join(
            difflib.unified_diff(
                actual.splitlines(keepends=True),
                expected.splitlines(keepends=True),
                fromfile=str(markdown_path),
                tofile=f"{values_path} (regenerated)",
            )
        )
        raise AssertionError(
            f"{markdown_path} is out of date with {values_path}:\n{diff}"
        )

    return _assert
