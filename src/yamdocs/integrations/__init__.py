"""Integrations subpackage for yamdocs.

Contains the pytest plugin, auto-discovered via the ``pytest11`` entry
point.  It is not imported here so that importing yamdocs never imports
pytest.
"""

from __future__ import annotations

__all__: list[str] = []
