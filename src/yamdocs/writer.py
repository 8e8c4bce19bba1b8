"""Writing generated markdown into hand-written documents.

A README usually holds prose around the generated tables.  The generated
part lives between two sentinel comments::

    <!-- yamdocs:start -->
    ...generated tables...
    <!-- yamdocs:end -->

``inject`` replaces whatever sits between the markers and leaves the rest of
the document byte-for-byte unchanged; ``extract_region`` returns the current
content of that region so freshness checks can compare it.
"""

from __future__ import annotations

__all__ = ["END_MARKER", "START_MARKER", "MarkerError", "extract_region", "inject"]

START_MARKER = "<!-- yamdocs:start -->"
END_MARKER = "<!-- yamdocs:end -->"


class MarkerError(ValueError):
    """Raised when the sentinel markers are missing, repeated or out of order."""


def _locate(document: str, start_marker: str, end_marker: str) -> tuple[int, int]:
    """Return the offsets just after the start marker and of the end marker."""
    start = document.find(start_marker)
    if start == -1:
        msg = f"start marker {start_marker!r} not found"
        raise MarkerError(msg)
    if document.find(start_marker, start + len(start_marker)) != -1:
        msg = f"start marker {start_marker!r} appears more than once"
        raise MarkerError(msg)
    end = document.find(end_marker)
    if end == -1:
        msg = f"end marker {end_marker!r} not found"
        raise MarkerError(msg)
    if end < start + len(start_marker):
        msg = f"end marker {end_marker!r} comes before the start marker"
        raise MarkerError(msg)
    return start + len(start_marker), end


def extract_region(
    document: str,
    start_marker: str = START_MARKER,
    end_marker: str = END_MARKER,
) -> str:
    """Return the text between the markers, without the surrounding newlines.

    Raises:
        MarkerError: If the markers are missing or out of order.
    """
    begin, end = _locate(document, start_marker, end_marker)
    return document[begin:end].strip("\n")


def inject(
    existing: str,
    generated: str,
    start_marker: str = START_MARKER,
    end_marker: str = END_MARKER,
) -> str:
    """Replace the marked region of ``existing`` with ``generated``.

    The markers stay on lines of their own, with one blank line between each
    marker and the generated text.  Injecting the same text twice is a no-op.

    Raises:
        MarkerError: If the markers are missing or out of order.
    """
    begin, end = _locate(existing, start_marker, end_marker)
    body = generated.strip("\n")
    return f"{existing[:begin]}\n\n{body}\n\n{existing[end:]}"
