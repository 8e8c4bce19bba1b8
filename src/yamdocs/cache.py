"""ConversionCache: LRU-backed memo of document conversions.

Wraps a ``DocumentConverter`` and caches its results in memory, keyed by a
SHA-256 digest of the input text.  Batches that hold many identical
documents (chart variants, vendored copies) convert each distinct text
once.  LRU eviction occurs silently when ``max_size`` is exceeded; no error
is raised.

Each ``ConversionCache`` instance maintains its own ``LRUCache``; there is
no class-level shared state, so two separate instances never interfere
with each other.  Failed conversions are not cached.

Example::

    from yamdocs.cache import ConversionCache

    cache = ConversionCache(max_size=64)

    # First call runs the pipeline
    result = cache.convert(text)

    # Second call is served from memory
    again = cache.convert(text)
    assert again is result
"""

from __future__ import annotations

import hashlib

from cachetools import LRUCache

from yamdocs.converter import DocumentConverter
from yamdocs.result import ConversionResult
from yamdocs.syntax.lexer import decode_source
from yamdocs.tables.config import RenderConfig

__all__ = ["ConversionCache"]


class ConversionCache:
    """LRU-backed caching proxy around a ``DocumentConverter``.

    Args:
        config: Options for the wrapped converter.  Defaults to
            ``RenderConfig()``.
        max_size: Maximum number of results to hold in memory.  Defaults
            to 128.
    """

    def __init__(self, config: RenderConfig | None = None, max_size: int = 128) -> None:
        self._converter = DocumentConverter(config)
        self._cache: LRUCache[str, ConversionResult] = LRUCache(maxsize=max_size)
        self._hits = 0
        self._misses = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self, source: str | bytes) -> ConversionResult:
        """Return the conversion of ``source``, running the pipeline only on a miss.

        Raises:
            LexError, ParseError: As ``DocumentConverter.convert``.
        """
        text = decode_source(source)
        key = hashlib.sha256(text.encode("utf-8")).hexdigest()
        cached = self._cache.get(key)
        if cached is not None:
            self._hits += 1
            return cached
        self._misses += 1
        result = self._converter.convert(text)
        self._cache[key] = result
        return result

    def clear(self) -> None:
        """Drop every cached result."""
        self._cache.clear()
