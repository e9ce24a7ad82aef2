"""CodecCache: process-wide, LRU-backed cache of derived codecs.

Codecs are keyed by type identity (or by a hashable annotation such as
``list[int]``).  Building happens *outside* the lock so a slow or recursive
derivation never blocks other threads; the finished codec is then published
atomically.  When two threads race to build the same type, the first
published codec wins and the loser's copy is discarded, so every caller ends
up sharing one immutable codec.

Explicitly registered codecs are pinned: they live beside the LRU and are
never evicted.  Codecs themselves are immutable once built, so a codec handed
out before an eviction or a re-registration keeps working for whoever holds
it.

Example::

    from json_derive.cache import CodecCache

    cache = CodecCache(max_size=256)
    codec = cache.get_or_build(Color, lambda: EnumCodec.for_enum(Color))

    # Second call is served from memory, the builder is never called
    same = cache.get_or_build(Color, lambda: EnumCodec.for_enum(Color))
    assert same is codec
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING

from cachetools import LRUCache

if TYPE_CHECKING:
    from json_derive.protocols import JsonCodec

__all__ = ["CodecCache"]

logger = logging.getLogger(__name__)


class CodecCache:
    """Thread-safe LRU cache mapping types to their codecs.

    Each instance maintains its own ``LRUCache``; there is no class-level
    shared state, so two separate instances never interfere with each other.
    LRU eviction is silent: an evicted codec is rebuilt on its next lookup.
    Registered codecs are pinned and do not count towards ``max_size``.

    Args:
        max_size: Maximum number of codecs to hold.  Defaults to 1024.
    """

    def __init__(self, max_size: int = 1024) -> None:
        self._cache: LRUCache[Hashable, JsonCodec] = LRUCache(maxsize=max_size)
        self._pinned: dict[Hashable, JsonCodec] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of derived codecs stored in the LRU."""
        with self._lock:
            return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Lookup and publication
    # ------------------------------------------------------------------

    def _lookup(self, key: Hashable) -> JsonCodec | None:
        pinned = self._pinned.get(key)
        if pinned is not None:
            return pinned
        return self._cache.get(key)

    def get(self, key: Hashable) -> JsonCodec | None:
        """Return the registered or cached codec for ``key``, or None."""
        with self._lock:
            return self._lookup(key)

    def get_or_build(self, key: Hashable, build: Callable[[], JsonCodec]) -> JsonCodec:
        """Return the codec for ``key``, building and publishing it on a miss.

        ``build`` runs without the lock held and may itself call back into
        this cache for nested types.  Exceptions from ``build`` propagate and
        nothing is cached.

        Args:
            key:   Type (or hashable annotation) identifying the codec.
            build: Zero-argument callable producing the codec.

        Returns:
            The published codec; on a lost race, the winner's codec.
        """
        with self._lock:
            codec = self._lookup(key)
        if codec is not None:
            return codec

        built = build()

        with self._lock:
            published = self._lookup(key)
            if published is None:
                self._cache[key] = built
                published = built
        if published is not built:
            logger.debug("Discarded concurrently built codec for %r", key)
        else:
            logger.debug("Published codec for %r", key)
        return published

    def register(self, key: Hashable, codec: JsonCodec) -> None:
        """Pin ``codec`` for ``key``, replacing any previous entry."""
        with self._lock:
            self._pinned[key] = codec
            self._cache.pop(key, None)
        logger.debug("Registered codec %r for %r", codec, key)

    def clear(self) -> None:
        """Drop every derived codec.  Registered codecs stay pinned."""
        with self._lock:
            self._cache.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._pinned or key in self._cache

    def __len__(self) -> int:
        return self.curr_size
