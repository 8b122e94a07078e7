"""Per-chunk cache of query results."""

from __future__ import annotations

import threading
from typing import Any, Protocol

from fzfcore.constants import QUERY_CACHE_MAX


class _ChunkLike(Protocol):
    def is_full(self) -> bool: ...


class ChunkCache:
    """Maps a chunk and a query string to the list of results for that chunk."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: dict[_ChunkLike, dict[str, list[Any]]] = {}

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._cache = {}

    def retire(self, *args: _ChunkLike) -> None:
        """Drop the entries of the given chunks."""
        with self._lock:
            for chunk in args:
                self._cache.pop(chunk, None)

    def add(self, chunk: _ChunkLike, key: str, results: list[Any]) -> None:
        """Cache ``results`` for ``key`` if the chunk is full and the list small."""
        if not key or not chunk.is_full() or len(results) > QUERY_CACHE_MAX:
            return
        with self._lock:
            self._cache.setdefault(chunk, {})[key] = results

    def lookup(self, chunk: _ChunkLike, key: str) -> list[Any] | None:
        """Return the results cached for exactly ``key``, if any."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            return queries.get(key)

    def search(self, chunk: _ChunkLike, key: str) -> list[Any] | None:
        """Return the results cached for the longest prefix or suffix of ``key``."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            for cut in range(1, len(key)):
                for substr in (key[: len(key) - cut], key[cut:]):
                    cached = queries.get(substr)
                    if cached is not None:
                        return cached
        return None