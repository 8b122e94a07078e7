"""Growing list of items stored in fixed-size chunks."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from fzfcore.cache import ChunkCache
from fzfcore.constants import CHUNK_SIZE
from fzfcore.item import Item

ItemBuilder = Callable[[Any], "Item | None"]


@dataclass(eq=False)
class Chunk:
    """Up to ``CHUNK_SIZE`` items; compared and hashed by identity."""

    items: list[Item] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def is_full(self) -> bool:
        """True if the chunk holds ``CHUNK_SIZE`` items."""
        return len(self.items) == CHUNK_SIZE

    def _copy(self) -> Chunk:
        return Chunk(list(self.items))


def count_items(chunks: Sequence[Chunk]) -> int:
    """Total number of items in ``chunks``."""
    if not chunks:
        return 0
    if len(chunks) == 1:
        return chunks[0].count
    # The first chunk may not be full after tail truncation.
    return chunks[0].count + CHUNK_SIZE * (len(chunks) - 2) + chunks[-1].count


class ChunkList:
    """Thread-safe list of chunks fed by an item builder."""

    def __init__(self, cache: ChunkCache, trans: ItemBuilder) -> None:
        self._chunks: list[Chunk] = []
        self._lock = threading.Lock()
        self._trans = trans
        self._cache = cache

    def push(self, data: Any) -> bool:
        """Build an item from ``data`` and append it; False if the builder declined."""
        with self._lock:
            if not self._chunks or self._chunks[-1].is_full():
                self._chunks.append(Chunk())
            item = self._trans(data)
            if item is None:
                return False
            self._chunks[-1].items.append(item)
            return True

    def clear(self) -> None:
        """Remove every item."""
        with self._lock:
            self._chunks = []

    def _truncate(self, tail: int) -> None:
        chunks = self._chunks
        num_chunks = 0
        left = tail
        for chunk in reversed(chunks):
            if left <= 0:
                break
            num_chunks += 1
            left -= chunk.count

        min_index = len(chunks) - num_chunks
        self._cache.retire(*chunks[:min_index])
        kept = chunks[min_index:]

        left = tail
        for offset, chunk in enumerate(reversed(kept)):
            if chunk.count > left:
                kept[len(kept) - 1 - offset] = Chunk(chunk.items[chunk.count - left:])
                self._cache.retire(chunk)
                break
            left -= chunk.count
        self._chunks = kept

    def snapshot(self, tail: int) -> tuple[list[Chunk], int, bool]:
        """Return an immutable view of the chunks, their item count and
        whether the list was truncated to its last ``tail`` items."""
        with self._lock:
            changed = False
            if tail > 0 and count_items(self._chunks) > tail:
                changed = True
                self._truncate(tail)

            result = list(self._chunks)
            if result:
                if tail > 0 and len(result) > 1:
                    result[0] = result[0]._copy()
                result[-1] = result[-1]._copy()
            return result, count_items(result), changed