from fzfcore.cache import ChunkCache
from fzfcore.chunklist import Chunk
from fzfcore.constants import CHUNK_SIZE, QUERY_CACHE_MAX
from fzfcore.item import Item


def full_chunk():
    return Chunk([Item(text=str(i)) for i in range(CHUNK_SIZE)])


def test_chunk_cache():
    cache = ChunkCache()
    chunk1 = Chunk()
    chunk2 = full_chunk()
    items1 = ["r1"]
    items2 = ["r1", "r2"]
    cache.add(chunk1, "foo", items1)
    cache.add(chunk2, "foo", items1)
    cache.add(chunk2, "bar", items2)

    assert cache.lookup(chunk1, "foo") is None
    cached = cache.lookup(chunk2, "foo")
    assert cached is not None and len(cached) == 1
    cached = cache.lookup(chunk2, "bar")
    assert cached is not None and len(cached) == 2
    assert cache.lookup(chunk1, "foobar") is None


def test_empty_key_not_cached():
    cache = ChunkCache()
    chunk = full_chunk()
    cache.add(chunk, "", ["x"])
    assert cache.lookup(chunk, "") is None


def test_large_result_lists_not_cached():
    cache = ChunkCache()
    chunk = full_chunk()
    cache.add(chunk, "foo", ["x"] * (QUERY_CACHE_MAX + 1))
    assert cache.lookup(chunk, "foo") is None
    cache.add(chunk, "foo", ["x"] * QUERY_CACHE_MAX)
    assert len(cache.lookup(chunk, "foo")) == QUERY_CACHE_MAX


def test_search_prefix_and_suffix():
    cache = ChunkCache()
    chunk = full_chunk()
    results = ["r"]
    cache.add(chunk, "foo", results)
    assert cache.search(chunk, "foob") is results
    assert cache.search(chunk, "xfoo") is results
    assert cache.search(chunk, "bar") is None
    assert cache.search(chunk, "") is None


def test_search_ignores_exact_key():
    cache = ChunkCache()
    chunk = full_chunk()
    cache.add(chunk, "foo", ["r"])
    assert cache.search(chunk, "foo") is None


def test_retire_and_clear():
    cache = ChunkCache()
    chunk_a = full_chunk()
    chunk_b = full_chunk()
    cache.add(chunk_a, "foo", ["a"])
    cache.add(chunk_b, "foo", ["b"])
    cache.retire(chunk_a)
    assert cache.lookup(chunk_a, "foo") is None
    assert cache.lookup(chunk_b, "foo") == ["b"]
    cache.clear()
    assert cache.lookup(chunk_b, "foo") is None