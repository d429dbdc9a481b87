# tests/unit/test_query_cache.py
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.fm_cache.application.query_cache import QueryCache
from src.fm_cache.domain.entry import KeyPattern


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


class TestReads:
    def test_get_missing_returns_none(self, cache):
        assert cache.get(("products",)) is None
        assert cache.is_stale(("products",)) is True

    def test_get_returns_copy(self, cache):
        cache.set(("products",), {"products": [{"id": "p1"}]})
        cache.get(("products",))["products"].append({"id": "x"})
        assert cache.get(("products",)) == {"products": [{"id": "p1"}]}

    async def test_fetch_caches_until_stale(self, cache):
        fetcher = AsyncMock(return_value={"products": []})
        await cache.fetch(("products",), fetcher)
        await cache.fetch(("products",), fetcher)
        assert fetcher.await_count == 1

        cache.mark_stale([KeyPattern(("products",))])
        await cache.fetch(("products",), fetcher)
        assert fetcher.await_count == 2

    async def test_fetch_force(self, cache):
        fetcher = AsyncMock(side_effect=[{"n": 1}, {"n": 2}])
        await cache.fetch(("k",), fetcher)
        assert await cache.fetch(("k",), fetcher, force=True) == {"n": 2}


class TestMatching:
    def test_prefix_and_exact_targets(self, cache):
        cache.set(("products", (("status", "active"),)), {})
        cache.set(("products", ()), {})
        cache.set(("dashboard", "f1"), {})
        cache.set(("dashboard", "f2"), {})

        keys = cache.resolve([("dashboard", "f1"), KeyPattern(("products",))])

        assert keys == [
            ("products", (("status", "active"),)),
            ("products", ()),
            ("dashboard", "f1"),
        ]

    def test_resolve_deduplicates(self, cache):
        cache.set(("products", ()), {})
        keys = cache.resolve([KeyPattern(("products",)), ("products", ())])
        assert keys == [("products", ())]


class TestInvalidate:
    async def test_refetches_known_fetchers(self, cache):
        fetcher = AsyncMock(side_effect=[{"v": 1}, {"v": 2}])
        await cache.fetch(("k",), fetcher)
        await cache.invalidate([("k",)])
        assert cache.get(("k",)) == {"v": 2}
        assert cache.is_stale(("k",)) is False

    async def test_without_refetch_only_marks_stale(self, cache):
        fetcher = AsyncMock(return_value={"v": 1})
        await cache.fetch(("k",), fetcher)
        await cache.invalidate([("k",)], refetch=False)
        assert fetcher.await_count == 1
        assert cache.is_stale(("k",)) is True

    async def test_failed_refetch_leaves_entry_stale(self, cache):
        fetcher = AsyncMock(side_effect=[{"v": 1}, ConnectionError("down")])
        await cache.fetch(("k",), fetcher)
        await cache.invalidate([("k",)])
        assert cache.get(("k",)) == {"v": 1}
        assert cache.is_stale(("k",)) is True


class TestSubscribe:
    def test_listener_receives_updates_until_unsubscribed(self, cache):
        listener = MagicMock()
        unsubscribe = cache.subscribe(("k",), listener)
        cache.set(("k",), {"v": 1})
        listener.assert_called_once_with(("k",), {"v": 1})

        unsubscribe()
        cache.set(("k",), {"v": 2})
        assert listener.call_count == 1

    def test_remove_and_clear(self, cache):
        cache.set(("a",), 1)
        cache.set(("b",), 2)
        cache.remove(("a",))
        assert ("a",) not in cache
        cache.clear()
        assert len(cache) == 0
