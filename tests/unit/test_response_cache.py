# tests/unit/test_response_cache.py
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.fm_catalog.infrastructure.response_cache import ProductResponseCache, listing_key


def _redis(keys=()):
    redis = MagicMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.delete = AsyncMock(return_value=len(keys))

    async def _scan_iter(match=None):
        for key in keys:
            yield key

    redis.scan_iter = MagicMock(side_effect=_scan_iter)
    return redis


class TestListingKey:
    def test_stable_and_drops_none(self):
        a = listing_key({"status": "active", "farmer_id": None, "limit": 20})
        b = listing_key({"limit": 20, "status": "active"})
        assert a == b == 'products:list:{"limit":20,"status":"active"}'


class TestProductResponseCache:
    @pytest.mark.asyncio
    async def test_miss(self):
        cache = ProductResponseCache(_redis(), ttl_seconds=60)
        assert await cache.get_listing({"limit": 20}) is None

    @pytest.mark.asyncio
    async def test_hit_decodes_json(self):
        redis = _redis()
        redis.get = AsyncMock(return_value=json.dumps([{"id": "p1"}]))
        cache = ProductResponseCache(redis, ttl_seconds=60)
        assert await cache.get_listing({"limit": 20}) == [{"id": "p1"}]

    @pytest.mark.asyncio
    async def test_set_uses_ttl(self):
        redis = _redis()
        cache = ProductResponseCache(redis, ttl_seconds=60)
        await cache.set_listing({"limit": 20}, [{"id": "p1"}])
        redis.set.assert_awaited_once_with(
            'products:list:{"limit":20}', '[{"id": "p1"}]', ex=60
        )

    @pytest.mark.asyncio
    async def test_clear_deletes_listing_keys(self):
        redis = _redis(keys=["products:list:a", "products:list:b"])
        removed = await ProductResponseCache(redis, ttl_seconds=60).clear()
        assert removed == 2
        redis.delete.assert_awaited_once_with("products:list:a", "products:list:b")
        redis.scan_iter.assert_called_once_with(match="products:list:*")

    @pytest.mark.asyncio
    async def test_clear_with_nothing_cached(self):
        redis = _redis()
        assert await ProductResponseCache(redis, ttl_seconds=60).clear() == 0
        redis.delete.assert_not_awaited()
