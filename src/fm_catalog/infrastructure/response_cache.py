"""Redis-backed response cache for product listings.

Key pattern: "products:list:<canonical-json-of-params>"
Cleared as a whole after any product mutation.
"""

import json
import logging
from typing import Any

import redis.asyncio as aioredis

from config.settings import settings

logger = logging.getLogger("fm.catalog")

_KEY_PREFIX = "products:list:"


def listing_key(params: dict[str, Any]) -> str:
    """Stable key: params sorted, None values dropped."""
    canonical = {k: params[k] for k in sorted(params) if params[k] is not None}
    return _KEY_PREFIX + json.dumps(canonical, separators=(",", ":"), sort_keys=True)


class ProductResponseCache:
    def __init__(self, redis: aioredis.Redis, ttl_seconds: int | None = None) -> None:
        self._redis = redis
        self._ttl = ttl_seconds or settings.PRODUCT_CACHE_TTL_SECONDS

    async def get_listing(self, params: dict[str, Any]) -> list[dict[str, Any]] | None:
        raw = await self._redis.get(listing_key(params))
        if raw is None:
            return None
        return json.loads(raw)

    async def set_listing(
        self, params: dict[str, Any], items: list[dict[str, Any]]
    ) -> None:
        await self._redis.set(listing_key(params), json.dumps(items), ex=self._ttl)

    async def clear(self) -> int:
        """Delete every cached listing. Returns the number of keys removed."""
        keys = [key async for key in self._redis.scan_iter(match=_KEY_PREFIX + "*")]
        if not keys:
            return 0
        removed = await self._redis.delete(*keys)
        logger.info("Cleared %d product listing cache keys", removed)
        return int(removed)
