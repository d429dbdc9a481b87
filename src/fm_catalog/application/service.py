"""CatalogApplicationService — product reads and partial updates.

Reads go through the listing response cache when one is injected.
Writes commit, clear the listing cache, then return canonical rows so
clients can confirm their optimistic patches.
"""

import logging
from typing import Any

from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_catalog.application.schemas import (
    BulkUpdateResponse,
    ProductListResponse,
    ProductOut,
)
from src.fm_catalog.application.update_rules import (
    sanitize_update_data,
    validate_product_ids,
)
from src.fm_catalog.domain.models import BulkUpdateResult
from src.fm_catalog.domain.repository import (
    ProductListingCacheProtocol,
    ProductRepositoryProtocol,
)
from src.fm_catalog.infrastructure.persistence import ProductRepository
from src.fm_common.errors import NoProductsMatchedError, ProductNotFoundError

logger = logging.getLogger("fm.catalog")


class CatalogApplicationService:
    def __init__(
        self,
        repo: ProductRepositoryProtocol | None = None,
        cache: ProductListingCacheProtocol | None = None,
    ) -> None:
        self._repo: ProductRepositoryProtocol = repo or ProductRepository()
        self._cache = cache

    @property
    def repo(self) -> ProductRepositoryProtocol:
        return self._repo

    async def get_product(self, db: AsyncSession, product_id: str) -> ProductOut:
        product = await self._repo.get_product_by_id(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return ProductOut.from_domain(product)

    async def list_products(
        self,
        db: AsyncSession,
        status: str | None,
        farmer_id: str | None,
        category: str | None,
        limit: int,
    ) -> ProductListResponse:
        params = {"status": status, "farmer_id": farmer_id, "category": category, "limit": limit}
        cached = await self._read_listing_cache(params)
        if cached is not None:
            return ProductListResponse(
                items=[ProductOut.model_validate(item) for item in cached], cached=True
            )

        products = await self._repo.list_products(db, status, farmer_id, category, limit)
        items = [ProductOut.from_domain(p) for p in products]
        await self._write_listing_cache(params, [i.model_dump() for i in items])
        return ProductListResponse(items=items)

    async def update_product(
        self, db: AsyncSession, product_id: str, update_data: dict[str, Any]
    ) -> ProductOut:
        result = await self.bulk_update(db, [product_id], update_data)
        if not result.updated_products:
            raise ProductNotFoundError(product_id)
        return result.updated_products[0]

    async def bulk_update(
        self, db: AsyncSession, product_ids: list[str], update_data: dict[str, Any]
    ) -> BulkUpdateResponse:
        ids = validate_product_ids(product_ids)
        fields = sanitize_update_data(update_data)

        try:
            matched = await self._repo.update_products(db, ids, fields)
            if not matched:
                raise NoProductsMatchedError()
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Bulk update: requested=%d matched=%d fields=%s",
            len(product_ids), len(matched), ",".join(sorted(fields)),
        )
        cache_cleared = await self._clear_listing_cache()

        refreshed = await self._repo.get_products_by_ids(db, matched)
        result = BulkUpdateResult(
            requested_count=len(product_ids),
            matched_count=len(matched),
            updated_products=[refreshed[pid] for pid in matched if pid in refreshed],
            updated_fields=sorted(fields),
        )
        return BulkUpdateResponse.from_result(result, cache_cleared)

    async def _clear_listing_cache(self) -> bool:
        if self._cache is None:
            return False
        try:
            await self._cache.clear()
        except RedisError as exc:
            # Listing entries expire on their own TTL
            logger.warning("Product listing cache clear failed: %s", exc)
            return False
        return True

    async def _read_listing_cache(self, params: dict[str, Any]) -> list[dict[str, Any]] | None:
        if self._cache is None:
            return None
        try:
            return await self._cache.get_listing(params)
        except RedisError as exc:
            logger.warning("Product listing cache read failed: %s", exc)
            return None

    async def _write_listing_cache(
        self, params: dict[str, Any], items: list[dict[str, Any]]
    ) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.set_listing(params, items)
        except RedisError as exc:
            logger.warning("Product listing cache write failed: %s", exc)
