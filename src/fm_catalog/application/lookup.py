"""Catalog lookup adapters consumed by the reorder validator.

Both satisfy ``ProductLookup`` from fm_order.domain.reorder: an object with
``get_product(product_id)`` returning a ProductRecord or None.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_catalog.domain.models import ProductRecord
from src.fm_catalog.domain.repository import ProductRepositoryProtocol

logger = logging.getLogger("fm.catalog")


class RepositoryProductLookup:
    """One query per product."""

    def __init__(self, repo: ProductRepositoryProtocol, db: AsyncSession) -> None:
        self._repo = repo
        self._db = db

    async def get_product(self, product_id: str) -> ProductRecord | None:
        return await self._repo.get_product_by_id(self._db, product_id)


class BatchedProductLookup(RepositoryProductLookup):
    """Loads every requested id in one query, then answers from memory.

    If the batch query fails, lookups fall back to one query per product so a
    single bad row cannot fail the whole order.
    """

    def __init__(self, repo: ProductRepositoryProtocol, db: AsyncSession) -> None:
        super().__init__(repo, db)
        self._products: dict[str, ProductRecord] | None = None

    async def prefetch(self, product_ids: list[str]) -> None:
        try:
            self._products = await self._repo.get_products_by_ids(
                self._db, list(dict.fromkeys(product_ids))
            )
        except SQLAlchemyError as exc:
            logger.warning("Batch product lookup failed, using per-item lookups: %s", exc)
            self._products = None

    async def get_product(self, product_id: str) -> ProductRecord | None:
        if self._products is None:
            return await super().get_product(product_id)
        return self._products.get(product_id)
