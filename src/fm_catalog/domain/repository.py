"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_catalog.domain.models import ProductRecord


class ProductRepositoryProtocol(Protocol):
    async def get_product_by_id(
        self, db: AsyncSession, product_id: str
    ) -> ProductRecord | None: ...

    async def get_products_by_ids(
        self, db: AsyncSession, product_ids: list[str]
    ) -> dict[str, ProductRecord]: ...

    async def list_products(
        self,
        db: AsyncSession,
        status: str | None,
        farmer_id: str | None,
        category: str | None,
        limit: int,
    ) -> list[ProductRecord]: ...

    async def update_products(
        self, db: AsyncSession, product_ids: list[str], fields: dict[str, Any]
    ) -> list[str]: ...


class ProductListingCacheProtocol(Protocol):
    async def get_listing(self, params: dict[str, Any]) -> list[dict[str, Any]] | None: ...

    async def set_listing(
        self, params: dict[str, Any], items: list[dict[str, Any]]
    ) -> None: ...

    async def clear(self) -> int: ...
