"""Repository Protocol — dependency inversion for testability."""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_order.domain.models import OrderSnapshot


class OrderRepositoryProtocol(Protocol):
    async def get_order_document(
        self, db: AsyncSession, order_id: str, user_id: str
    ) -> dict[str, Any] | None: ...

    async def save(
        self, db: AsyncSession, order: OrderSnapshot, reordered_from: str | None = None
    ) -> None: ...
