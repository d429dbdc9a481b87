# src/fm_order/infrastructure/persistence.py
"""OrderRepository — raw SQL persistence implementation.

Orders are returned as raw documents; fm_order.application.normalizer turns
them into OrderSnapshot.
"""
import json
from dataclasses import asdict
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_order.domain.models import OrderSnapshot

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_GET_ORDER_SQL = text("""
    SELECT id, user_id, status, items, subtotal, delivery_fee, service_fee,
           total, created_at
    FROM orders
    WHERE id = :id AND user_id = :user_id
""")

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, user_id, status, items, subtotal, delivery_fee,
        service_fee, total, reordered_from)
    VALUES (:id, :user_id, :status, CAST(:items AS JSONB), :subtotal, :delivery_fee,
        :service_fee, :total, :reordered_from)
""")


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def get_order_document(
        self, db: AsyncSession, order_id: str, user_id: str
    ) -> dict[str, Any] | None:
        result = await db.execute(_GET_ORDER_SQL, {"id": order_id, "user_id": user_id})
        row = result.fetchone()
        if row is None:
            return None
        doc = dict(row._mapping)
        if isinstance(doc["items"], str):
            doc["items"] = json.loads(doc["items"])
        return doc

    async def save(
        self, db: AsyncSession, order: OrderSnapshot, reordered_from: str | None = None
    ) -> None:
        await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.order_id,
                "user_id": order.user_id,
                "status": order.status,
                "items": json.dumps([asdict(item) for item in order.items]),
                "subtotal": order.subtotal,
                "delivery_fee": order.delivery_fee,
                "service_fee": order.service_fee,
                "total": order.total,
                "reordered_from": reordered_from,
            },
        )
