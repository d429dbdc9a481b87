"""ProductRepository — concrete implementation of ProductRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
Id lists bind as one array parameter: WHERE id = ANY(:ids).
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_catalog.domain.models import ProductRecord

# Columns the bulk/single update may touch; anything else never reaches SQL.
UPDATABLE_COLUMNS = ("price", "stock", "status", "category", "featured", "description")

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    p.id, p.name, p.price, p.stock, p.unit, p.status,
    p.farmer_id, p.image, p.category, p.description, p.featured, p.updated_at,
    u.name AS farmer_name,
    (u.id IS NOT NULL AND u.user_type = 'farmer' AND u.is_active) AS farmer_active
"""

_GET_PRODUCT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products p
    LEFT JOIN users u ON u.id = p.farmer_id
    WHERE p.id = :product_id
""")

_GET_PRODUCTS_BY_IDS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products p
    LEFT JOIN users u ON u.id = p.farmer_id
    WHERE p.id = ANY(:ids)
""")

_LIST_PRODUCTS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products p
    LEFT JOIN users u ON u.id = p.farmer_id
    WHERE
        (CAST(:status AS TEXT) IS NULL OR p.status = CAST(:status AS TEXT))
        AND p.status <> 'deleted'
        AND (CAST(:farmer_id AS TEXT) IS NULL OR p.farmer_id = CAST(:farmer_id AS TEXT))
        AND (CAST(:category AS TEXT) IS NULL OR p.category = CAST(:category AS TEXT))
    ORDER BY p.updated_at DESC, p.id DESC
    LIMIT :limit
""")


def _build_update_sql(columns: list[str]) -> Any:
    """UPDATE statement for a whitelisted set of columns, skipping deleted products."""
    unknown = set(columns) - set(UPDATABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Columns not updatable: {sorted(unknown)}")
    assignments = ", ".join(f"{col} = :{col}" for col in columns)
    return text(f"""
        UPDATE products
        SET {assignments}, updated_at = NOW(), last_bulk_update = NOW()
        WHERE id = ANY(:ids)
          AND status <> 'deleted'
        RETURNING id
    """)


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_product(row: Any) -> ProductRecord:
    return ProductRecord(
        product_id=row.id,
        name=row.name,
        price=row.price,
        stock=row.stock,
        unit=row.unit,
        status=row.status,
        farmer_id=row.farmer_id,
        farmer_name=row.farmer_name,
        farmer_active=bool(row.farmer_active),
        image=row.image,
        category=row.category,
        description=row.description,
        featured=row.featured,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductRepository:
    async def get_product_by_id(
        self, db: AsyncSession, product_id: str
    ) -> ProductRecord | None:
        result = await db.execute(_GET_PRODUCT_SQL, {"product_id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def get_products_by_ids(
        self, db: AsyncSession, product_ids: list[str]
    ) -> dict[str, ProductRecord]:
        if not product_ids:
            return {}
        result = await db.execute(
            _GET_PRODUCTS_BY_IDS_SQL, {"ids": list(product_ids)}
        )
        products = [_row_to_product(row) for row in result.fetchall()]
        return {p.product_id: p for p in products}

    async def list_products(
        self,
        db: AsyncSession,
        status: str | None,
        farmer_id: str | None,
        category: str | None,
        limit: int,
    ) -> list[ProductRecord]:
        result = await db.execute(
            _LIST_PRODUCTS_SQL,
            {
                "status": status,
                "farmer_id": farmer_id,
                "category": category,
                "limit": limit,
            },
        )
        return [_row_to_product(row) for row in result.fetchall()]

    async def update_products(
        self, db: AsyncSession, product_ids: list[str], fields: dict[str, Any]
    ) -> list[str]:
        """Apply ``fields`` to every non-deleted product in ``product_ids``.

        Returns the ids that matched. Caller owns the transaction.
        """
        columns = sorted(fields)
        params = {"ids": list(product_ids), **fields}
        result = await db.execute(_build_update_sql(columns), params)
        return [row.id for row in result.fetchall()]
