"""002: create products table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id                  VARCHAR(64)     PRIMARY KEY,
            farmer_id           VARCHAR(64)     NOT NULL,
            name                VARCHAR(255)    NOT NULL,
            description         TEXT,
            category            VARCHAR(64),
            price               BIGINT          NOT NULL,
            stock               INT             NOT NULL DEFAULT 0,
            unit                VARCHAR(20)     NOT NULL DEFAULT 'unit',
            status              VARCHAR(20)     NOT NULL DEFAULT 'active',
            featured            BOOLEAN         NOT NULL DEFAULT FALSE,
            image               TEXT,
            last_bulk_update    TIMESTAMPTZ,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_gte_0 CHECK (price >= 0),
            CONSTRAINT ck_products_stock_gte_0 CHECK (stock >= 0),
            CONSTRAINT ck_products_status CHECK (status IN ('active', 'inactive', 'deleted'))
        );
    """)
    op.execute("CREATE INDEX idx_products_farmer_status ON products (farmer_id, status);")
    op.execute("CREATE INDEX idx_products_status_updated ON products (status, updated_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
