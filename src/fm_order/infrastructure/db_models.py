# src/fm_order/infrastructure/db_models.py
"""SQLAlchemy ORM model for the orders table (DDL reference only; queries use raw SQL)."""
from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.fm_common.database import Base


class OrderORM(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    # Line items as stored at checkout; shapes vary across app versions
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False)
    subtotal: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    delivery_fee: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    service_fee: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    reordered_from: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
