"""Pydantic schemas for fm_catalog API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field

from src.fm_catalog.domain.models import BulkUpdateResult, ProductRecord
from src.fm_common.cents import cents_to_display


class ProductOut(BaseModel):
    id: str
    name: str
    price: int  # cents
    price_display: str
    stock: int
    unit: str
    status: str
    farmer_id: str | None
    farmer_name: str | None
    image: str | None
    category: str | None
    description: str | None
    featured: bool
    updated_at: str | None

    @classmethod
    def from_domain(cls, p: ProductRecord) -> "ProductOut":
        return cls(
            id=p.product_id,
            name=p.name,
            price=p.price,
            price_display=cents_to_display(p.price),
            stock=p.stock,
            unit=p.unit,
            status=p.status,
            farmer_id=p.farmer_id,
            farmer_name=p.farmer_name,
            image=p.image,
            category=p.category,
            description=p.description,
            featured=p.featured,
            updated_at=p.updated_at.isoformat() if p.updated_at else None,
        )


class ProductListResponse(BaseModel):
    items: list[ProductOut]
    cached: bool = False


class ProductUpdateRequest(BaseModel):
    """Partial update. Field-level rules live in update_rules."""

    update_data: dict[str, Any]


class BulkUpdateRequest(BaseModel):
    product_ids: list[str] = Field(min_length=1)
    update_data: dict[str, Any]


class BulkUpdateResponse(BaseModel):
    updated_count: int
    matched_count: int
    requested_count: int
    updated_fields: list[str]
    updated_products: list[ProductOut]
    cache_cleared: bool

    @classmethod
    def from_result(cls, r: BulkUpdateResult, cache_cleared: bool) -> "BulkUpdateResponse":
        return cls(
            updated_count=r.matched_count,
            matched_count=r.matched_count,
            requested_count=r.requested_count,
            updated_fields=r.updated_fields,
            updated_products=[ProductOut.from_domain(p) for p in r.updated_products],
            cache_cleared=cache_cleared,
        )
