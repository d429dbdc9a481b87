"""Domain models for fm_catalog: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.fm_common.enums import ProductStatus


@dataclass(frozen=True)
class ProductRecord:
    """Live catalog entity as seen at read time (prices in cents)."""

    product_id: str
    name: str
    price: int
    stock: int
    unit: str = "unit"
    status: str = ProductStatus.ACTIVE.value
    farmer_id: str | None = None
    farmer_name: str | None = None
    farmer_active: bool | None = None  # None = farmer info not loaded
    image: str | None = None
    category: str | None = None
    description: str | None = None
    featured: bool = False
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value


@dataclass
class BulkUpdateResult:
    requested_count: int
    matched_count: int
    updated_products: list[ProductRecord] = field(default_factory=list)
    updated_fields: list[str] = field(default_factory=list)
