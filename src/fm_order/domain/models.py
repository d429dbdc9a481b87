"""Order and reorder-report domain models — pure dataclasses, no SQLAlchemy dependency.

Money is integer cents throughout.
"""
from dataclasses import dataclass
from datetime import datetime

from src.fm_common.enums import OrderStatus


@dataclass(frozen=True)
class OrderLineItem:
    product_id: str
    product_name: str
    quantity: int
    price_at_order_time: int
    image: str | None = None

    @property
    def line_total(self) -> int:
        return self.price_at_order_time * self.quantity


@dataclass(frozen=True)
class OrderSnapshot:
    """Order as placed at checkout. Never mutated after creation."""

    order_id: str
    user_id: str
    order_date: datetime | None
    items: tuple[OrderLineItem, ...]
    subtotal: int
    delivery_fee: int
    total: int
    service_fee: int = 0
    status: str = OrderStatus.PENDING.value


# ---------------------------------------------------------------------------
# Validation report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AvailableItem:
    product_id: str
    product_name: str
    quantity: int
    price: int  # current price
    original_price: int
    stock: int
    subtotal: int
    unit: str = "unit"
    farmer_id: str | None = None
    farmer_name: str = "Local Farmer"
    image: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class UnavailableItem:
    product_id: str
    product_name: str
    quantity: int
    original_price: int
    reason: str


@dataclass(frozen=True)
class StockIssue:
    product_id: str
    product_name: str
    requested_quantity: int
    available_stock: int
    original_price: int
    current_price: int
    reason: str


@dataclass(frozen=True)
class PriceChange:
    product_id: str
    product_name: str
    original_price: int
    current_price: int
    price_difference: int  # positive = more expensive now
    price_change_percent: float | None  # None when original price was 0


@dataclass(frozen=True)
class ReorderSummary:
    total_original_items: int
    available_count: int
    unavailable_count: int
    price_changes_count: int
    stock_issues_count: int
    reorder_success: bool
    full_reorder_possible: bool


@dataclass(frozen=True)
class ReorderPricing:
    original_subtotal: int
    original_total: int
    original_delivery_fee: int
    estimated_subtotal: int
    estimated_delivery_fee: int
    estimated_service_fee: int
    estimated_total: int
    total_difference: int
    subtotal_difference: int


@dataclass(frozen=True)
class ValidationReport:
    available_items: tuple[AvailableItem, ...]
    unavailable_items: tuple[UnavailableItem, ...]
    price_changes: tuple[PriceChange, ...]
    stock_issues: tuple[StockIssue, ...]
    summary: ReorderSummary
    pricing: ReorderPricing
