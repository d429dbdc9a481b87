# src/fm_order/application/schemas.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from src.fm_order.domain.models import OrderSnapshot, ValidationReport


class ReorderRequest(BaseModel):
    user_id: str

    @field_validator("user_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("user_id is required")
        return v


class _FromDomain(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class AvailableItemOut(_FromDomain):
    product_id: str
    product_name: str
    quantity: int
    price: int
    original_price: int
    stock: int
    subtotal: int
    unit: str
    farmer_id: str | None
    farmer_name: str
    image: str | None
    category: str | None


class UnavailableItemOut(_FromDomain):
    product_id: str
    product_name: str
    quantity: int
    original_price: int
    reason: str


class StockIssueOut(_FromDomain):
    product_id: str
    product_name: str
    requested_quantity: int
    available_stock: int
    original_price: int
    current_price: int
    reason: str


class PriceChangeOut(_FromDomain):
    product_id: str
    product_name: str
    original_price: int
    current_price: int
    price_difference: int
    price_change_percent: float | None


class ReorderSummaryOut(_FromDomain):
    total_original_items: int
    available_count: int
    unavailable_count: int
    price_changes_count: int
    stock_issues_count: int
    reorder_success: bool
    full_reorder_possible: bool


class ReorderPricingOut(_FromDomain):
    original_subtotal: int
    original_total: int
    original_delivery_fee: int
    estimated_subtotal: int
    estimated_delivery_fee: int
    estimated_service_fee: int
    estimated_total: int
    total_difference: int
    subtotal_difference: int


class ValidationOut(BaseModel):
    available_items: list[AvailableItemOut]
    unavailable_items: list[UnavailableItemOut]
    price_changes: list[PriceChangeOut]
    stock_issues: list[StockIssueOut]


class OriginalOrderOut(BaseModel):
    id: str
    item_count: int
    subtotal: int
    total: int
    order_date: datetime | None


class ReorderMeta(BaseModel):
    validated_at: datetime
    order_id: str
    user_id: str


class ReorderResponse(BaseModel):
    original_order: OriginalOrderOut
    validation: ValidationOut
    summary: ReorderSummaryOut
    pricing: ReorderPricingOut
    meta: ReorderMeta

    @classmethod
    def build(
        cls, order: OrderSnapshot, report: ValidationReport, validated_at: datetime
    ) -> "ReorderResponse":
        return cls(
            original_order=OriginalOrderOut(
                id=order.order_id,
                item_count=len(order.items),
                subtotal=report.pricing.original_subtotal,
                total=order.total,
                order_date=order.order_date,
            ),
            validation=ValidationOut(
                available_items=[AvailableItemOut.model_validate(i) for i in report.available_items],
                unavailable_items=[
                    UnavailableItemOut.model_validate(i) for i in report.unavailable_items
                ],
                price_changes=[PriceChangeOut.model_validate(i) for i in report.price_changes],
                stock_issues=[StockIssueOut.model_validate(i) for i in report.stock_issues],
            ),
            summary=ReorderSummaryOut.model_validate(report.summary),
            pricing=ReorderPricingOut.model_validate(report.pricing),
            meta=ReorderMeta(
                validated_at=validated_at, order_id=order.order_id, user_id=order.user_id
            ),
        )


class PlaceReorderResponse(BaseModel):
    order_id: str
    reordered_from: str
    item_count: int
    subtotal: int
    delivery_fee: int
    total: int
    skipped_count: int
