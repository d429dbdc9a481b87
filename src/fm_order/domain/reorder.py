"""Reorder validation: re-check a past order against the live catalog.

Each line item lands in exactly one bucket:
  - unavailable: product missing/inactive, farmer unavailable, stock 0, lookup error
  - stock issue: 0 < stock < requested quantity (not auto-reduced)
  - available:   stock >= requested quantity
Price changes are reported alongside, for available items and stock issues.

Only available items count toward the estimated subtotal. The validator has no
side effects; the same inputs always produce an equal report.
"""

import inspect
import logging
from collections.abc import Awaitable
from typing import Protocol

from src.fm_catalog.domain.models import ProductRecord
from src.fm_common.cents import percent_change
from src.fm_common.enums import UnavailableReason
from src.fm_common.errors import EmptyOrderError
from src.fm_order.domain.models import (
    AvailableItem,
    OrderLineItem,
    OrderSnapshot,
    PriceChange,
    ReorderPricing,
    ReorderSummary,
    StockIssue,
    UnavailableItem,
    ValidationReport,
)
from src.fm_order.domain.pricing import DeliveryFeePolicy, flat_fee_policy

logger = logging.getLogger("fm.reorder")


class ProductLookup(Protocol):
    """Sync or async lookup; returns None when the product does not exist."""

    def get_product(
        self, product_id: str
    ) -> ProductRecord | None | Awaitable[ProductRecord | None]: ...


async def _lookup(catalog: ProductLookup, product_id: str) -> ProductRecord | None:
    result = catalog.get_product(product_id)
    if inspect.isawaitable(result):
        result = await result
    return result


def _unavailable(item: OrderLineItem, reason: UnavailableReason) -> UnavailableItem:
    return UnavailableItem(
        product_id=item.product_id,
        product_name=item.product_name,
        quantity=item.quantity,
        original_price=item.price_at_order_time,
        reason=reason.value,
    )


def _price_change(item: OrderLineItem, product: ProductRecord) -> PriceChange | None:
    if product.price == item.price_at_order_time:
        return None
    return PriceChange(
        product_id=item.product_id,
        product_name=product.name,
        original_price=item.price_at_order_time,
        current_price=product.price,
        price_difference=product.price - item.price_at_order_time,
        price_change_percent=percent_change(item.price_at_order_time, product.price),
    )


def _unavailable_reason(product: ProductRecord) -> UnavailableReason | None:
    if not product.is_active:
        return UnavailableReason.NOT_AVAILABLE
    if product.farmer_active is False:
        return UnavailableReason.FARMER_UNAVAILABLE
    if product.stock <= 0:
        return UnavailableReason.OUT_OF_STOCK
    return None


class ReorderValidator:
    def __init__(self, delivery_fee_policy: DeliveryFeePolicy | None = None) -> None:
        self._fee_policy = delivery_fee_policy or flat_fee_policy()

    async def validate(
        self, order: OrderSnapshot, catalog: ProductLookup
    ) -> ValidationReport:
        if not order.items:
            raise EmptyOrderError(order.order_id)

        available: list[AvailableItem] = []
        unavailable: list[UnavailableItem] = []
        stock_issues: list[StockIssue] = []
        price_changes: list[PriceChange] = []

        for item in order.items:
            try:
                product = await _lookup(catalog, item.product_id)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Lookup failed for product %s in order %s: %s",
                    item.product_id, order.order_id, exc,
                )
                unavailable.append(_unavailable(item, UnavailableReason.LOOKUP_FAILED))
                continue

            if product is None:
                unavailable.append(_unavailable(item, UnavailableReason.NOT_AVAILABLE))
                continue
            reason = _unavailable_reason(product)
            if reason is not None:
                unavailable.append(_unavailable(item, reason))
                continue

            change = _price_change(item, product)
            if change is not None:
                price_changes.append(change)

            if product.stock < item.quantity:
                stock_issues.append(
                    StockIssue(
                        product_id=item.product_id,
                        product_name=product.name,
                        requested_quantity=item.quantity,
                        available_stock=product.stock,
                        original_price=item.price_at_order_time,
                        current_price=product.price,
                        reason=f"Only {product.stock} items available",
                    )
                )
                continue

            available.append(
                AvailableItem(
                    product_id=product.product_id,
                    product_name=product.name,
                    quantity=item.quantity,
                    price=product.price,
                    original_price=item.price_at_order_time,
                    stock=product.stock,
                    subtotal=product.price * item.quantity,
                    unit=product.unit,
                    farmer_id=product.farmer_id,
                    farmer_name=product.farmer_name or "Local Farmer",
                    image=product.image or item.image,
                    category=product.category,
                )
            )

        pricing = self._pricing(order, available)
        summary = ReorderSummary(
            total_original_items=len(order.items),
            available_count=len(available),
            unavailable_count=len(unavailable),
            price_changes_count=len(price_changes),
            stock_issues_count=len(stock_issues),
            reorder_success=len(available) > 0,
            full_reorder_possible=len(available) == len(order.items),
        )
        logger.info(
            "Reorder %s: available=%d unavailable=%d stock_issues=%d price_changes=%d",
            order.order_id, summary.available_count, summary.unavailable_count,
            summary.stock_issues_count, summary.price_changes_count,
        )
        return ValidationReport(
            available_items=tuple(available),
            unavailable_items=tuple(unavailable),
            price_changes=tuple(price_changes),
            stock_issues=tuple(stock_issues),
            summary=summary,
            pricing=pricing,
        )

    def _pricing(
        self, order: OrderSnapshot, available: list[AvailableItem]
    ) -> ReorderPricing:
        original_subtotal = sum(item.line_total for item in order.items)
        estimated_subtotal = sum(a.price * a.quantity for a in available)
        delivery_fee = self._fee_policy(estimated_subtotal, order.delivery_fee)
        service_fee = 0
        estimated_total = estimated_subtotal + delivery_fee + service_fee
        return ReorderPricing(
            original_subtotal=original_subtotal,
            original_total=order.total,
            original_delivery_fee=order.delivery_fee,
            estimated_subtotal=estimated_subtotal,
            estimated_delivery_fee=delivery_fee,
            estimated_service_fee=service_fee,
            estimated_total=estimated_total,
            total_difference=estimated_total - order.total,
            subtotal_difference=estimated_subtotal - original_subtotal,
        )
