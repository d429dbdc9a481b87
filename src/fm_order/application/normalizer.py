"""Boundary adapter: raw order documents -> canonical OrderSnapshot.

Stored orders carry line items in several historical shapes:
  - product id under "productId", "id" or "_id"
  - name under "productName" or "name"
  - unit price under "price" / "priceAtOrderTime", or only a line "subtotal"
  - image under "image" or as the first of "images"
Everything past this module sees OrderLineItem only.
"""

from typing import Any

from src.fm_common.cents import unit_price_from_subtotal
from src.fm_common.datetime_utils import parse_timestamp
from src.fm_common.enums import OrderStatus
from src.fm_common.errors import InvalidOrderDataError
from src.fm_order.domain.models import OrderLineItem, OrderSnapshot

_ID_KEYS = ("productId", "product_id", "id", "_id")
_NAME_KEYS = ("productName", "product_name", "name")
_PRICE_KEYS = ("price", "priceAtOrderTime", "price_at_order_time")


def _first(doc: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = doc.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_cents(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise InvalidOrderDataError(f"{what} must be a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidOrderDataError(f"{what} must be whole cents, got {value!r}")


def normalize_line_item(raw: dict[str, Any]) -> OrderLineItem:
    product_id = _first(raw, _ID_KEYS)
    if product_id is None:
        raise InvalidOrderDataError(f"line item has no product id: {raw!r}")
    product_id = str(product_id)

    quantity = _as_cents(raw.get("quantity", 1), "quantity")
    if quantity <= 0:
        raise InvalidOrderDataError(f"quantity must be positive for {product_id}")

    price = _first(raw, _PRICE_KEYS)
    if price is not None:
        unit_price = _as_cents(price, "price")
    elif raw.get("subtotal") is not None:
        unit_price = unit_price_from_subtotal(_as_cents(raw["subtotal"], "subtotal"), quantity)
    else:
        raise InvalidOrderDataError(f"line item has no price: {product_id}")

    image = raw.get("image")
    if not image and raw.get("images"):
        image = raw["images"][0]

    return OrderLineItem(
        product_id=product_id,
        product_name=str(_first(raw, _NAME_KEYS) or "Unknown product"),
        quantity=quantity,
        price_at_order_time=unit_price,
        image=image or None,
    )


def normalize_order(doc: dict[str, Any]) -> OrderSnapshot:
    """Build an OrderSnapshot from a stored order document.

    Missing subtotal is recomputed from the items; missing total is
    subtotal + delivery fee + service fee.
    """
    raw_items = doc.get("items") or []
    if not isinstance(raw_items, list):
        raise InvalidOrderDataError("items must be a list")
    items = tuple(normalize_line_item(raw) for raw in raw_items)

    delivery_fee = _as_cents(doc.get("delivery_fee") or 0, "delivery_fee")
    service_fee = _as_cents(doc.get("service_fee") or 0, "service_fee")
    subtotal = doc.get("subtotal")
    subtotal = (
        _as_cents(subtotal, "subtotal")
        if subtotal is not None
        else sum(i.line_total for i in items)
    )
    total = doc.get("total")
    total = (
        _as_cents(total, "total")
        if total is not None
        else subtotal + delivery_fee + service_fee
    )

    try:
        order_date = parse_timestamp(doc.get("created_at"))
    except ValueError as exc:
        raise InvalidOrderDataError(f"created_at is not a timestamp: {exc}") from exc

    return OrderSnapshot(
        order_id=str(doc["id"]),
        user_id=str(doc["user_id"]),
        order_date=order_date,
        items=items,
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        service_fee=service_fee,
        total=total,
        status=doc.get("status") or OrderStatus.PENDING.value,
    )
