"""Validation and sanitization for product update payloads.

Only whitelisted fields survive. Unknown fields are dropped silently;
a payload with no known field at all is rejected.
"""

from typing import Any

from src.fm_common.enums import ProductStatus
from src.fm_common.errors import InvalidUpdateDataError, TooManyProductsError

MAX_BULK_OPERATIONS = 1000

VALID_UPDATE_FIELDS = ("price", "stock", "status", "category", "featured", "description")
VALID_STATUSES = (ProductStatus.ACTIVE.value, ProductStatus.INACTIVE.value)


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True must not pass as a price
    return isinstance(value, int) and not isinstance(value, bool)


def sanitize_update_data(update_data: dict[str, Any]) -> dict[str, Any]:
    """Return the cleaned subset of ``update_data``.

    Raises:
        InvalidUpdateDataError: no allowed field present, or any allowed field invalid.
    """
    allowed = [f for f in VALID_UPDATE_FIELDS if f in update_data]
    if not allowed:
        raise InvalidUpdateDataError(["No valid update fields provided"])

    sanitized: dict[str, Any] = {}
    errors: list[str] = []
    for field in allowed:
        value = update_data[field]
        if field == "price":
            if not _is_int(value) or value < 0:
                errors.append("Price must be a non-negative integer amount of cents")
            else:
                sanitized["price"] = value
        elif field == "stock":
            if not _is_int(value) or value < 0:
                errors.append("Stock must be a valid non-negative number")
            else:
                sanitized["stock"] = value
        elif field == "status":
            if value not in VALID_STATUSES:
                errors.append(f"Status must be one of: {', '.join(VALID_STATUSES)}")
            else:
                sanitized["status"] = value
        elif field == "category":
            if isinstance(value, str) and value.strip():
                sanitized["category"] = value.strip()
            else:
                errors.append("Category must be a non-empty string")
        elif field == "featured":
            if isinstance(value, bool):
                sanitized["featured"] = value
            else:
                errors.append("Featured must be a boolean value")
        elif field == "description":
            if isinstance(value, str):
                sanitized["description"] = value.strip()
            else:
                errors.append("Description must be a string")

    if errors:
        raise InvalidUpdateDataError(errors)
    return sanitized


def validate_product_ids(product_ids: list[str]) -> list[str]:
    """De-duplicate ids preserving order; enforce non-empty and the bulk cap."""
    if not product_ids:
        raise InvalidUpdateDataError(["Product IDs array cannot be empty"])
    if len(product_ids) > MAX_BULK_OPERATIONS:
        raise TooManyProductsError(len(product_ids), MAX_BULK_OPERATIONS)
    blank = [pid for pid in product_ids if not pid or not pid.strip()]
    if blank:
        raise InvalidUpdateDataError(["Product IDs must be non-empty strings"])
    return list(dict.fromkeys(product_ids))
