"""Global enums. Values must match DB CHECK constraints exactly."""

from enum import Enum


class ProductStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class UserType(str, Enum):
    CUSTOMER = "customer"
    FARMER = "farmer"


class UnavailableReason(str, Enum):
    """Reasons an order line cannot be reordered at all."""
    NOT_AVAILABLE = "Product no longer available"
    FARMER_UNAVAILABLE = "Farmer account unavailable"
    OUT_OF_STOCK = "Out of stock"
    LOOKUP_FAILED = "Lookup failed"


class EntryState(str, Enum):
    """Cache entry lifecycle: CONFIRMED -> PENDING -> (CONFIRMED | REVERTED)."""
    CONFIRMED = "CONFIRMED"
    PENDING = "PENDING"
    REVERTED = "REVERTED"


class MutationState(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REVERTED = "REVERTED"
