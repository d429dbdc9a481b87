"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Catalog / Product
  4xxx: Order / Reorder
  6xxx: Cache / Mutation
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 2xxx: Catalog / Product ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2001, f"Product not found: {product_id}", 404)


class NoProductsMatchedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            2002, "No products found to update (missing or already deleted)", 404
        )


class InvalidUpdateDataError(AppError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(2003, f"Validation failed: {'; '.join(errors)}", 400)


class TooManyProductsError(AppError):
    def __init__(self, requested: int, maximum: int) -> None:
        super().__init__(
            2004,
            f"Too many products selected: {requested}. Maximum {maximum} allowed",
            400,
        )


# --- 4xxx: Order / Reorder ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found or access denied: {order_id}", 404)


class InvalidOrderDataError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4010, f"Invalid order data: {detail}", 400)


class EmptyOrderError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4011, f"Order {order_id} has no items", 400)


class NothingToReorderError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(
            4012, f"No items from order {order_id} are currently available", 422
        )


# --- 6xxx: Cache / Mutation ---

class InvalidStateTransitionError(AppError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(6001, f"Illegal transition {current} -> {target}", 500)


class MutationRejectedError(AppError):
    """Network mutation failed. ``kind`` is the server's machine-readable error code."""

    def __init__(self, kind: int, message: str, http_status: int) -> None:
        self.kind = kind
        super().__init__(6002, f"Mutation rejected ({kind}): {message}", http_status)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
