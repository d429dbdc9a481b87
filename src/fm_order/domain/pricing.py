"""Delivery fee policies for reorder estimates.

A policy is any callable ``(estimated_subtotal, original_delivery_fee) -> fee``,
all values in cents.
"""

from collections.abc import Callable

from config.settings import settings

DeliveryFeePolicy = Callable[[int, int], int]


def flat_fee_policy(fee: int | None = None) -> DeliveryFeePolicy:
    """Fixed fee. With ``fee=None`` the original order's fee is charged again."""

    def _policy(estimated_subtotal: int, original_delivery_fee: int) -> int:
        return original_delivery_fee if fee is None else fee

    return _policy


def threshold_waiver_policy(threshold: int, fee: int) -> DeliveryFeePolicy:
    """``fee`` below ``threshold``, free delivery at or above it."""
    if threshold < 0 or fee < 0:
        raise ValueError("threshold and fee must be non-negative cents")

    def _policy(estimated_subtotal: int, original_delivery_fee: int) -> int:
        return 0 if estimated_subtotal >= threshold else fee

    return _policy


def policy_from_settings() -> DeliveryFeePolicy:
    if settings.DELIVERY_FEE_POLICY == "threshold":
        return threshold_waiver_policy(
            settings.FREE_DELIVERY_THRESHOLD_CENTS, settings.DELIVERY_FEE_CENTS
        )
    if settings.DELIVERY_FEE_POLICY == "flat":
        return flat_fee_policy()
    raise ValueError(f"Unknown DELIVERY_FEE_POLICY: {settings.DELIVERY_FEE_POLICY}")
