"""Integer arithmetic utilities for cents-based pricing.

All prices, fees and totals use int (cents). No float for money.
"""


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def percent_change(original: int, current: int) -> float | None:
    """Relative change in percent, rounded to 1 decimal. None when original is 0."""
    if original == 0:
        return None
    return round((current - original) / original * 100, 1)


def unit_price_from_subtotal(subtotal: int, quantity: int) -> int:
    """Derive a per-unit price from a line subtotal, rounding half up."""
    if quantity <= 0:
        raise ValueError(f"Quantity must be positive, got {quantity}")
    return (subtotal * 2 + quantity) // (quantity * 2)
