"""Tests for fm_common.cents integer money helpers."""

import pytest

from src.fm_common.cents import (
    cents_to_display,
    percent_change,
    unit_price_from_subtotal,
)


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(6500) == "$65.00"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "$0.00"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-$12.00"

    def test_large(self) -> None:
        assert cents_to_display(150000) == "$1,500.00"


class TestPercentChange:
    def test_increase(self) -> None:
        assert percent_change(100, 120) == 20.0

    def test_decrease(self) -> None:
        assert percent_change(200, 150) == -25.0

    def test_rounds_to_one_decimal(self) -> None:
        # 1/3 → 33.333…
        assert percent_change(300, 400) == 33.3

    def test_zero_original_is_undefined(self) -> None:
        assert percent_change(0, 500) is None


class TestLineHelpers:
    def test_unit_price_exact(self) -> None:
        assert unit_price_from_subtotal(900, 3) == 300

    def test_unit_price_rounds_half_up(self) -> None:
        # 1000 / 3 = 333.33 → 333; 1001 / 2 = 500.5 → 501
        assert unit_price_from_subtotal(1000, 3) == 333
        assert unit_price_from_subtotal(1001, 2) == 501

    def test_unit_price_rejects_zero_quantity(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            unit_price_from_subtotal(100, 0)
