"""Tests for amount parsing and base-unit conversion."""

from decimal import Decimal

import pytest

from vaultlink.errors import InvalidAmount
from vaultlink.utils.units import from_base_units, quantize_places, to_base_units, to_decimal


class TestToDecimal:
    """Tests for user amount parsing."""

    @pytest.mark.parametrize(
        "amount, expected",
        [
            ("10", Decimal("10")),
            (" 0.5 ", Decimal("0.5")),
            (3, Decimal("3")),
            (0.1, Decimal("0.1")),
            (Decimal("1e-6"), Decimal("0.000001")),
        ],
    )
    def test_accepted(self, amount, expected):
        assert to_decimal(amount) == expected

    @pytest.mark.parametrize("amount", [0, -2, "0.0", "", "1,5", "inf", None, False])
    def test_rejected(self, amount):
        with pytest.raises(InvalidAmount):
            to_decimal(amount)


class TestBaseUnits:
    """Tests for scaling to and from integer units."""

    def test_exact_scaling(self):
        assert to_base_units(Decimal("1.5"), 9) == 1_500_000_000
        assert to_base_units(Decimal("10"), 6) == 10_000_000

    def test_rounds_half_up(self):
        assert to_base_units(Decimal("0.0000015"), 6) == 2
        assert to_base_units(Decimal("0.0000014"), 6) == 1

    def test_strict_rejects_excess_precision(self):
        with pytest.raises(InvalidAmount, match="decimal places"):
            to_base_units(Decimal("0.1234567"), 6, strict=True)

    def test_strict_accepts_trailing_zeros(self):
        assert to_base_units(Decimal("1.500000000"), 6, strict=True) == 1_500_000

    def test_below_smallest_unit(self):
        with pytest.raises(InvalidAmount, match="smallest unit"):
            to_base_units(Decimal("0.0000004"), 6)

    def test_from_base_units(self):
        assert from_base_units(1_234_567, 6) == Decimal("1.234567")
        assert from_base_units(0, 18) == Decimal(0)

    def test_quantize(self):
        assert quantize_places(Decimal("1.2345675"), 6) == Decimal("1.234568")
        assert str(quantize_places(Decimal("2"), 6)) == "2.000000"

    def test_strict_rejects_dust_beyond_default_precision(self):
        """Excess digits past 28 significant places are still detected."""
        with pytest.raises(InvalidAmount, match="decimal places"):
            to_base_units(Decimal("12345678901.0000000000000000001"), 18, strict=True)

    def test_large_amounts_scale_exactly(self):
        assert to_base_units(Decimal("12345678901.0000000000000000001"), 18) == 12345678901 * 10**18
        assert (
            to_base_units(Decimal("12345678901.123456789012345678"), 18, strict=True)
            == 12345678901_123456789012345678
        )

    def test_uint256_converts_both_ways(self):
        raw = 2**256 - 1

        value = from_base_units(raw, 18)

        assert len(value.as_tuple().digits) == 78
        assert to_base_units(value, 18, strict=True) == raw
