"""Decimal <-> integer base-unit conversions."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

from vaultlink.errors import InvalidAmount

Number = Union[Decimal, int, float, str]

# enough digits for any uint256 amount
UNIT_PRECISION = 80


def to_decimal(amount: Number) -> Decimal:
    """Coerce a user-supplied amount to a finite, positive Decimal.

    Floats go through ``str`` so ``0.1`` stays ``Decimal("0.1")``.

    Raises:
        InvalidAmount: If the value is not a number, not finite, or <= 0
    """
    if isinstance(amount, bool):
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Invalid amount: {amount!r}") from None

    if not value.is_finite() or value <= 0:
        raise InvalidAmount(f"Amount must be positive, got {amount!r}")
    return value


def to_base_units(amount: Decimal, decimals: int, strict: bool = False) -> int:
    """Scale a decimal amount to integer base units.

    Args:
        amount: Amount in whole units
        decimals: Token/coin precision
        strict: Reject amounts with more fractional digits than ``decimals``
            instead of rounding half-up

    Raises:
        InvalidAmount: On excess precision (strict) or a zero result
    """
    with localcontext() as ctx:
        ctx.prec = max(UNIT_PRECISION, len(amount.as_tuple().digits))
        scaled = amount.scaleb(decimals)
        rounded = scaled.to_integral_value(rounding=ROUND_HALF_UP)
        if strict and rounded != scaled:
            raise InvalidAmount(f"{amount} has more than {decimals} decimal places")
        units = int(rounded)
    if units <= 0:
        raise InvalidAmount(f"{amount} is below the smallest unit (10^-{decimals})")
    return units


def from_base_units(raw: int, decimals: int) -> Decimal:
    """Convert integer base units to a Decimal amount."""
    with localcontext() as ctx:
        ctx.prec = UNIT_PRECISION
        return Decimal(int(raw)).scaleb(-decimals)


def quantize_places(value: Decimal, places: int) -> Decimal:
    """Round to a fixed number of decimal places (half-up)."""
    with localcontext() as ctx:
        ctx.prec = UNIT_PRECISION
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
