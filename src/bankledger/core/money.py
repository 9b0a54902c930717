"""Fixed-point helpers for money and share quantities."""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from bankledger.core.exceptions import InvalidAmountError

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Share quantities and prices are stored with 8 decimal places
SHARE_QUANTUM = Decimal("0.00000001")

# SQLite keeps NUMERIC columns as binary floats, exact to 15 significant digits
MAX_SIGNIFICANT_DIGITS = 15

Numeric = Union[Decimal, int, str]


def fits_storage(value: Decimal) -> bool:
    """True if ``value`` survives a round trip through a NUMERIC column."""
    if value.is_zero():
        return True
    normalized = value.normalize()
    return (
        len(normalized.as_tuple().digits) <= MAX_SIGNIFICANT_DIGITS
        and normalized.adjusted() < MAX_SIGNIFICANT_DIGITS
    )


def _to_decimal(field: str, value: Numeric) -> Decimal:
    if isinstance(value, float):
        # floats are rejected rather than silently rounded
        raise InvalidAmountError(field, value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(field, value)
    if not result.is_finite():
        raise InvalidAmountError(field, value)
    if not fits_storage(result):
        raise InvalidAmountError(field, value)
    return result


def require_money(field: str, value: Numeric) -> Decimal:
    """
    Validate a caller-supplied money amount.

    Must be positive with at most two decimal places and at most
    15 significant digits.
    Returns the amount quantized to cents.
    """
    amount = _to_decimal(field, value)
    if amount <= ZERO or amount != amount.quantize(CENT, rounding=ROUND_HALF_UP):
        raise InvalidAmountError(field, value)
    return amount.quantize(CENT)


def require_positive(field: str, value: Numeric) -> Decimal:
    """Validate a positive share count or price (up to 8 decimal places, 15 digits)."""
    quantity = _to_decimal(field, value)
    if quantity <= ZERO or quantity != quantity.quantize(SHARE_QUANTUM, rounding=ROUND_HALF_UP):
        raise InvalidAmountError(field, value)
    return quantity


def round_money(value: Decimal) -> Decimal:
    """Round a computed amount (shares x price) half-up to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_quantity(value: Decimal) -> str:
    """Render a share quantity without trailing zeros, e.g. ``2`` or ``1.5``."""
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal("1")))
    return format(normalized, "f")
