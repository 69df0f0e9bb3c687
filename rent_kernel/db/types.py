"""
Module: rent_kernel.db.types
Responsibility: Annotated type aliases and rounding helpers for money
    columns and report figures.  Every monetary value in the ledger is a
    ``Decimal``; floats never appear.
Architecture position: Kernel > DB.  May be imported by domain, modules
    and services.  MUST NOT import from any of those layers.

Invariants enforced:
    - round_money() is the only sanctioned rounding function for money and
      percentages (ROUND_HALF_UP, two places unless stated otherwise).
    - percentage() returns exactly zero when the whole is zero.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String

# Monetary amount: 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

# Short identifier strings (status, method, category)
ShortCode = Annotated[str, String(50)]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_ROUNDING = ROUND_HALF_UP
REPORT_DECIMAL_PLACES = 2


def to_money(value: Decimal | int | str) -> Decimal:
    """Coerce int/str/Decimal input to Decimal. Floats, NaN and infinities are rejected."""
    if isinstance(value, float):
        raise TypeError("Monetary values must not be float; use Decimal or str")
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if not amount.is_finite():
        raise ArithmeticError(f"Monetary values must be finite, got {amount}")
    return amount


def round_money(
    value: Decimal,
    decimal_places: int = REPORT_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the given number of decimal places.

    Args:
        value: The Decimal value to round.
        decimal_places: Number of decimal places to round to.
        rounding: Rounding mode (default: ROUND_HALF_UP).
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places > 0 else "1"
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def percentage(
    part: Decimal,
    whole: Decimal,
    decimal_places: int = REPORT_DECIMAL_PLACES,
) -> Decimal:
    """``part / whole * 100`` rounded half-up; zero when ``whole`` is zero."""
    if whole == ZERO:
        return round_money(ZERO, decimal_places)
    return round_money(part / whole * HUNDRED, decimal_places)
