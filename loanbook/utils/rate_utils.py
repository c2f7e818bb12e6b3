"""
Rate and rounding utilities for loan calculations.

Conventions:
- All user inputs are annual rates as percentages (e.g., 12.0 = 12%)
- Interest is simple: monthly rate = annual_pct / 100 / 12, applied to principal only
- Rounding is half-up (2.5 -> 3, -2.5 -> -2), matching the amounts users see
"""

import math
from typing import Union

MONTHS_PER_YEAR = 12
PERCENTAGE_TO_DECIMAL = 100.0


def is_finite_number(value) -> bool:
    """True for real numbers that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round to ``digits`` decimal places, halves rounding towards +infinity.

    Non-finite values are returned unchanged.

    Examples:
        >>> round_half_up(176666.5)
        176667.0
        >>> round_half_up(1060000.004, 2)
        1060000.0
    """
    if not is_finite_number(value):
        return value
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def annual_pct_to_decimal(rate_pct: Union[float, str]) -> float:
    """
    Convert annual percentage rate to decimal format.

    Examples:
        >>> annual_pct_to_decimal(12.0)
        0.12
    """
    return float(rate_pct) / PERCENTAGE_TO_DECIMAL


def annual_pct_to_monthly_decimal(rate_pct: Union[float, str]) -> float:
    """
    Convert annual percentage rate directly to a monthly decimal rate.

    Examples:
        >>> round(annual_pct_to_monthly_decimal(12.0), 6)
        0.01
    """
    return annual_pct_to_decimal(rate_pct) / MONTHS_PER_YEAR


def simple_interest(principal: float, rate_pct: float, months: int) -> float:
    """Interest accrued on ``principal`` over ``months`` at an annual percentage rate."""
    return principal * annual_pct_to_monthly_decimal(rate_pct) * months


def annualized_rate_pct(principal: float, interest: float, months: int) -> float:
    """Annual percentage rate that yields ``interest`` on ``principal`` over ``months``."""
    return (interest / principal) * (MONTHS_PER_YEAR / months) * PERCENTAGE_TO_DECIMAL


def normalize_rate_input(rate_input: Union[str, float, int]) -> float:
    """
    Normalize rate input from a form field to a float percentage.

    Strips whitespace and a trailing percent sign. Anything unparseable maps
    to 0.0 so a half-typed value never breaks the caller.

    Examples:
        >>> normalize_rate_input("5.5%")
        5.5
        >>> normalize_rate_input("")
        0.0
    """
    if isinstance(rate_input, str):
        cleaned = rate_input.strip().rstrip("%").strip()
        try:
            rate_float = float(cleaned)
        except ValueError:
            return 0.0
    else:
        try:
            rate_float = float(rate_input)
        except (TypeError, ValueError):
            return 0.0

    return rate_float if math.isfinite(rate_float) else 0.0
