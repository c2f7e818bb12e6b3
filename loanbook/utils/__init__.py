"""
Utility modules for LoanBook.

This package contains reusable utility functions for instant handling,
rate conversions, and error handling throughout the application.
"""

from loanbook.utils.date_utils import (
    now_ms,
    from_epoch_ms,
    to_epoch_ms,
    parse_date,
    to_instant,
    format_date_for_display,
    add_days,
    add_months,
    set_day_of_month,
    get_first_payment_date,
    get_payment_date,
    count_payment_months,
    validate_date_range,
    MS_PER_DAY,
)

from loanbook.utils.rate_utils import (
    is_finite_number,
    round_half_up,
    annual_pct_to_decimal,
    annual_pct_to_monthly_decimal,
    simple_interest,
    annualized_rate_pct,
    normalize_rate_input,
    MONTHS_PER_YEAR,
    PERCENTAGE_TO_DECIMAL,
)

from loanbook.utils.error_utils import (
    LoanBookError,
    ScheduleValidationError,
    DateParseError,
    configure_logging,
    error_handler,
    logger,
)

__all__ = [
    # Date utilities
    "now_ms",
    "from_epoch_ms",
    "to_epoch_ms",
    "parse_date",
    "to_instant",
    "format_date_for_display",
    "add_days",
    "add_months",
    "set_day_of_month",
    "get_first_payment_date",
    "get_payment_date",
    "count_payment_months",
    "validate_date_range",
    "MS_PER_DAY",
    # Rate utilities
    "is_finite_number",
    "round_half_up",
    "annual_pct_to_decimal",
    "annual_pct_to_monthly_decimal",
    "simple_interest",
    "annualized_rate_pct",
    "normalize_rate_input",
    "MONTHS_PER_YEAR",
    "PERCENTAGE_TO_DECIMAL",
    # Error handling
    "LoanBookError",
    "ScheduleValidationError",
    "DateParseError",
    "configure_logging",
    "error_handler",
    "logger",
]
