"""
Central date utilities for LoanBook.

Every instant the engine consumes or produces is an integer count of
milliseconds since 1970-01-01 UTC. This module converts between that
representation and calendar values, and implements the calendar arithmetic
the loan schedules depend on.

Key Features:
- Universal instant parsing (epoch ms, ISO / day-first strings, datetime, pandas)
- Month arithmetic with end-of-month clamping (Jan 31 + 1 month -> Feb 28/29)
- Payment-day anchoring and month counting for schedule generation
"""

import re
from datetime import datetime, date, timedelta, timezone
from typing import Union

import pandas as pd
from dateutil.relativedelta import relativedelta

from loanbook.utils.error_utils import DateParseError, ScheduleValidationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS_PER_DAY = 24 * 60 * 60 * 1000

InstantInput = Union[int, float, str, datetime, date, pd.Timestamp]


def now_ms() -> int:
    """Current UTC time as epoch milliseconds."""
    return to_epoch_ms(datetime.now(timezone.utc))


def from_epoch_ms(instant: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=int(instant))


def to_epoch_ms(moment: datetime) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // timedelta(milliseconds=1)


def parse_date(date_input: InstantInput) -> pd.Timestamp:
    """
    Parse any supported instant representation into a UTC pandas Timestamp.

    Args:
        date_input: Epoch milliseconds, date string, datetime, date or Timestamp

    Returns:
        pd.Timestamp: Timezone-aware UTC timestamp

    Raises:
        DateParseError: If the input is missing, of an unsupported type or unparseable

    Examples:
        >>> parse_date(1704067200000)
        Timestamp('2024-01-01 00:00:00+0000', tz='UTC')

        >>> parse_date("15/01/2024")
        Timestamp('2024-01-15 00:00:00+0000', tz='UTC')
    """
    if date_input is None:
        raise DateParseError("Date input cannot be None")

    if isinstance(date_input, bool):
        raise DateParseError(f"Unsupported date input type: {type(date_input)}")

    if isinstance(date_input, pd.Timestamp):
        result = date_input
    elif isinstance(date_input, (int, float)):
        if pd.isna(date_input):
            raise DateParseError("Date input cannot be NaN")
        result = pd.Timestamp(int(date_input), unit="ms")
    elif isinstance(date_input, (datetime, date)):
        result = pd.Timestamp(date_input)
    elif isinstance(date_input, str):
        result = _parse_date_string(date_input.strip())
    else:
        raise DateParseError(f"Unsupported date input type: {type(date_input)}")

    if result.tzinfo is None:
        return result.tz_localize("UTC")
    return result.tz_convert("UTC")


def _parse_date_string(date_str: str) -> pd.Timestamp:
    """Parse a date string, trying ISO first and day-first second."""
    if not date_str:
        raise DateParseError("Date string cannot be empty")

    if re.fullmatch(r"-?\d+", date_str):
        return pd.Timestamp(int(date_str), unit="ms")

    format_patterns = [
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%d/%m/%Y",
        "%d-%m-%Y",
        "%d.%m.%Y",
    ]
    for format_str in format_patterns:
        try:
            return pd.Timestamp(datetime.strptime(date_str, format_str))
        except ValueError:
            continue

    try:
        return pd.Timestamp(date_str)
    except (ValueError, TypeError):
        pass

    raise DateParseError(
        f"Unable to parse date string '{date_str}'. "
        f"Supported formats include: epoch milliseconds, YYYY-MM-DD, DD/MM/YYYY, ISO 8601"
    )


def to_instant(date_input: InstantInput) -> int:
    """Parse any supported representation and return epoch milliseconds."""
    if isinstance(date_input, int) and not isinstance(date_input, bool):
        return date_input
    return int(parse_date(date_input).value // 1_000_000)


def format_date_for_display(instant: int) -> str:
    """Format an instant as YYYY-MM-DD (UTC)."""
    return from_epoch_ms(instant).strftime("%Y-%m-%d")


def add_days(instant: int, days: float) -> int:
    """Shift an instant by a number of days."""
    return int(instant + days * MS_PER_DAY)


def add_months(instant: int, months: int) -> int:
    """
    Shift an instant by whole calendar months, keeping the time of day.

    A day of month that does not exist in the target month is clamped to
    that month's last day.

    Examples:
        Jan 31 + 1 month -> Feb 29 (2024) / Feb 28 (2023)
    """
    return to_epoch_ms(from_epoch_ms(instant) + relativedelta(months=months))


def set_day_of_month(instant: int, day: int) -> int:
    """Move an instant to ``day`` of its own month, clamped to the month's last day."""
    return to_epoch_ms(from_epoch_ms(instant) + relativedelta(day=day))


def get_first_payment_date(start_date: int, payment_day: int) -> int:
    """
    First due date on ``payment_day`` that is not earlier than ``start_date``.

    When the payment day has already passed in the start month, the first
    payment moves to the following month.
    """
    first_payment_date = set_day_of_month(start_date, payment_day)
    if first_payment_date < start_date:
        return add_months(first_payment_date, 1)
    return first_payment_date


def get_payment_date(first_payment_date: int, index: int) -> int:
    """
    Due date of the ``index``-th monthly payment.

    Always stepped from the first payment date, never from the previous due
    date, so clamping in a short month does not carry over: a Jan 31 first
    payment gives Feb 29, Mar 31, Apr 30 and a Feb 29 one gives Mar 29, Apr 29.
    """
    return add_months(first_payment_date, index)


def count_payment_months(start_date: int, end_date: int, payment_day: int = 1) -> int:
    """
    Number of monthly steps from the first payment date until ``end_date``.

    Counts steps of one calendar month from the first payment date until the
    stepped date is on or after ``end_date``, including that final step.
    Returns 0 for an empty or inverted range.

    Examples:
        2024-01-01 -> 2024-07-01, day 1: 6
    """
    if end_date <= start_date:
        return 0

    first_payment_date = get_first_payment_date(start_date, payment_day)
    first = from_epoch_ms(first_payment_date)
    end = from_epoch_ms(end_date)

    # every step before the end date's month is strictly earlier than it
    count = max(1, (end.year - first.year) * 12 + (end.month - first.month) - 1)
    while get_payment_date(first_payment_date, count) < end_date:
        count += 1
    return count


def validate_date_range(start_date: int, end_date: int, allow_equal: bool = True) -> bool:
    """
    Validate that start_date is before (or equal to) end_date.

    Raises:
        ScheduleValidationError: If the range is invalid
    """
    is_valid = start_date <= end_date if allow_equal else start_date < end_date

    if not is_valid:
        raise ScheduleValidationError(
            "end date must be after start date",
            {
                "start_date": format_date_for_display(start_date),
                "end_date": format_date_for_display(end_date),
            },
        )

    return True
