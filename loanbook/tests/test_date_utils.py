"""
Test suite for date utilities in LoanBook.
"""

from datetime import date, datetime, timezone

import pandas as pd
import pytest

from loanbook.utils.date_utils import (
    MS_PER_DAY,
    add_days,
    add_months,
    count_payment_months,
    format_date_for_display,
    from_epoch_ms,
    get_first_payment_date,
    get_payment_date,
    parse_date,
    set_day_of_month,
    to_epoch_ms,
    to_instant,
    validate_date_range,
)
from loanbook.utils.error_utils import DateParseError, ScheduleValidationError

JAN_1_2024 = 1704067200000


def test_epoch_conversion():
    """Test epoch milliseconds <-> datetime conversion."""
    moment = from_epoch_ms(JAN_1_2024)
    assert moment == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert to_epoch_ms(moment) == JAN_1_2024
    # naive datetimes are UTC
    assert to_epoch_ms(datetime(2024, 1, 1)) == JAN_1_2024


def test_parse_date_formats():
    """Test parsing of the supported instant representations."""
    expected = pd.Timestamp("2024-01-15", tz="UTC")

    assert parse_date("2024-01-15") == expected
    assert parse_date("2024/01/15") == expected
    assert parse_date("15/01/2024") == expected
    assert parse_date("15.01.2024") == expected
    assert parse_date(datetime(2024, 1, 15)) == expected
    assert parse_date(date(2024, 1, 15)) == expected
    assert parse_date(pd.Timestamp("2024-01-15")) == expected
    assert parse_date(JAN_1_2024) == pd.Timestamp("2024-01-01", tz="UTC")


def test_parse_date_keeps_offsets():
    """Test that offset-aware strings are converted to UTC."""
    assert parse_date("2024-01-15T02:00:00+02:00") == pd.Timestamp("2024-01-15", tz="UTC")


def test_parse_date_invalid():
    """Test error handling for invalid instants."""
    with pytest.raises(DateParseError):
        parse_date(None)

    with pytest.raises(DateParseError):
        parse_date("")

    with pytest.raises(DateParseError):
        parse_date("not a date")

    with pytest.raises(DateParseError):
        parse_date(True)

    with pytest.raises(DateParseError):
        parse_date(float("nan"))


def test_to_instant():
    assert to_instant(JAN_1_2024) == JAN_1_2024
    assert to_instant(str(JAN_1_2024)) == JAN_1_2024
    assert to_instant("2024-01-01") == JAN_1_2024
    assert to_instant(float(JAN_1_2024)) == JAN_1_2024


def test_format_date_for_display(at):
    assert format_date_for_display(at(2024, 2, 29)) == "2024-02-29"


def test_add_days(at):
    assert add_days(at(2024, 1, 1), 30) == at(2024, 1, 31)
    assert add_days(at(2024, 1, 1), -1) == at(2023, 12, 31)
    assert add_days(0, 1) == MS_PER_DAY


def test_add_months_clamps_to_month_end(at):
    """Test month arithmetic on days missing from the target month."""
    assert add_months(at(2024, 1, 31), 1) == at(2024, 2, 29)
    assert add_months(at(2023, 1, 31), 1) == at(2023, 2, 28)
    assert add_months(at(2024, 1, 15), 12) == at(2025, 1, 15)
    assert add_months(at(2024, 3, 31), -1) == at(2024, 2, 29)


def test_add_months_keeps_time_of_day(at):
    noon = at(2024, 1, 31) + 12 * 60 * 60 * 1000
    assert add_months(noon, 1) == at(2024, 2, 29) + 12 * 60 * 60 * 1000


def test_set_day_of_month(at):
    assert set_day_of_month(at(2024, 2, 10), 15) == at(2024, 2, 15)
    assert set_day_of_month(at(2024, 2, 10), 31) == at(2024, 2, 29)
    assert set_day_of_month(at(2024, 4, 10), 31) == at(2024, 4, 30)


def test_get_first_payment_date(at):
    """Test that the first payment never falls before the start date."""
    assert get_first_payment_date(at(2024, 1, 1), 1) == at(2024, 1, 1)
    assert get_first_payment_date(at(2024, 1, 10), 15) == at(2024, 1, 15)
    assert get_first_payment_date(at(2024, 1, 15), 10) == at(2024, 2, 10)


def test_get_payment_date_steps_from_first(at):
    """Test that each due date is the first payment date plus whole months."""
    first = at(2024, 1, 31)
    assert get_payment_date(first, 0) == first
    assert get_payment_date(first, 1) == at(2024, 2, 29)
    assert get_payment_date(first, 2) == at(2024, 3, 31)
    assert get_payment_date(first, 3) == at(2024, 4, 30)


def test_get_payment_date_after_clamped_first(at):
    """Test that a first payment clamped to Feb 29 keeps the 29th afterwards."""
    first = get_first_payment_date(at(2024, 2, 10), 30)
    assert first == at(2024, 2, 29)
    assert get_payment_date(first, 1) == at(2024, 3, 29)
    assert get_payment_date(first, 2) == at(2024, 4, 29)


def test_count_payment_months(at):
    assert count_payment_months(at(2024, 1, 1), at(2024, 7, 1)) == 6
    assert count_payment_months(at(2024, 1, 1), at(2024, 7, 2)) == 7
    assert count_payment_months(at(2024, 1, 1), at(2025, 1, 1)) == 12
    assert count_payment_months(at(2024, 1, 15), at(2024, 4, 10), 10) == 2
    # Feb 29, Mar 29 falls short of Mar 30, Apr 29 reaches it
    assert count_payment_months(at(2024, 2, 10), at(2024, 3, 30), 30) == 2


def test_count_payment_months_short_range(at):
    """Test that a range shorter than a month still yields one payment."""
    assert count_payment_months(at(2024, 1, 1), at(2024, 1, 20)) == 1
    # first payment date already past the end
    assert count_payment_months(at(2024, 1, 15), at(2024, 1, 20), 10) == 1


def test_count_payment_months_empty_range(at):
    assert count_payment_months(at(2024, 7, 1), at(2024, 1, 1)) == 0
    assert count_payment_months(at(2024, 1, 1), at(2024, 1, 1)) == 0


def test_validate_date_range(at):
    """Test date range validation."""
    assert validate_date_range(at(2024, 1, 1), at(2024, 12, 31)) is True
    assert validate_date_range(at(2024, 1, 1), at(2024, 1, 1)) is True

    with pytest.raises(ScheduleValidationError, match="end date must be after start date"):
        validate_date_range(at(2024, 1, 1), at(2024, 1, 1), allow_equal=False)

    with pytest.raises(ScheduleValidationError):
        validate_date_range(at(2024, 12, 31), at(2024, 1, 1))
