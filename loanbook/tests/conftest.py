"""
Shared fixtures for LoanBook tests.
"""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from loanbook.core.engine import loan_calculator
from loanbook.core.models import FriendLoan, FriendLoanPayment, Loan
from loanbook.utils.date_utils import to_epoch_ms


def instant(year, month, day):
    """Midnight UTC of a calendar date as epoch milliseconds."""
    return to_epoch_ms(datetime(year, month, day, tzinfo=timezone.utc))


@pytest.fixture
def at():
    return instant


@pytest.fixture
def half_year_loan():
    """1,000,000 at 12% over the first half of 2024, paid on the 1st."""
    return Loan(
        id="loan-1",
        name="Car loan",
        principal_amount=1_000_000,
        total_payback=1_060_000,
        start_date=instant(2024, 1, 1),
        end_date=instant(2024, 7, 1),
        interest_rate=12.0,
        currency="ISK",
    )


@pytest.fixture
def scheduled_loan(half_year_loan):
    """The half-year loan with its generated schedule."""
    return half_year_loan.with_payments(loan_calculator.calculate_loan_schedule(half_year_loan))


@pytest.fixture
def friend_loan():
    return FriendLoan(
        id="friend-1",
        friend_name="Alex",
        amount=100.0,
        loan_date=instant(2024, 1, 1),
        currency="EUR",
        card_id="card-1",
    )


@pytest.fixture
def split_friend_loan(friend_loan):
    """Friend loan expected back in two halves."""
    payments = (
        FriendLoanPayment(id="payback-0", amount=50.0, due_date=instant(2024, 2, 1)),
        FriendLoanPayment(id="payback-1", amount=50.0, due_date=instant(2024, 3, 1)),
    )
    return replace(friend_loan, payments=payments)
