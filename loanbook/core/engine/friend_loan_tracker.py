"""
Friend loan tracker for LoanBook.

Tracks money lent to friends: the default payback expectation, settlement
once everything has come back, and the dashboard aggregates. Stateless, like
the loan calculator.

Classes:
    FriendLoanTracker: Calculation engine for friend loans

Module attributes:
    friend_loan_tracker: Shared tracker instance
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from loanbook.core.constants import (
    DEFAULT_UPCOMING_DAYS,
    FRIEND_LOAN_DEFAULT_TERM_DAYS,
    PAYBACK_ID_PREFIX,
    SETTLEMENT_TOLERANCE,
    EFriendLoanStatus,
    EPaymentStatus,
)
from loanbook.core.models.friend_loan import FriendLoan, FriendLoanPayment
from loanbook.utils.date_utils import add_days, now_ms

logger = logging.getLogger(__name__)


class FriendLoanTracker:
    """Stateless engine for friend loans and their paybacks."""

    def create_default_payment(self, friend_loan: FriendLoan, now: Optional[int] = None) -> FriendLoan:
        """
        Copy of the friend loan expecting the full amount back in 30 days.

        Loans that already carry paybacks are returned unchanged.
        """
        if friend_loan.payments:
            return friend_loan

        today = now_ms() if now is None else now
        payment = FriendLoanPayment(
            id=f"{PAYBACK_ID_PREFIX}-0",
            amount=friend_loan.amount,
            due_date=add_days(today, FRIEND_LOAN_DEFAULT_TERM_DAYS),
            status=EPaymentStatus.pending,
        )
        return replace(friend_loan, payments=(payment,))

    def mark_payment_as_paid(
        self,
        friend_loan: FriendLoan,
        payment_id: str,
        payback_card_id: Optional[str] = None,
        paid_date: Optional[int] = None,
    ) -> FriendLoan:
        """
        Copy of the friend loan with one payback received.

        The loan becomes settled when every payback is paid and together they
        match the lent amount.
        """
        paid_at = now_ms() if paid_date is None else paid_date

        updated_payments = []
        for payment in friend_loan.payments:
            if payment.id == payment_id:
                payment = replace(
                    payment,
                    status=EPaymentStatus.paid,
                    paid_date=paid_at,
                    payback_card_id=payback_card_id or payment.payback_card_id,
                )
            updated_payments.append(payment)

        status = friend_loan.status
        all_paid = bool(updated_payments) and all(p.status == EPaymentStatus.paid for p in updated_payments)
        paid_amount = sum(p.amount for p in updated_payments if p.status == EPaymentStatus.paid)
        if all_paid and abs(paid_amount - friend_loan.amount) < SETTLEMENT_TOLERANCE:
            status = EFriendLoanStatus.settled
            logger.debug(f"Friend loan {friend_loan.id} settled")

        return replace(friend_loan, payments=tuple(updated_payments), status=status)

    def get_remaining_amount(self, friend_loan: FriendLoan) -> float:
        """Lent amount not yet paid back."""
        paid_amount = sum(p.amount for p in friend_loan.payments if p.status == EPaymentStatus.paid)
        return friend_loan.amount - paid_amount

    def get_total_lent_amount(self, friend_loans: Iterable[FriendLoan]) -> float:
        """Sum lent across active friend loans."""
        return sum(loan.amount for loan in friend_loans if loan.status == EFriendLoanStatus.active)

    def get_upcoming_paybacks(
        self,
        friend_loans: Iterable[FriendLoan],
        days_ahead: int = DEFAULT_UPCOMING_DAYS,
        now: Optional[int] = None,
    ) -> List[FriendLoanPayment]:
        """Pending paybacks of active loans due within ``days_ahead`` (inclusive), earliest first."""
        today = now_ms() if now is None else now
        future_date = add_days(today, days_ahead)

        upcoming = [
            payment
            for loan in friend_loans
            if loan.status == EFriendLoanStatus.active
            for payment in loan.payments
            if payment.status == EPaymentStatus.pending and today <= payment.due_date <= future_date
        ]
        return sorted(upcoming, key=lambda payment: payment.due_date)


friend_loan_tracker = FriendLoanTracker()
