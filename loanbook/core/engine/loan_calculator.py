"""
Loan calculator for LoanBook.

All date and amount arithmetic for loan repayment: payment schedules anchored
to a day of month, simple-interest conversion between an annual rate and the
total payback, and summaries derived from the payment list.

The calculator is stateless. Every method takes value records and returns new
values; inputs are never mutated. Numeric edge cases (non-positive principal
or duration, non-finite results) map to safe defaults instead of raising, so
callers can re-run conversions on every keystroke. The only rejection is a
schedule that would contain no payments.

Classes:
    LoanSummary: Aggregate view of a loan's repayment state
    LoanCalculator: The calculation engine

Module attributes:
    loan_calculator: Shared calculator instance
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from loanbook.core.constants import (
    DEFAULT_PAYMENT_DAY,
    DEFAULT_UPCOMING_DAYS,
    MAX_PAYMENT_DAY,
    MIN_PAYMENT_DAY,
    PAYMENT_ID_PREFIX,
    ELoanStatus,
    EPaymentStatus,
)
from loanbook.core.models.loan import Loan, LoanPayment
from loanbook.utils.date_utils import (
    add_days,
    add_months,
    count_payment_months,
    format_date_for_display,
    get_first_payment_date,
    get_payment_date,
    now_ms,
    set_day_of_month,
    validate_date_range,
)
from loanbook.utils.error_utils import ScheduleValidationError, error_handler
from loanbook.utils.rate_utils import (
    annualized_rate_pct,
    is_finite_number,
    round_half_up,
    simple_interest,
)

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = [
    "id",
    "due_date",
    "amount",
    "status",
    "effective_status",
    "paid_date",
    "cumulative_paid",
    "remaining_balance",
]


@dataclass(frozen=True)
class LoanSummary:
    """Repayment state of a loan at a point in time."""

    remaining_balance: float
    next_payment: Optional[LoanPayment]
    overdue_payments: List[LoanPayment] = field(default_factory=list)
    upcoming_payments: List[LoanPayment] = field(default_factory=list)
    total_paid: float = 0.0
    progress_percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remainingBalance": self.remaining_balance,
            "nextPayment": self.next_payment.to_dict() if self.next_payment else None,
            "overduePayments": [p.to_dict() for p in self.overdue_payments],
            "upcomingPayments": [p.to_dict() for p in self.upcoming_payments],
            "totalPaid": self.total_paid,
            "progressPercentage": self.progress_percentage,
        }


class LoanCalculator:
    """
    Stateless loan repayment engine.

    Interest is simple: it accrues linearly on the principal only, so the
    rate -> payback and payback -> rate conversions invert each other for a
    fixed number of months.
    """

    # ------------------------------------------------------------------
    # Schedules
    # ------------------------------------------------------------------

    @error_handler
    def calculate_loan_schedule(self, loan: Loan) -> List[LoanPayment]:
        """
        Generate the monthly payment schedule for a loan.

        The first payment falls on ``payment_day`` of the start month, or of
        the next month when that day is already behind the start date. One
        payment follows per calendar month until the end date is reached.
        Amounts are the equal share rounded to whole units; the last payment
        takes whatever is left so the schedule sums to ``total_payback``.

        Args:
            loan: Loan terms; its ``id`` and ``payments`` are ignored

        Returns:
            Pending payments in due-date order

        Raises:
            ScheduleValidationError: If the end date is not after the start
                date or the payment day is not a day of month
        """
        payment_day = loan.payment_day or DEFAULT_PAYMENT_DAY
        self._validate_payment_day(payment_day)
        validate_date_range(loan.start_date, loan.end_date, allow_equal=False)

        total_payments = count_payment_months(loan.start_date, loan.end_date, payment_day)
        if total_payments < 1:
            raise ScheduleValidationError(
                "end date must be after start date",
                {"total_payments": total_payments},
            )

        first_payment_date = get_first_payment_date(loan.start_date, payment_day)
        amounts = self._allocate_installments(loan.total_payback, total_payments)

        payments = [
            LoanPayment(
                id=f"{PAYMENT_ID_PREFIX}-{i}",
                amount=amount,
                due_date=get_payment_date(first_payment_date, i),
                status=EPaymentStatus.pending,
            )
            for i, amount in enumerate(amounts)
        ]

        logger.debug(
            f"Generated {total_payments} payments from {format_date_for_display(first_payment_date)} "
            f"totalling {loan.total_payback}"
        )
        return payments

    @error_handler
    def generate_periodic_payments(self, loan: Loan, day_of_month: int, number_of_months: int) -> List[LoanPayment]:
        """
        Generate a fixed number of monthly payments on a chosen day.

        Unlike ``calculate_loan_schedule`` the first payment stays in the start
        month even if the day is already behind the start date.

        Args:
            loan: Loan whose ``total_payback`` is split
            day_of_month: Due day (1-31), clamped to each month's last day
            number_of_months: How many payments to generate

        Returns:
            Pending payments in due-date order

        Raises:
            ScheduleValidationError: If the day or the count is invalid
        """
        self._validate_payment_day(day_of_month)
        if isinstance(number_of_months, bool) or not isinstance(number_of_months, int) or number_of_months < 1:
            raise ScheduleValidationError(
                "number of months must be at least 1",
                {"number_of_months": number_of_months},
            )

        anchor = set_day_of_month(loan.start_date, day_of_month)
        amounts = self._allocate_installments(loan.total_payback, number_of_months)

        return [
            LoanPayment(
                id=f"{PAYMENT_ID_PREFIX}-{i}",
                amount=amount,
                due_date=set_day_of_month(add_months(anchor, i), day_of_month),
                status=EPaymentStatus.pending,
            )
            for i, amount in enumerate(amounts)
        ]

    def _allocate_installments(self, total: float, count: int) -> List[float]:
        """Split ``total`` into ``count`` rounded shares, the last absorbing the drift."""
        share = total / count
        amounts = []
        allocated = 0.0
        for i in range(count):
            if i == count - 1:
                amount = total - allocated
            else:
                amount = round_half_up(share)
            amounts.append(amount)
            allocated += amount
        return amounts

    def _validate_payment_day(self, payment_day) -> None:
        if (
            isinstance(payment_day, bool)
            or not isinstance(payment_day, int)
            or not MIN_PAYMENT_DAY <= payment_day <= MAX_PAYMENT_DAY
        ):
            raise ScheduleValidationError(
                f"payment day must be between {MIN_PAYMENT_DAY} and {MAX_PAYMENT_DAY}",
                {"payment_day": payment_day},
            )

    # ------------------------------------------------------------------
    # Interest <-> payback
    # ------------------------------------------------------------------

    def calculate_total_payback(self, principal_amount: float, annual_interest_rate: float, months: int) -> float:
        """
        Total payback under simple interest.

        ``principal + principal * (rate / 100 / 12) * months``, rounded to 2
        decimals. Returns the principal unchanged when the principal, the
        duration or the rate is not positive, or when the result is not finite.
        A NaN principal gives 0.

        Examples:
            >>> loan_calculator.calculate_total_payback(1_000_000, 12, 6)
            1060000.0
            >>> loan_calculator.calculate_total_payback(100, 50, -1)
            100
        """
        if isinstance(principal_amount, float) and math.isnan(principal_amount):
            return 0.0
        if not is_finite_number(principal_amount):
            return principal_amount
        if principal_amount <= 0 or not is_finite_number(months) or months <= 0:
            return principal_amount
        if not is_finite_number(annual_interest_rate) or annual_interest_rate <= 0:
            return principal_amount

        total_payback = principal_amount + simple_interest(principal_amount, annual_interest_rate, months)
        if not is_finite_number(total_payback):
            return principal_amount

        return round_half_up(total_payback, 2)

    def calculate_interest(self, principal_amount: float, total_payback: float, months: int) -> float:
        """
        Annual simple-interest rate implied by a total payback.

        ``((total - principal) / principal) * (12 / months) * 100``, rounded
        to 2 decimals. Returns 0 for a non-positive principal or duration, for
        zero or negative interest and for non-finite results.
        """
        if not is_finite_number(principal_amount) or principal_amount <= 0:
            return 0.0
        if not is_finite_number(months) or months <= 0:
            return 0.0
        if not is_finite_number(total_payback):
            return 0.0

        total_interest = total_payback - principal_amount
        if total_interest <= 0:
            return 0.0

        annual_rate = annualized_rate_pct(principal_amount, total_interest, months)
        if not is_finite_number(annual_rate):
            return 0.0

        return round_half_up(annual_rate, 2)

    def calculate_from_interest_rate(
        self, principal_amount: float, annual_interest_rate: float, start_date: int, end_date: int
    ) -> float:
        """Total payback for a rate over the months between two instants."""
        months = self.get_loan_months(start_date, end_date)
        return self.calculate_total_payback(principal_amount, annual_interest_rate, months)

    def calculate_from_total_payback(
        self, principal_amount: float, total_payback: float, start_date: int, end_date: int
    ) -> float:
        """Annual rate for a total payback over the months between two instants."""
        months = self.get_loan_months(start_date, end_date)
        return self.calculate_interest(principal_amount, total_payback, months)

    def get_loan_months(self, start_date: int, end_date: int) -> int:
        """
        Number of monthly payments between two instants, counted from day 1.

        Returns 0 for an empty, inverted or unrepresentable range.
        """
        try:
            return count_payment_months(start_date, end_date, DEFAULT_PAYMENT_DAY)
        except (OverflowError, ValueError, TypeError) as e:
            logger.warning(f"Cannot count months between {start_date} and {end_date}: {e}")
            return 0

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------

    def get_remaining_balance(self, loan: Loan) -> float:
        """Total payback minus everything marked paid. Negative when overpaid."""
        total_paid = sum(payment.amount for payment in loan.payments if payment.is_paid)
        return loan.total_payback - total_paid

    def get_next_payment(self, loan: Loan) -> Optional[LoanPayment]:
        """Pending payment with the earliest due date, or None."""
        pending = sorted(
            (payment for payment in loan.payments if payment.is_pending),
            key=lambda payment: payment.due_date,
        )
        return pending[0] if pending else None

    def get_overdue_payments(self, loan: Loan, now: Optional[int] = None) -> List[LoanPayment]:
        """Pending payments due strictly before ``now``."""
        today = now_ms() if now is None else now
        return [payment for payment in loan.payments if payment.is_pending and payment.due_date < today]

    def get_upcoming_payments(
        self, loan: Loan, days_ahead: int = DEFAULT_UPCOMING_DAYS, now: Optional[int] = None
    ) -> List[LoanPayment]:
        """Pending payments due strictly between ``now`` and ``now + days_ahead``."""
        today = now_ms() if now is None else now
        future_date = add_days(today, days_ahead)
        return [
            payment
            for payment in loan.payments
            if payment.is_pending and today < payment.due_date < future_date
        ]

    def get_effective_status(self, payment: LoanPayment, now: Optional[int] = None) -> str:
        """
        Status as read at ``now``.

        A pending payment past its due date reads as overdue. Stored statuses
        are never rewritten by the calculator.
        """
        today = now_ms() if now is None else now
        if payment.is_pending and payment.due_date < today:
            return EPaymentStatus.overdue
        return payment.status

    def mark_payment_as_paid(
        self,
        loan: Loan,
        payment_id: str,
        paid_date: Optional[int] = None,
        payment_card_id: Optional[str] = None,
    ) -> Loan:
        """
        Copy of the loan with one payment marked paid.

        Args:
            loan: Loan to update
            payment_id: Payment to mark; an unknown id leaves the copy unchanged
            paid_date: Instant of payment, defaults to now
            payment_card_id: Card that funded the payment, kept if not given

        Returns:
            New Loan; other payments are carried over untouched
        """
        paid_at = now_ms() if paid_date is None else paid_date

        updated_payments = []
        for payment in loan.payments:
            if payment.id == payment_id:
                payment = replace(
                    payment,
                    status=EPaymentStatus.paid,
                    paid_date=paid_at,
                    payment_card_id=payment_card_id or payment.payment_card_id,
                )
            updated_payments.append(payment)

        return loan.with_payments(updated_payments)

    def mark_wage_fee_paid(self, loan: Loan, payment_card_id: Optional[str] = None) -> Loan:
        """Copy of the loan with its wage fee recorded as paid."""
        return replace(
            loan,
            wage_fee_paid=True,
            wage_fee_payment_card_id=payment_card_id or loan.wage_fee_payment_card_id,
        )

    def update_loan_status(self, loan: Loan, now: Optional[int] = None) -> Loan:
        """
        Copy of the loan with its status recomputed.

        Completed when nothing remains, otherwise defaulted when any payment
        is overdue, otherwise active. Completion wins over default.
        """
        if self.get_remaining_balance(loan) <= 0:
            status = ELoanStatus.completed
        elif self.get_overdue_payments(loan, now=now):
            status = ELoanStatus.defaulted
        else:
            status = ELoanStatus.active

        return replace(loan, status=status)

    def get_loan_summary(
        self, loan: Loan, days_ahead: int = DEFAULT_UPCOMING_DAYS, now: Optional[int] = None
    ) -> LoanSummary:
        """
        Aggregate repayment state of a loan.

        ``progress_percentage`` is not clamped and exceeds 100 when more was
        paid than the schedule total. It is 0 when the total payback is 0.
        """
        today = now_ms() if now is None else now
        remaining_balance = self.get_remaining_balance(loan)
        total_paid = loan.total_payback - remaining_balance

        progress_percentage = 0.0
        if loan.total_payback:
            progress_percentage = (total_paid / loan.total_payback) * 100
            if not is_finite_number(progress_percentage):
                progress_percentage = 0.0

        return LoanSummary(
            remaining_balance=remaining_balance,
            next_payment=self.get_next_payment(loan),
            overdue_payments=self.get_overdue_payments(loan, now=today),
            upcoming_payments=self.get_upcoming_payments(loan, days_ahead=days_ahead, now=today),
            total_paid=total_paid,
            progress_percentage=progress_percentage,
        )

    def get_upcoming_payments_for_loans(
        self, loans: Iterable[Loan], days_ahead: int = DEFAULT_UPCOMING_DAYS, now: Optional[int] = None
    ) -> List[LoanPayment]:
        """Upcoming pending payments across all active loans, earliest first."""
        today = now_ms() if now is None else now
        upcoming = []
        for loan in loans:
            if loan.status != ELoanStatus.active:
                continue
            upcoming.extend(self.get_upcoming_payments(loan, days_ahead=days_ahead, now=today))
        return sorted(upcoming, key=lambda payment: payment.due_date)

    @error_handler
    def get_schedule_frame(self, loan: Loan, now: Optional[int] = None) -> pd.DataFrame:
        """
        Payment schedule as a DataFrame, ordered by due date.

        Returns:
            DataFrame with columns: id, due_date, amount, status,
            effective_status, paid_date, cumulative_paid, remaining_balance
        """
        if not loan.payments:
            return pd.DataFrame(columns=SCHEDULE_COLUMNS)

        today = now_ms() if now is None else now
        rows = [
            {
                "id": payment.id,
                "due_date": payment.due_date,
                "amount": payment.amount,
                "status": payment.status,
                "effective_status": self.get_effective_status(payment, now=today),
                "paid_date": payment.paid_date,
            }
            for payment in loan.payments
        ]

        df = pd.DataFrame(rows)
        df = df.sort_values("due_date", kind="mergesort").reset_index(drop=True)
        df["due_date"] = pd.to_datetime(df["due_date"], unit="ms", utc=True)
        df["paid_date"] = pd.to_datetime(df["paid_date"].astype("float64"), unit="ms", utc=True)

        paid_amounts = df["amount"].where(df["status"] == EPaymentStatus.paid, 0.0)
        df["cumulative_paid"] = paid_amounts.cumsum()
        df["remaining_balance"] = loan.total_payback - df["cumulative_paid"]

        return df[SCHEDULE_COLUMNS]


loan_calculator = LoanCalculator()
