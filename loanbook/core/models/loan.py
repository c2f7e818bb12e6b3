"""
Loan models for LoanBook.

Immutable value records consumed and produced by the loan calculator. The
persistence layer stores them as camelCase dictionaries with integer
epoch-millisecond instants; ``to_dict``/``from_dict`` convert between the two.

Classes:
    LoanPayment: One scheduled payment of a loan
    Loan: Bank loan with its payment schedule
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from loanbook.core.constants import EPaymentStatus, ELoanStatus


@dataclass(frozen=True)
class LoanPayment:
    """
    A single scheduled loan payment.

    Attributes:
        id: Opaque identifier, unique within the loan
        amount: Payment amount in the loan's currency
        due_date: Due instant (epoch ms, UTC)
        status: pending, paid or overdue
        paid_date: Instant the payment was made, only set once paid
        payment_card_id: Card that funded the payment
    """

    id: str
    amount: float
    due_date: int
    status: str = EPaymentStatus.pending
    paid_date: Optional[int] = None
    payment_card_id: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == EPaymentStatus.paid

    @property
    def is_pending(self) -> bool:
        return self.status == EPaymentStatus.pending

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "amount": self.amount,
            "dueDate": self.due_date,
            "status": self.status,
        }
        if self.paid_date is not None:
            data["paidDate"] = self.paid_date
        if self.payment_card_id is not None:
            data["paymentCardId"] = self.payment_card_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoanPayment":
        return cls(
            id=str(data["id"]),
            amount=float(data["amount"]),
            due_date=int(data["dueDate"]),
            status=data.get("status", EPaymentStatus.pending),
            paid_date=int(data["paidDate"]) if data.get("paidDate") is not None else None,
            payment_card_id=data.get("paymentCardId"),
        )


@dataclass(frozen=True)
class Loan:
    """
    Loan with a monthly repayment schedule.

    ``status`` is a projection of the payments and is recomputed by the
    calculator; the remaining balance is always derived from ``payments``.

    Attributes:
        principal_amount: Amount borrowed
        total_payback: Amount to repay, principal plus simple interest
        start_date: Loan start (epoch ms)
        end_date: End of the repayment window (epoch ms)
        id: Loan identifier assigned by the caller
        name: Display name
        interest_rate: Annual percentage rate (simple interest)
        payment_day: Day of month payments fall due (1-31), defaults to 1
        payments: Ordered payment schedule
        status: active, completed or defaulted
        currency: Currency code, never used in calculations
        wage_fee: One-off fee paid to the lender
        wage_fee_paid: Whether the wage fee has been paid
        wage_fee_payment_card_id: Card used to pay the wage fee
        created_at: Creation instant (epoch ms)
    """

    principal_amount: float
    total_payback: float
    start_date: int
    end_date: int
    id: str = ""
    name: str = ""
    interest_rate: float = 0.0
    payment_day: Optional[int] = None
    payments: Tuple[LoanPayment, ...] = field(default_factory=tuple)
    status: str = ELoanStatus.active
    currency: str = ""
    wage_fee: float = 0.0
    wage_fee_paid: bool = False
    wage_fee_payment_card_id: Optional[str] = None
    created_at: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.payments, tuple):
            object.__setattr__(self, "payments", tuple(self.payments))

    def with_payments(self, payments) -> "Loan":
        """Copy of this loan with a different payment schedule."""
        return replace(self, payments=tuple(payments))

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the loan to the persistence layer's record format.

        Returns:
            camelCase dictionary with epoch-ms instants
        """
        data = {
            "id": self.id,
            "name": self.name,
            "principalAmount": self.principal_amount,
            "totalPayback": self.total_payback,
            "wageFee": self.wage_fee,
            "wageFeePaid": self.wage_fee_paid,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "interestRate": self.interest_rate,
            "payments": [payment.to_dict() for payment in self.payments],
            "status": self.status,
            "currency": self.currency,
        }
        if self.payment_day is not None:
            data["paymentDay"] = self.payment_day
        if self.wage_fee_payment_card_id is not None:
            data["wageFeePaymentCardId"] = self.wage_fee_payment_card_id
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Loan":
        """
        Deserialize a loan record.

        Args:
            data: camelCase dictionary as written by ``to_dict``

        Returns:
            Loan instance
        """
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            principal_amount=float(data["principalAmount"]),
            total_payback=float(data["totalPayback"]),
            start_date=int(data["startDate"]),
            end_date=int(data["endDate"]),
            interest_rate=float(data.get("interestRate", 0.0)),
            payment_day=data.get("paymentDay"),
            payments=tuple(LoanPayment.from_dict(p) for p in data.get("payments", [])),
            status=data.get("status", ELoanStatus.active),
            currency=data.get("currency", ""),
            wage_fee=float(data.get("wageFee", 0.0)),
            wage_fee_paid=bool(data.get("wageFeePaid", False)),
            wage_fee_payment_card_id=data.get("wageFeePaymentCardId"),
            created_at=data.get("createdAt"),
        )
