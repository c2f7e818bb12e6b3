"""
Friend loan models for LoanBook.

Money lent to a friend and the paybacks expected from them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from loanbook.core.constants import EPaymentStatus, EFriendLoanStatus


@dataclass(frozen=True)
class FriendLoanPayment:
    """A payback expected from, or received from, a friend."""

    id: str
    amount: float
    due_date: int
    status: str = EPaymentStatus.pending
    paid_date: Optional[int] = None
    payback_card_id: Optional[str] = None  # card the money came back to

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "amount": self.amount,
            "dueDate": self.due_date,
            "status": self.status,
        }
        if self.paid_date is not None:
            data["paidDate"] = self.paid_date
        if self.payback_card_id is not None:
            data["paybackCardId"] = self.payback_card_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FriendLoanPayment":
        return cls(
            id=str(data["id"]),
            amount=float(data["amount"]),
            due_date=int(data["dueDate"]),
            status=data.get("status", EPaymentStatus.pending),
            paid_date=int(data["paidDate"]) if data.get("paidDate") is not None else None,
            payback_card_id=data.get("paybackCardId"),
        )


@dataclass(frozen=True)
class FriendLoan:
    """
    Money lent to a friend.

    Attributes:
        friend_name: Who borrowed the money
        amount: Amount lent
        loan_date: When the money was lent (epoch ms)
        id: Identifier assigned by the caller
        currency: Currency code
        card_id: Card the money was lent from
        description: Free-text note
        payments: Expected paybacks
        status: active, completed, settled or defaulted
        created_at: Creation instant (epoch ms)
    """

    friend_name: str
    amount: float
    loan_date: int
    id: str = ""
    currency: str = ""
    card_id: str = ""
    description: Optional[str] = None
    payments: Tuple[FriendLoanPayment, ...] = field(default_factory=tuple)
    status: str = EFriendLoanStatus.active
    created_at: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.payments, tuple):
            object.__setattr__(self, "payments", tuple(self.payments))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "friendName": self.friend_name,
            "amount": self.amount,
            "currency": self.currency,
            "cardId": self.card_id,
            "loanDate": self.loan_date,
            "payments": [payment.to_dict() for payment in self.payments],
            "status": self.status,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FriendLoan":
        return cls(
            id=str(data.get("id", "")),
            friend_name=data["friendName"],
            amount=float(data["amount"]),
            currency=data.get("currency", ""),
            card_id=data.get("cardId", ""),
            loan_date=int(data["loanDate"]),
            description=data.get("description"),
            payments=tuple(FriendLoanPayment.from_dict(p) for p in data.get("payments", [])),
            status=data.get("status", EFriendLoanStatus.active),
            created_at=data.get("createdAt"),
        )
