"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Input validation for API requests
- camelCase wire format matching the client's stored records
- Conversion to and from the engine's value records
- OpenAPI documentation generation

Instants are epoch milliseconds on the wire; requests may also send
ISO / day-first date strings, which are converted on the way in.
"""

from dataclasses import asdict
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from loanbook.core.models import FriendLoan, FriendLoanPayment, Loan, LoanPayment
from loanbook.utils.date_utils import to_instant
from loanbook.utils.error_utils import LoanBookError
from loanbook.utils.rate_utils import normalize_rate_input


def _coerce_instant(value):
    if value is None:
        return value
    try:
        return to_instant(value)
    except LoanBookError as e:
        raise ValueError(e.message) from e


Instant = Annotated[int, BeforeValidator(_coerce_instant)]

# form input such as "5.5%"; unparseable text reads as 0
Rate = Annotated[float, BeforeValidator(normalize_rate_input)]


# ======================
# Enums
# ======================


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class LoanStatus(str, Enum):
    """Loan status enumeration."""

    ACTIVE = "active"
    COMPLETED = "completed"
    DEFAULTED = "defaulted"


class FriendLoanStatus(str, Enum):
    """Friend loan status enumeration."""

    ACTIVE = "active"
    COMPLETED = "completed"
    SETTLED = "settled"
    DEFAULTED = "defaulted"


# ======================
# Base Schemas
# ======================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
    )


# ======================
# Loan Schemas
# ======================


class LoanPaymentSchema(BaseSchema):
    """A scheduled loan payment."""

    id: str
    amount: float
    due_date: Instant
    status: PaymentStatus = PaymentStatus.PENDING
    paid_date: Optional[Instant] = None
    payment_card_id: Optional[str] = None

    def to_model(self) -> LoanPayment:
        return LoanPayment(**self.model_dump())


class LoanTermsSchema(BaseSchema):
    """Loan terms needed to generate a schedule."""

    principal_amount: float
    total_payback: float
    start_date: Instant
    end_date: Instant
    payment_day: Optional[int] = Field(None, ge=0, le=31, description="Day of month payments fall due, 0 for the 1st")
    interest_rate: Rate = Field(default=0.0, description="Annual percentage rate, simple interest")

    def to_model(self) -> Loan:
        return Loan(**self.model_dump())


class LoanSchema(LoanTermsSchema):
    """Full loan record including its payments."""

    id: str = ""
    name: str = ""
    payments: List[LoanPaymentSchema] = Field(default_factory=list)
    status: LoanStatus = LoanStatus.ACTIVE
    currency: str = ""
    wage_fee: float = 0.0
    wage_fee_paid: bool = False
    wage_fee_payment_card_id: Optional[str] = None
    created_at: Optional[Instant] = None

    def to_model(self) -> Loan:
        data = self.model_dump(exclude={"payments"})
        return Loan(**data, payments=tuple(payment.to_model() for payment in self.payments))

    @classmethod
    def from_model(cls, loan: Loan) -> "LoanSchema":
        return cls.model_validate(asdict(loan))


class PeriodicPaymentsRequest(BaseSchema):
    """Request to split a loan into a fixed number of monthly payments."""

    loan: LoanTermsSchema
    day_of_month: int = Field(..., ge=1, le=31)
    number_of_months: int = Field(..., ge=1)


class TotalPaybackRequest(BaseSchema):
    """Request to derive the total payback from an interest rate."""

    principal_amount: float
    interest_rate: Rate
    start_date: Instant
    end_date: Instant


class TotalPaybackResponse(BaseSchema):
    """Total payback with the number of months it was computed over."""

    total_payback: float
    months: int


class InterestRateRequest(BaseSchema):
    """Request to derive the interest rate from a total payback."""

    principal_amount: float
    total_payback: float
    start_date: Instant
    end_date: Instant


class InterestRateResponse(BaseSchema):
    """Annual interest rate with the number of months it was computed over."""

    interest_rate: float
    months: int


class LoanSummaryRequest(BaseSchema):
    """Request for a loan's repayment summary."""

    loan: LoanSchema
    days_ahead: Optional[int] = Field(None, ge=0, description="Upcoming window in days")
    now: Optional[Instant] = None


class LoanSummaryResponse(BaseSchema):
    """Repayment summary of a loan."""

    remaining_balance: float
    next_payment: Optional[LoanPaymentSchema] = None
    overdue_payments: List[LoanPaymentSchema] = Field(default_factory=list)
    upcoming_payments: List[LoanPaymentSchema] = Field(default_factory=list)
    total_paid: float
    progress_percentage: float


class MarkPaymentPaidRequest(BaseSchema):
    """Request to mark a loan payment as paid."""

    loan: LoanSchema
    payment_id: str
    paid_date: Optional[Instant] = None
    payment_card_id: Optional[str] = None


class LoanStatusRequest(BaseSchema):
    """Request to recompute a loan's status."""

    loan: LoanSchema
    now: Optional[Instant] = None


class WageFeeRequest(BaseSchema):
    """Request to record a loan's wage fee as paid."""

    loan: LoanSchema
    payment_card_id: Optional[str] = None


# ======================
# Friend Loan Schemas
# ======================


class FriendLoanPaymentSchema(BaseSchema):
    """A payback expected from a friend."""

    id: str
    amount: float
    due_date: Instant
    status: PaymentStatus = PaymentStatus.PENDING
    paid_date: Optional[Instant] = None
    payback_card_id: Optional[str] = None

    def to_model(self) -> FriendLoanPayment:
        return FriendLoanPayment(**self.model_dump())


class FriendLoanSchema(BaseSchema):
    """Money lent to a friend."""

    friend_name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    loan_date: Instant
    id: str = ""
    currency: str = ""
    card_id: str = ""
    description: Optional[str] = None
    payments: List[FriendLoanPaymentSchema] = Field(default_factory=list)
    status: FriendLoanStatus = FriendLoanStatus.ACTIVE
    created_at: Optional[Instant] = None

    def to_model(self) -> FriendLoan:
        data = self.model_dump(exclude={"payments"})
        return FriendLoan(**data, payments=tuple(payment.to_model() for payment in self.payments))

    @classmethod
    def from_model(cls, friend_loan: FriendLoan) -> "FriendLoanSchema":
        return cls.model_validate(asdict(friend_loan))


class FriendLoanMarkPaidRequest(BaseSchema):
    """Request to record a payback from a friend."""

    friend_loan: FriendLoanSchema
    payment_id: str
    payback_card_id: Optional[str] = None
    paid_date: Optional[Instant] = None


class UpcomingPaybacksRequest(BaseSchema):
    """Request for paybacks due soon across friend loans."""

    friend_loans: List[FriendLoanSchema]
    days_ahead: Optional[int] = Field(None, ge=0)
    now: Optional[Instant] = None


class TotalLentRequest(BaseSchema):
    """Request for the total currently lent to friends."""

    friend_loans: List[FriendLoanSchema]


class TotalLentResponse(BaseSchema):
    """Total currently lent to friends."""

    total_lent: float
