"""
Friend loan API endpoints.

Settlement and dashboard aggregates for money lent to friends.
"""

from dataclasses import asdict
from typing import List

from fastapi import APIRouter

from loanbook.api.schemas import (
    FriendLoanMarkPaidRequest,
    FriendLoanPaymentSchema,
    FriendLoanSchema,
    TotalLentRequest,
    TotalLentResponse,
    UpcomingPaybacksRequest,
)
from loanbook.core.engine import friend_loan_tracker
from loanbook.settings import get_settings


router = APIRouter()


@router.post("/mark-paid", response_model=FriendLoanSchema)
def mark_payback_received(request: FriendLoanMarkPaidRequest):
    updated = friend_loan_tracker.mark_payment_as_paid(
        request.friend_loan.to_model(),
        request.payment_id,
        payback_card_id=request.payback_card_id,
        paid_date=request.paid_date,
    )
    return FriendLoanSchema.from_model(updated)


@router.post("/upcoming", response_model=List[FriendLoanPaymentSchema])
def get_upcoming_paybacks(request: UpcomingPaybacksRequest):
    days_ahead = request.days_ahead
    if days_ahead is None:
        days_ahead = get_settings().upcoming_days

    paybacks = friend_loan_tracker.get_upcoming_paybacks(
        [loan.to_model() for loan in request.friend_loans],
        days_ahead=days_ahead,
        now=request.now,
    )
    return [FriendLoanPaymentSchema.model_validate(asdict(payment)) for payment in paybacks]


@router.post("/total-lent", response_model=TotalLentResponse)
def get_total_lent(request: TotalLentRequest):
    total_lent = friend_loan_tracker.get_total_lent_amount(loan.to_model() for loan in request.friend_loans)
    return TotalLentResponse(total_lent=total_lent)
