"""
Loan calculation API endpoints.

Stateless: every request carries the loan record it operates on and the
response carries the computed result. Nothing is stored server side.
"""

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, HTTPException, status

from loanbook.api.schemas import (
    InterestRateRequest,
    InterestRateResponse,
    LoanPaymentSchema,
    LoanSchema,
    LoanStatusRequest,
    LoanSummaryRequest,
    LoanSummaryResponse,
    LoanTermsSchema,
    MarkPaymentPaidRequest,
    PeriodicPaymentsRequest,
    TotalPaybackRequest,
    TotalPaybackResponse,
    WageFeeRequest,
)
from loanbook.core.engine import loan_calculator
from loanbook.settings import get_settings
from loanbook.utils.error_utils import ScheduleValidationError


router = APIRouter()


def _payments_response(payments) -> List[LoanPaymentSchema]:
    return [LoanPaymentSchema.model_validate(asdict(payment)) for payment in payments]


@router.post("/schedule", response_model=List[LoanPaymentSchema])
def calculate_schedule(loan: LoanTermsSchema):
    try:
        payments = loan_calculator.calculate_loan_schedule(loan.to_model())
    except ScheduleValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message,
        )
    return _payments_response(payments)


@router.post("/periodic-payments", response_model=List[LoanPaymentSchema])
def generate_periodic_payments(request: PeriodicPaymentsRequest):
    try:
        payments = loan_calculator.generate_periodic_payments(
            request.loan.to_model(),
            request.day_of_month,
            request.number_of_months,
        )
    except ScheduleValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message,
        )
    return _payments_response(payments)


@router.post("/total-payback", response_model=TotalPaybackResponse)
def calculate_total_payback(request: TotalPaybackRequest):
    total_payback = loan_calculator.calculate_from_interest_rate(
        request.principal_amount,
        request.interest_rate,
        request.start_date,
        request.end_date,
    )
    months = loan_calculator.get_loan_months(request.start_date, request.end_date)
    return TotalPaybackResponse(total_payback=total_payback, months=months)


@router.post("/interest-rate", response_model=InterestRateResponse)
def calculate_interest_rate(request: InterestRateRequest):
    interest_rate = loan_calculator.calculate_from_total_payback(
        request.principal_amount,
        request.total_payback,
        request.start_date,
        request.end_date,
    )
    months = loan_calculator.get_loan_months(request.start_date, request.end_date)
    return InterestRateResponse(interest_rate=interest_rate, months=months)


@router.post("/summary", response_model=LoanSummaryResponse)
def get_loan_summary(request: LoanSummaryRequest):
    days_ahead = request.days_ahead
    if days_ahead is None:
        days_ahead = get_settings().upcoming_days

    summary = loan_calculator.get_loan_summary(
        request.loan.to_model(),
        days_ahead=days_ahead,
        now=request.now,
    )
    return LoanSummaryResponse.model_validate(asdict(summary))


@router.post("/mark-paid", response_model=LoanSchema)
def mark_payment_paid(request: MarkPaymentPaidRequest):
    updated = loan_calculator.mark_payment_as_paid(
        request.loan.to_model(),
        request.payment_id,
        paid_date=request.paid_date,
        payment_card_id=request.payment_card_id,
    )
    return LoanSchema.from_model(updated)


@router.post("/status", response_model=LoanSchema)
def update_loan_status(request: LoanStatusRequest):
    updated = loan_calculator.update_loan_status(request.loan.to_model(), now=request.now)
    return LoanSchema.from_model(updated)


@router.post("/wage-fee", response_model=LoanSchema)
def pay_wage_fee(request: WageFeeRequest):
    loan = request.loan.to_model()
    if loan.wage_fee_paid:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Wage fee already paid",
        )

    updated = loan_calculator.mark_wage_fee_paid(loan, payment_card_id=request.payment_card_id)
    return LoanSchema.from_model(updated)
