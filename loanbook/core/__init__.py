"""
Core modules for LoanBook.

This package contains the core domain models, constants, and the loan
calculation engines.
"""

from loanbook.core.constants import (
    EPaymentStatus,
    ELoanStatus,
    EFriendLoanStatus,
    DEFAULT_PAYMENT_DAY,
    DEFAULT_UPCOMING_DAYS,
    SETTLEMENT_TOLERANCE,
)

__all__ = [
    "EPaymentStatus",
    "ELoanStatus",
    "EFriendLoanStatus",
    "DEFAULT_PAYMENT_DAY",
    "DEFAULT_UPCOMING_DAYS",
    "SETTLEMENT_TOLERANCE",
]
