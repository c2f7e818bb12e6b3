"""
LoanBook Core Models Package.

Immutable value records for bank loans, friend loans and their payments.

Modules:
    loan: Loan, LoanPayment
    friend_loan: FriendLoan, FriendLoanPayment
"""

from loanbook.core.models.loan import (
    Loan,
    LoanPayment,
)

from loanbook.core.models.friend_loan import (
    FriendLoan,
    FriendLoanPayment,
)

__all__ = [
    "Loan",
    "LoanPayment",
    "FriendLoan",
    "FriendLoanPayment",
]
