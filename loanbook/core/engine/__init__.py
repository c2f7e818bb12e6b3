"""
LoanBook Core Engine Package.

This package contains the stateless calculation engines.

Modules:
    loan_calculator: Payment schedules, interest/payback conversion, loan summaries
    friend_loan_tracker: Paybacks and settlement for money lent to friends
"""

from loanbook.core.engine.loan_calculator import LoanCalculator, LoanSummary, loan_calculator
from loanbook.core.engine.friend_loan_tracker import FriendLoanTracker, friend_loan_tracker

__all__ = [
    "LoanCalculator",
    "LoanSummary",
    "loan_calculator",
    "FriendLoanTracker",
    "friend_loan_tracker",
]
