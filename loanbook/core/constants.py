"""
Core constants and enumerations for LoanBook.

This module defines the status vocabularies and default parameters used
throughout the loan engine.
"""

# Schedule defaults
DEFAULT_PAYMENT_DAY = 1
MIN_PAYMENT_DAY = 1
MAX_PAYMENT_DAY = 31
DEFAULT_UPCOMING_DAYS = 30

# Friend loans
FRIEND_LOAN_DEFAULT_TERM_DAYS = 30
SETTLEMENT_TOLERANCE = 0.01

PAYMENT_ID_PREFIX = "payment"
PAYBACK_ID_PREFIX = "payback"


class EPaymentStatus:
    """Status of a single scheduled payment"""
    pending = "pending"
    paid = "paid"
    overdue = "overdue"


class ELoanStatus:
    """Loan status, derived from its payments"""
    active = "active"
    completed = "completed"
    defaulted = "defaulted"


class EFriendLoanStatus:
    """Status of money lent to a friend"""
    active = "active"
    completed = "completed"
    settled = "settled"
    defaulted = "defaulted"
