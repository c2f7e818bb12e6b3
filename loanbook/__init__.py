"""
LoanBook - Loan repayment engine for a personal finance tracker

Stateless calculations over loan records:
- Monthly payment schedules anchored to a day of month
- Simple-interest conversion between annual rate and total payback
- Remaining balance, next/overdue/upcoming payments and progress
- Friend loan paybacks and settlement
"""

__version__ = "1.0.0"
__author__ = "LoanBook Contributors"
