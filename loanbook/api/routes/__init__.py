"""
API route modules.

Contains FastAPI routers for different resource types.
"""

from loanbook.api.routes import loans, friend_loans

__all__ = ["loans", "friend_loans"]
