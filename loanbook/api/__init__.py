"""
LoanBook HTTP API.

Stateless FastAPI service exposing the loan engine to the presentation layer.
"""
