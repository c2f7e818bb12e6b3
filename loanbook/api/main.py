"""
FastAPI application for LoanBook.

Provides REST API endpoints for:
- Loan payment schedules and periodic payments
- Interest rate <-> total payback conversion
- Loan summaries and status updates
- Friend loan paybacks
"""

import logging
import traceback
from typing import Dict, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from loanbook import __version__
from loanbook.api.routes import loans, friend_loans
from loanbook.settings import get_settings
from loanbook.utils.error_utils import LoanBookError, configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.log_file)

logger = logging.getLogger("loanbook")


# Create FastAPI application
app = FastAPI(
    title="LoanBook API",
    description="Loan repayment engine - schedules, interest conversion and repayment summaries",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LoanBookError)
async def loanbook_exception_handler(request: Request, exc: LoanBookError):
    """Handle engine errors that escaped a route."""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=422,
        content={
            "error": "Invalid loan data",
            "detail": exc.message,
            "type": type(exc).__name__,
        },
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        },
    )


# Health check endpoint
@app.get("/health")
async def health_check() -> Dict[str, str]:
    """API health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "service": "loanbook-api",
    }


# Include routers
app.include_router(loans.router, prefix="/api/loans", tags=["Loans"])
app.include_router(friend_loans.router, prefix="/api/friend-loans", tags=["Friend Loans"])


# Root endpoint
@app.get("/")
async def root() -> Dict[str, Any]:
    """API root endpoint with service information."""
    return {
        "service": "LoanBook API",
        "version": __version__,
        "docs": "/api/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "loanbook.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
