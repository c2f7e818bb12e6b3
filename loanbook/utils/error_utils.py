"""
Error handling utilities for LoanBook.

This module provides centralized error handling and logging setup for the
loan engine. It includes the exception hierarchy raised at the engine's
boundaries and a decorator for consistent error reporting.
"""

import os
import sys
import traceback
import logging
from functools import wraps
from datetime import datetime
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging for the application.

    Logs always go to stdout. A file handler is added only when ``log_file``
    is given and the process is not running serverless (read-only filesystem).

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        log_file: Optional path of a log file
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file and not os.getenv("VERCEL"):
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


class LoanBookError(Exception):
    """Base exception class for LoanBook errors"""

    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        self.timestamp = datetime.now()
        super().__init__(self.message)


class ScheduleValidationError(LoanBookError):
    """Raised when a payment schedule cannot be generated from the given loan terms"""


class DateParseError(LoanBookError):
    """Raised when an instant cannot be parsed"""


def error_handler(func):
    """Decorator that logs failures and wraps foreign exceptions in LoanBookError"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LoanBookError as e:
            logger.warning(f"{func.__name__} rejected input: {e.message}")
            raise
        except Exception as e:
            exc_type, exc_value, exc_tb = sys.exc_info()
            tb = traceback.extract_tb(exc_tb)

            error_location = f"{tb[-1].filename}:{tb[-1].lineno}"
            error_function = tb[-1].name

            error_details = {
                "error_type": exc_type.__name__,
                "location": error_location,
                "function": error_function,
                "arguments": {"args": str(args), "kwargs": str(kwargs)},
                "traceback": traceback.format_exc(),
            }

            logger.error(f"Error in {error_location} - {error_function}: {str(e)}")
            logger.debug(f"Detailed error information: {error_details}")

            raise LoanBookError(
                f"Error in {error_function} at {error_location}: {str(e)}",
                error_details,
            ) from e

    return wrapper
