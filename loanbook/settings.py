"""
Application settings for LoanBook.

Values come from environment variables, optionally loaded from a .env file.
"""

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

from loanbook.core.constants import DEFAULT_UPCOMING_DAYS

# Load environment variables from .env file
load_dotenv()

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:4173,http://localhost:5173"


class AppSettings:
    """Settings from environment variables."""

    def __init__(self):
        self.log_level = os.getenv("LOANBOOK_LOG_LEVEL", "INFO")
        self.log_file = os.getenv("LOANBOOK_LOG_FILE") or None
        self.cors_origins: List[str] = [
            o.strip() for o in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if o.strip()
        ]
        self.upcoming_days = int(os.getenv("LOANBOOK_UPCOMING_DAYS", str(DEFAULT_UPCOMING_DAYS)))
        if self.upcoming_days < 0:
            raise ValueError(f"LOANBOOK_UPCOMING_DAYS must not be negative, got {self.upcoming_days}")


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Cached settings instance."""
    return AppSettings()
