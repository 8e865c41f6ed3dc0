"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORTS_DIR = DATA_DIR / "exports"

# Database
DB_PATH = Path(
    os.getenv("FINTRACK_DB_PATH", DATA_DIR / "finance_tracker.db")
).resolve()

# Display and reporting defaults
DEFAULT_CURRENCY = os.getenv("FINTRACK_DEFAULT_CURRENCY", "USD").upper()
DEFAULT_THEME = "light"
TREND_WINDOW_MONTHS = int(os.getenv("FINTRACK_TREND_WINDOW_MONTHS", "6"))
TOP_EXPENSES_LIMIT = 5
RECENT_TRANSACTIONS_LIMIT = 5

LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def get_db_path() -> str:
    """Get the database path as a string."""
    return str(DB_PATH)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for entry points (Streamlit, scripts)."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
