# File: monthgrid/core/config_manager.py
"""
Centralized configuration management for monthgrid.
Loads settings from environment variables (and an optional .env file).
"""

import os
from pathlib import Path
from typing import List

import pytz
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ['1', 'true', 'yes', 'y', 'on']


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from monthgrid/core/
    LOGS_DIR = BASE_DIR / "logs"
    ENV_FILE = BASE_DIR / ".env"

    # Time handling
    TARGET_TIMEZONE = os.getenv("MONTHGRID_TIMEZONE", "UTC")
    SCHEDULE_MIN_DURATION_MINUTES = int(os.getenv("MONTHGRID_MIN_DURATION", "20"))
    DEFAULT_TIME_DURATION_MINUTES = 30

    # Layout
    ALLDAY_FIRST_MODE = _env_bool("MONTHGRID_ALLDAY_FIRST", False)
    DAYNAMES: List[str] = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']

    # Logging
    LOG_LEVEL = os.getenv("MONTHGRID_LOG_LEVEL", "INFO").upper()
    LOG_TO_FILE = _env_bool("MONTHGRID_LOG_TO_FILE", False)

    @classmethod
    def get_timezone(cls):
        """Return the pytz zone used for naive datetimes."""
        return pytz.timezone(cls.TARGET_TIMEZONE)

    @classmethod
    def validate(cls) -> bool:
        """Validate that all configuration values are usable."""
        errors = []

        if cls.TARGET_TIMEZONE not in pytz.all_timezones_set:
            errors.append(f"Unknown timezone: {cls.TARGET_TIMEZONE}")

        if cls.SCHEDULE_MIN_DURATION_MINUTES <= 0:
            errors.append(
                f"MONTHGRID_MIN_DURATION must be positive, got {cls.SCHEDULE_MIN_DURATION_MINUTES}"
            )

        if errors:
            for error in errors:
                print(f"Configuration Error: {error}")
            return False

        return True
