# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable schedules and view models for all tests.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest
import pytz

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from monthgrid.core.config_manager import Config
from monthgrid.core.month_controller import MonthController
from monthgrid.models.common import format_ymd
from monthgrid.models.schedule import Schedule
from monthgrid.models.view_model import ScheduleViewModel

SEOUL = pytz.timezone('Asia/Seoul')


def at(day: int, hour: int = 0, minute: int = 0, second: int = 0, microsecond: int = 0,
       month: int = 10, year: int = 2026) -> datetime:
    """Aware datetime in October 2026, Asia/Seoul."""
    return SEOUL.localize(datetime(year, month, day, hour, minute, second, microsecond))


def timed(title: str, day: int, start_hour: int, end_hour: int, **kwargs) -> Schedule:
    return Schedule(title=title, start=at(day, start_hour), end=at(day, end_hour), **kwargs)


def allday(title: str, first_day: int, last_day: int = None, **kwargs) -> Schedule:
    return Schedule(title=title, is_all_day=True, start=at(first_day),
                    end=at(last_day or first_day), **kwargs)


def view_model(schedule: Schedule, top: int = 0, multi_dates: bool = False) -> ScheduleViewModel:
    vm = ScheduleViewModel(schedule)
    vm.top = top
    vm.has_multi_dates = multi_dates
    return vm


def ymd(day: int) -> str:
    return format_ymd(at(day))


# ==================== Fixtures ====================

@pytest.fixture(autouse=True)
def seoul_zone(monkeypatch):
    """Run every test with Asia/Seoul as the configured zone."""
    monkeypatch.setattr(Config, "TARGET_TIMEZONE", SEOUL.zone)


@pytest.fixture
def tz():
    return SEOUL


@pytest.fixture
def october():
    """Full October 2026 range."""
    return at(1), at(31, 23, 59, 59, 999000)


@pytest.fixture
def controller():
    return MonthController()
