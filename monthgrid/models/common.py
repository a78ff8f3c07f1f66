# File: monthgrid/models/common.py

import itertools
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from monthgrid.core.config_manager import Config
from .errors import InvalidScheduleDate

END_OF_DAY = time(23, 59, 59, 999000)


def parse_iso_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """Robustly parse ISO date strings with 'Z' or offsets."""
    if not date_str:
        return None
    try:
        # specific fix for Python < 3.11 which doesn't handle 'Z' natively in fromisoformat
        clean_str = date_str.replace('Z', '+00:00')
        return datetime.fromisoformat(clean_str)
    except ValueError:
        # Fallback for simple date strings without time
        try:
            return datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            return None


def localize(dt: datetime, tz=None) -> datetime:
    """Express a datetime in the configured zone; naive values are taken as local to it."""
    if tz is None:
        tz = Config.get_timezone()
    if dt.tzinfo is None:
        return _attach(dt, tz)
    dt = dt.astimezone(tz)
    if hasattr(tz, 'normalize'):
        dt = tz.normalize(dt)
    return dt


def _attach(naive: datetime, tzinfo) -> datetime:
    if tzinfo is None:
        return naive
    # pytz zones need localize() to pick the right DST offset
    if hasattr(tzinfo, 'localize'):
        return tzinfo.localize(naive)
    return naive.replace(tzinfo=tzinfo)


def start_of_day(dt: datetime) -> datetime:
    """Midnight of the same calendar day, in the same zone."""
    return _attach(datetime.combine(dt.date(), time.min), dt.tzinfo)


def end_of_day(dt: datetime) -> datetime:
    """Last millisecond of the same calendar day, in the same zone."""
    return _attach(datetime.combine(dt.date(), END_OF_DAY), dt.tzinfo)


def is_same_date(a, b) -> bool:
    return _as_date(a) == _as_date(b)


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidScheduleDate(value)


def format_ymd(value, context: str = "") -> str:
    """Format a date or datetime as the canonical YYYYMMDD day key."""
    if not isinstance(value, (date, datetime)):
        raise InvalidScheduleDate(value, context)
    return value.strftime('%Y%m%d')


def date_range(start: datetime, end: datetime) -> List[datetime]:
    """Start-of-day datetimes for every calendar day from start to end, inclusive."""
    days = []
    current = _as_date(start)
    last = _as_date(end)
    tzinfo = start.tzinfo if isinstance(start, datetime) else None
    while current <= last:
        days.append(_attach(datetime.combine(current, time.min), tzinfo))
        current += timedelta(days=1)
    return days


_stamps = itertools.count(1)


def next_stamp() -> int:
    """Return a process-wide unique, monotonically increasing id."""
    return next(_stamps)
