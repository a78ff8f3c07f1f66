from .enums import ScheduleCategory
from .errors import InvalidScheduleDate, ScheduleValidationError, ValidationError
from .common import (
    parse_iso_datetime,
    localize,
    start_of_day,
    end_of_day,
    is_same_date,
    format_ymd,
    date_range,
)
from .schedule import (
    Schedule,
    SCHEDULE_MIN_DURATION,
    schedule_from_dict,
    validate_schedules,
)
from .view_model import (
    ScheduleViewModel,
    CalendarViewModel,
    is_allday_like,
    calendar_sort_key,
    schedule_sort_key,
)

__all__ = [
    "ScheduleCategory",
    "InvalidScheduleDate",
    "ScheduleValidationError",
    "ValidationError",
    "parse_iso_datetime",
    "localize",
    "start_of_day",
    "end_of_day",
    "is_same_date",
    "format_ymd",
    "date_range",
    "Schedule",
    "SCHEDULE_MIN_DURATION",
    "schedule_from_dict",
    "validate_schedules",
    "ScheduleViewModel",
    "CalendarViewModel",
    "is_allday_like",
    "calendar_sort_key",
    "schedule_sort_key",
]
