# File: monthgrid/models/enums.py

from enum import Enum


class ScheduleCategory(Enum):
    """Schedule categories understood by the month view."""
    MILESTONE = "milestone"
    TASK = "task"
    ALLDAY = "allday"  # forces is_all_day
    TIME = "time"
