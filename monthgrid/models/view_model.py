# File: monthgrid/models/view_model.py
"""
View models for the month grid.

A view model decorates a schedule (or a per-calendar "N more" summary) with
the layout fields filled in by the collision and lane passes.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .common import is_same_date, next_stamp
from .schedule import Schedule, collision_window, windows_collide


class _LayoutFields:
    """Render-time layout state shared by all view models."""

    def _init_layout(self) -> None:
        self.top = 0
        self.left = 0
        self.width = 0
        self.height = 0
        # Represent schedule has collide with other schedules when rendering.
        self.has_collide = False
        # Extra space at right side of this schedule.
        self.extra_space = 0
        # In month view a bar already drawn on an earlier date is shown as empty space.
        self.hidden = False
        self.has_multi_dates = False
        # None means "use the model's start/end".
        self.render_starts: Optional[datetime] = None
        self.render_ends: Optional[datetime] = None
        self.exceed_left = False
        self.exceed_right = False

    def layout_dict(self) -> Dict[str, Any]:
        return {
            'top': self.top,
            'left': self.left,
            'width': self.width,
            'height': self.height,
            'has_collide': self.has_collide,
            'extra_space': self.extra_space,
            'hidden': self.hidden,
            'has_multi_dates': self.has_multi_dates,
            'exceed_left': self.exceed_left,
            'exceed_right': self.exceed_right,
        }


class ScheduleViewModel(_LayoutFields):
    """Positioned wrapper around one Schedule."""

    def __init__(self, schedule: Schedule):
        self.model = schedule
        self._init_layout()

    @classmethod
    def create(cls, schedule: Schedule) -> 'ScheduleViewModel':
        return cls(schedule)

    def __getattr__(self, name: str):
        # schedule fields (title, calendar_id, is_all_day, ...) read through
        if name == 'model':
            raise AttributeError(name)
        return getattr(self.model, name)

    def get_starts(self) -> datetime:
        """Render start, falling back to the schedule start."""
        if self.render_starts is not None:
            return self.render_starts
        return self.model.get_starts()

    def get_ends(self) -> datetime:
        """Render end, falling back to the schedule end."""
        if self.render_ends is not None:
            return self.render_ends
        return self.model.get_ends()

    def cid(self) -> int:
        """The wrapped schedule's id; a view model shares identity with it."""
        return self.model.cid()

    def value_of(self) -> Schedule:
        return self.model

    def duration(self) -> timedelta:
        return self.model.duration()

    def collides_with(self, other) -> bool:
        own = collision_window(self.get_starts(), self.get_ends(),
                               self.model.going_duration, self.model.coming_duration)
        model = other.value_of() if hasattr(other, 'value_of') else other
        theirs = collision_window(other.get_starts(), other.get_ends(),
                                  getattr(model, 'going_duration', 0),
                                  getattr(model, 'coming_duration', 0))
        return windows_collide(own, theirs)

    def to_dict(self) -> dict:
        data = self.layout_dict()
        data.update({
            'cid': self.cid(),
            'id': self.model.id,
            'title': self.model.title,
            'is_all_day': self.model.is_all_day,
            'starts': self.get_starts().isoformat(),
            'ends': self.get_ends().isoformat(),
        })
        return data

    def __repr__(self) -> str:
        return f"ScheduleViewModel({self.model.title!r}, top={self.top})"


class CalendarViewModel(_LayoutFields):
    """Summary of one calendar's schedules on one date ("N more")."""

    def __init__(self, calendar_id: str, date: datetime, schedules: List[Schedule], calendar: Any = None):
        self.model = {
            'calendar_id': calendar_id,
            'date': date,
            'schedules': schedules,
            'count': len(schedules),
            'calendar': calendar,
        }
        self._cid = next_stamp()
        self._init_layout()

    @classmethod
    def create(cls, calendar_id: str, date: datetime, schedules: List[Schedule],
               calendar: Any = None) -> 'CalendarViewModel':
        return cls(calendar_id, date, schedules, calendar)

    def get_date(self) -> datetime:
        return self.model['date']

    def get_calendar_id(self) -> str:
        return self.model['calendar_id']

    def get_starts(self) -> datetime:
        return self.model['date']

    def get_ends(self) -> datetime:
        return self.model['date']

    def get_count(self) -> int:
        return self.model['count']

    def get_schedules(self) -> List[Schedule]:
        return self.model['schedules']

    def cid(self) -> int:
        return self._cid

    def value_of(self) -> Dict[str, Any]:
        return self.model

    def duration(self) -> timedelta:
        return timedelta(0)

    def collides_with(self, other) -> bool:
        """Summaries collide with anything on the same calendar date."""
        return is_same_date(self.model['date'], other.get_starts())

    def to_dict(self) -> dict:
        data = self.layout_dict()
        data.update({
            'cid': self.cid(),
            'calendar_id': self.get_calendar_id(),
            'date': self.get_date().isoformat(),
            'count': self.get_count(),
        })
        return data

    def __repr__(self) -> str:
        return f"CalendarViewModel({self.get_calendar_id()!r}, count={self.get_count()}, top={self.top})"


def is_allday_like(view_model) -> bool:
    model = view_model.value_of()
    return bool(getattr(model, 'is_all_day', False) or view_model.has_multi_dates)


def calendar_sort_key(view_model):
    """Calendar order: start, all-day-like first, longer first, then id."""
    return (
        view_model.get_starts(),
        not is_allday_like(view_model),
        -view_model.duration(),
        view_model.cid(),
    )


def schedule_sort_key(view_model):
    """Schedule order used by the "more" layer: all-day-like first, then calendar order."""
    return (
        not is_allday_like(view_model),
        view_model.get_starts(),
        -view_model.duration(),
        view_model.cid(),
    )
