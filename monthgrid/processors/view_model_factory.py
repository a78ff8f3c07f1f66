# File: monthgrid/processors/view_model_factory.py
"""
Turns stored schedules into view models for a date range, and view models
into the day-indexed structure returned to renderers.
"""

from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from monthgrid.core.collection import Collection
from monthgrid.models.common import date_range, end_of_day, format_ymd, is_same_date, start_of_day
from monthgrid.models.schedule import Schedule
from monthgrid.models.view_model import CalendarViewModel, ScheduleViewModel, calendar_sort_key

MonthMatrices = Dict[str, Collection]


def get_schedule_in_date_range_filter(start: datetime, end: datetime) -> Callable[[Any], bool]:
    """Predicate selecting items whose span touches [start, end]."""
    def in_range(item) -> bool:
        # re-registered view models are filtered by their schedule, not the clipped span
        if isinstance(item, ScheduleViewModel):
            item = item.value_of()
        own_starts = item.get_starts()
        own_ends = item.get_ends()
        return not (own_ends < start or own_starts > end)
    return in_range


def unwrap_schedule(item) -> Schedule:
    """The stored schedule behind a ScheduleViewModel; other items pass through."""
    if isinstance(item, ScheduleViewModel):
        return item.value_of()
    return item


def add_multi_dates_info(view_model: ScheduleViewModel) -> None:
    """Flag spans crossing midnight; timed ones render over whole days."""
    model = view_model.value_of()
    view_model.has_multi_dates = not is_same_date(model.get_starts(), model.get_ends())
    if not model.is_all_day and view_model.has_multi_dates:
        view_model.render_starts = start_of_day(model.get_starts())
        view_model.render_ends = end_of_day(model.get_ends())


def adjust_render_range(start: datetime, end: datetime, view_model: ScheduleViewModel) -> None:
    """Clip all-day-like bars to the visible range."""
    model = view_model.value_of()
    if not (model.is_all_day or view_model.has_multi_dates):
        return
    view_model.exceed_left = model.get_starts() < start
    view_model.exceed_right = model.get_ends() > end
    view_model.render_starts = start_of_day(max(start, view_model.get_starts()))
    view_model.render_ends = end_of_day(min(end, view_model.get_ends()))


def convert_to_view_model(collection: Iterable, start: datetime, end: datetime) -> Collection:
    """
    Wrap each stored schedule in a fresh ScheduleViewModel.

    View models previously registered in the store are unwrapped first.
    """
    view_models = Collection()
    for item in collection:
        schedule = unwrap_schedule(item)
        view_model = ScheduleViewModel.create(schedule)
        add_multi_dates_info(view_model)
        adjust_render_range(start, end, view_model)
        view_models.add(view_model)
    return view_models


def _find_calendar(calendars: Optional[Iterable], calendar_id: str) -> Any:
    for calendar in calendars or []:
        cal_id = calendar.get('id') if isinstance(calendar, dict) else getattr(calendar, 'id', None)
        if cal_id == calendar_id:
            return calendar
    return None


def convert_to_calendar_view_model(collection: Iterable, start: datetime, end: datetime,
                                   calendars: Optional[Iterable] = None) -> Collection:
    """One CalendarViewModel per (calendar, day) summarising that day's schedules."""
    buckets: "OrderedDict[tuple, List[Schedule]]" = OrderedDict()
    visible = {format_ymd(day): day for day in date_range(start, end)}

    for item in collection:
        schedule = unwrap_schedule(item)
        for day in date_range(schedule.get_starts(), schedule.get_ends()):
            ymd = format_ymd(day, schedule.title)
            if ymd not in visible:
                continue
            buckets.setdefault((schedule.calendar_id, ymd), []).append(schedule)

    view_models = Collection()
    for (calendar_id, ymd), schedules in buckets.items():
        view_models.add(CalendarViewModel.create(
            calendar_id, visible[ymd], schedules, _find_calendar(calendars, calendar_id)
        ))
    return view_models


def group_by_date(start: datetime, end: datetime, view_models: Iterable) -> MonthMatrices:
    """
    Day key -> view models occupying that day, for every day of the range.

    Each day's collection is ordered by top, then calendar order.
    """
    result: MonthMatrices = OrderedDict(
        (format_ymd(day), Collection()) for day in date_range(start, end)
    )
    ordered = sorted(view_models, key=lambda vm: (vm.top, calendar_sort_key(vm)))
    for view_model in ordered:
        for day in date_range(view_model.get_starts(), view_model.get_ends()):
            ymd = format_ymd(day, repr(view_model))
            if ymd in result:
                result[ymd].add(view_model)
    return result
