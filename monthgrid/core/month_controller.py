# File: monthgrid/core/month_controller.py
"""
Month view controller.

Owns the schedule store and its date index, and runs the month query:
filter -> view models -> collision groups -> base lanes -> timed lane policy.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from monthgrid.core.collection import Collection
from monthgrid.core.config_manager import Config
from monthgrid.core.date_matrix import DateMatrix
from monthgrid.models.common import end_of_day, format_ymd, is_same_date, localize, start_of_day
from monthgrid.models.errors import InvalidScheduleDate
from monthgrid.models.enums import ScheduleCategory
from monthgrid.models.schedule import (
    CAMEL_CASE_KEYS,
    Schedule,
    all_day_span,
    normalize_category,
    schedule_from_dict,
    time_span,
)
from monthgrid.models.view_model import ScheduleViewModel, calendar_sort_key, schedule_sort_key
from monthgrid.processors.collision import get_collision_group, get_matrices, position_view_models
from monthgrid.processors.lane_engine import adjust_time_top_index, stack_time_from_top, weight_top_value
from monthgrid.processors.view_model_factory import (
    MonthMatrices,
    convert_to_calendar_view_model,
    convert_to_view_model,
    get_schedule_in_date_range_filter,
    group_by_date,
    unwrap_schedule,
)
from monthgrid.utils.logger import LoggerMixin

_TIME_FIELDS = ('start', 'end', 'is_all_day', 'category')


def _range_bound(value, is_end: bool) -> datetime:
    if isinstance(value, datetime):
        return localize(value)
    if isinstance(value, date):
        day = localize(datetime.combine(value, datetime.min.time()))
        return end_of_day(day) if is_end else day
    raise InvalidScheduleDate(value, "range end" if is_end else "range start")


class MonthController(LoggerMixin):
    """
    Query and layout entry point for the month view.

    Args:
        schedules: Store of schedules, keyed by schedule id
        date_matrix: Day index over the store; built from it when omitted
        calendars: Calendar metadata handed to calendar summaries
        aggregate_by_calendar: Produce one summary per calendar and day instead
            of one view model per schedule
    """

    def __init__(
        self,
        schedules: Optional[Collection] = None,
        date_matrix: Optional[DateMatrix] = None,
        calendars: Optional[List[Any]] = None,
        aggregate_by_calendar: bool = False,
    ):
        self.schedules = schedules if schedules is not None else Collection()
        self.date_matrix = date_matrix if date_matrix is not None else DateMatrix.from_schedules(self.schedules)
        self.calendars = calendars or []
        self.aggregate_by_calendar = aggregate_by_calendar

    # ==================== Schedule registration ====================

    def add_schedule(self, schedule: Schedule) -> Schedule:
        self.schedules.add(schedule)
        self.date_matrix.add(schedule)
        return schedule

    def create_schedules(self, data_list: Iterable[Dict[str, Any]]) -> List[Schedule]:
        """Create schedules from raw dicts and register them."""
        created = [self.add_schedule(schedule_from_dict(data)) for data in data_list]
        self.logger.info(f"Created {len(created)} schedules")
        return created

    def update_schedule(self, schedule: Schedule, changes: Dict[str, Any]) -> Schedule:
        """
        Apply field changes to a registered schedule and re-index it.

        Changing start, end, is_all_day or category re-normalizes the span.
        The new span is checked before anything is changed, so invalid
        changes leave the schedule and the day index untouched.

        Args:
            schedule: The schedule, or a view model returned by a query
            changes: Field name (snake_case or camelCase) -> new value
        """
        schedule = unwrap_schedule(schedule)
        fields = {CAMEL_CASE_KEYS.get(key, key): value for key, value in changes.items()}
        unknown = [name for name in fields if not hasattr(schedule, name)]
        if unknown:
            raise ValueError(f"Unknown schedule fields: {', '.join(sorted(unknown))}")

        if 'category' in fields:
            fields['category'] = normalize_category(fields['category'])

        span = None
        if any(name in fields for name in _TIME_FIELDS):
            is_all_day = bool(fields.get('is_all_day', schedule.is_all_day))
            if fields.get('category', schedule.category) == ScheduleCategory.ALLDAY.value:
                is_all_day = True
            fields['is_all_day'] = is_all_day
            start = fields.pop('start', schedule.start)
            end = fields.pop('end', schedule.end)
            span = all_day_span(start, end) if is_all_day else time_span(start, end)

        self.date_matrix.remove(schedule)
        for name, value in fields.items():
            setattr(schedule, name, value)
        if span is not None:
            schedule.start, schedule.end = span

        self.schedules.add(schedule)
        self.date_matrix.add(schedule)
        return schedule

    def delete_schedule(self, schedule: Schedule) -> None:
        schedule = unwrap_schedule(schedule)
        self.date_matrix.remove(schedule)
        self.schedules.remove(schedule.cid())

    def clear_schedules(self) -> None:
        self.schedules.clear()
        self.date_matrix.clear()

    # ==================== Queries ====================

    def _convert(self, collection: Collection, start: datetime, end: datetime) -> Collection:
        if self.aggregate_by_calendar:
            return convert_to_calendar_view_model(collection, start, end, self.calendars)
        return convert_to_view_model(collection, start, end)

    def find_by_date_range(
        self,
        start,
        end,
        and_filters: Optional[List[Callable[[Any], bool]]] = None,
        allday_first_mode: Optional[bool] = None,
    ) -> MonthMatrices:
        """
        Find schedules in a range and lay them out for the month grid.

        Args:
            start: Range start (date or datetime)
            end: Range end (date or datetime), inclusive
            and_filters: Extra predicates every schedule must pass
            allday_first_mode: True stacks timed schedules below all-day bars,
                False packs them from the top (default: Config.ALLDAY_FIRST_MODE)

        Returns:
            Day key -> collection of positioned view models for each day of the range
        """
        start = _range_bound(start, is_end=False)
        end = _range_bound(end, is_end=True)
        if allday_first_mode is None:
            allday_first_mode = Config.ALLDAY_FIRST_MODE

        schedule_filter = Collection.and_(
            get_schedule_in_date_range_filter(start, end), *(and_filters or [])
        )

        coll = self.schedules.find(schedule_filter)
        v_coll = self._convert(coll, start, end)
        v_list = v_coll.sort(key=calendar_sort_key)

        # Upsert by identity; summaries have no stored counterpart
        for view_model in v_list:
            if self.schedules.has(view_model.cid()):
                self.schedules.add(view_model)

        collision_group = get_collision_group(v_list)
        matrices = get_matrices(v_coll, collision_group)
        position_view_models(start, end, matrices, weight_top_value)

        try:
            if allday_first_mode:
                adjust_time_top_index(v_coll, self.date_matrix)
            else:
                stack_time_from_top(v_coll, self.date_matrix)
        except InvalidScheduleDate as e:
            self.logger.error(f"Lane assignment failed for {start:%Y-%m-%d}..{end:%Y-%m-%d}: {e}")
            raise

        self.logger.debug(
            f"Laid out {len(v_coll)} view models in {len(collision_group)} collision groups "
            f"({'allday-first' if allday_first_mode else 'stack-from-top'})"
        )
        return group_by_date(start, end, v_list)

    def find_by_date(self, day, and_filters: Optional[List[Callable[[Any], bool]]] = None,
                     allday_first_mode: Optional[bool] = None) -> Collection:
        """View models of a single day, as shown by the "more" layer."""
        start = _range_bound(day, is_end=False)
        start = start_of_day(start)
        result = self.find_by_date_range(start, end_of_day(start), and_filters, allday_first_mode)
        return result[format_ymd(start)]


def get_view_model_for_more_layer(day: datetime, schedules: Collection,
                                  daynames: Optional[List[str]] = None,
                                  schedule_filter: Optional[Callable[[Any], bool]] = None) -> Dict[str, Any]:
    """
    Data for the "+N more" layer of one day.

    Args:
        day: The day whose schedules are listed
        schedules: That day's view models (e.g. from MonthController.find_by_date)
        daynames: Names indexed Sunday-first (default: Config.DAYNAMES)
        schedule_filter: Optional predicate on the underlying schedule

    Returns:
        Dict with the formatted date, the day name and the sorted view models
    """
    daynames = daynames or Config.DAYNAMES

    if schedule_filter is not None:
        schedules = schedules.find(lambda view_model: schedule_filter(view_model.value_of()))

    for view_model in schedules:
        if isinstance(view_model, ScheduleViewModel):
            model = view_model.value_of()
            view_model.has_multi_dates = not is_same_date(model.get_starts(), model.get_ends())

    return {
        'date': day.strftime('%Y.%m.%d'),
        'dayname': daynames[(day.weekday() + 1) % 7],
        'schedules': schedules.sort(key=schedule_sort_key),
    }
