# File: tests/unit/test_collision_layout.py
"""
Unit tests for collision grouping, collision matrices, the base positioner
and view model conversion.
"""

from conftest import allday, at, timed, ymd
from monthgrid.core.collection import Collection
from monthgrid.models.view_model import ScheduleViewModel
from monthgrid.processors.collision import (
    get_collision_group,
    get_last_row_in_column,
    get_matrices,
    position_view_models,
)
from monthgrid.processors.lane_engine import weight_top_value
from monthgrid.processors.view_model_factory import (
    convert_to_calendar_view_model,
    convert_to_view_model,
    get_schedule_in_date_range_filter,
    group_by_date,
)


def wrap(*schedules):
    views = [ScheduleViewModel(s) for s in schedules]
    coll = Collection()
    coll.add(*views)
    return views, coll


# ==================== Grouping Tests ====================

class TestCollisionGroup:
    """Tests for get_collision_group."""

    def test_empty(self):
        assert get_collision_group([]) == []

    def test_groups_colliding_schedules(self):
        (a, b, c), _ = wrap(timed("a", 5, 9, 10), timed("b", 5, 9, 11), timed("c", 5, 13, 14))

        assert get_collision_group([a, b, c]) == [[a.cid(), b.cid()], [c.cid()]]

    def test_joins_group_of_latest_colliding_previous(self):
        (a, b, c), _ = wrap(timed("a", 5, 9, 10), timed("b", 5, 11, 13), timed("c", 5, 12, 14))

        assert get_collision_group([a, b, c]) == [[a.cid()], [b.cid(), c.cid()]]


# ==================== Matrix Tests ====================

class TestMatrices:
    """Tests for get_matrices and the base positioner."""

    def test_colliding_go_side_by_side(self):
        (a, b), coll = wrap(timed("a", 5, 9, 10), timed("b", 5, 9, 11))

        matrices = get_matrices(coll, [[a.cid(), b.cid()]])

        assert matrices == [[[a, b]]]

    def test_non_colliding_go_down_a_column(self):
        (a, b, c), coll = wrap(timed("a", 5, 9, 11), timed("b", 5, 9, 10), timed("c", 5, 10, 11))

        matrices = get_matrices(coll, [[a.cid(), b.cid(), c.cid()]])

        assert matrices == [[[a, b], [None, c]]]

    def test_last_row_in_column(self):
        matrix = [['x', 'y'], [None, 'z']]

        assert get_last_row_in_column(matrix, 0) == 0
        assert get_last_row_in_column(matrix, 1) == 1
        assert get_last_row_in_column(matrix, 2) is None

    def test_position_sets_top_left_width(self):
        (bar, a, b), coll = wrap(allday("trip", 5, 6), timed("a", 5, 9, 10), timed("b", 7, 9, 10))
        matrices = [[[bar, a]], [[b]]]

        position_view_models(at(1), at(31, 23, 59), matrices, weight_top_value)

        assert (bar.top, bar.left, bar.width) == (1, 4, 2)
        assert (a.top, a.left, a.width) == (2, 4, 1)
        assert (b.top, b.left, b.width) == (1, 6, 1)

    def test_position_outside_range_left_is_minus_one(self):
        (a,), _ = wrap(timed("a", 3, 9, 10))

        position_view_models(at(5), at(6), [[[a]]])

        assert a.left == -1
        assert a.top == 0


# ==================== Conversion Tests ====================

class TestConversion:
    """Tests for the range filter and view model factories."""

    def test_range_filter_is_inclusive(self):
        in_range = get_schedule_in_date_range_filter(at(5), at(6))

        assert in_range(allday("day before", 4)) is False
        assert in_range(timed("inside", 5, 9, 10)) is True
        assert in_range(allday("covering", 1, 30)) is True
        assert in_range(timed("after", 6, 1, 2)) is False

    def test_range_filter_uses_schedule_span_for_view_models(self):
        vm = ScheduleViewModel(allday("long", 1, 20))
        vm.render_starts, vm.render_ends = at(1), at(3)

        assert get_schedule_in_date_range_filter(at(10), at(12))(vm) is True

    def test_overnight_timed_becomes_multi_date(self):
        overnight = timed("overnight", 5, 22, 23)
        overnight.end = at(6, 2)

        vm = convert_to_view_model([overnight], at(1), at(31, 23, 59)).single()

        assert vm.has_multi_dates is True
        assert vm.get_starts() == at(5)
        assert vm.get_ends().day == 6

    def test_allday_is_clipped_to_range(self):
        trip = allday("trip", 3, 9)

        vm = convert_to_view_model([trip], at(5), at(7, 23, 59, 59, 999000)).single()

        assert vm.exceed_left is True
        assert vm.exceed_right is True
        assert vm.get_starts() == at(5)
        assert vm.get_ends() == at(7, 23, 59, 59, 999000)
        assert trip.start == at(3)

    def test_timed_is_not_clipped(self):
        vm = convert_to_view_model([timed("a", 5, 9, 10)], at(1), at(31)).single()

        assert vm.render_starts is None
        assert vm.has_multi_dates is False

    def test_registered_view_models_are_unwrapped(self):
        schedule = timed("a", 5, 9, 10)
        old = ScheduleViewModel(schedule)
        old.top = 9

        vm = convert_to_view_model([old], at(1), at(31)).single()

        assert vm is not old
        assert vm.value_of() is schedule
        assert vm.top == 0

    def test_calendar_view_models_per_calendar_and_day(self):
        items = [
            timed("a", 5, 9, 10, calendar_id='work'),
            timed("b", 5, 11, 12, calendar_id='work'),
            timed("c", 5, 9, 10, calendar_id='home'),
            allday("d", 6, 7, calendar_id='work'),
        ]
        calendars = [{'id': 'work', 'name': 'Work'}, {'id': 'home', 'name': 'Home'}]

        summaries = convert_to_calendar_view_model(items, at(1), at(6, 23, 59), calendars)

        counts = sorted((vm.get_date().day, vm.get_calendar_id(), vm.get_count()) for vm in summaries)
        assert counts == [(5, 'home', 1), (5, 'work', 2), (6, 'work', 1)]
        work_5 = [vm for vm in summaries if vm.get_calendar_id() == 'work' and vm.get_date().day == 5][0]
        assert work_5.model['calendar']['name'] == 'Work'


# ==================== Day Grouping Tests ====================

class TestGroupByDate:
    """Tests for the day-indexed result."""

    def test_every_day_present_and_multi_day_once_per_day(self):
        views = convert_to_view_model(
            [allday("trip", 5, 7), timed("meeting", 6, 9, 10)], at(4), at(8, 23, 59)
        ).to_list()
        trip, meeting = views
        trip.top, meeting.top = 1, 2

        result = group_by_date(at(4), at(8, 23, 59), views)

        assert list(result) == [ymd(4), ymd(5), ymd(6), ymd(7), ymd(8)]
        assert result[ymd(4)].to_list() == []
        assert result[ymd(5)].to_list() == [trip]
        assert result[ymd(6)].to_list() == [trip, meeting]
        assert result[ymd(7)].to_list() == [trip]
