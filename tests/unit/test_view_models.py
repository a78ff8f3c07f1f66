# File: tests/unit/test_view_models.py
"""
Unit tests for ScheduleViewModel and CalendarViewModel.
"""

from datetime import timedelta

from conftest import allday, at, timed
from monthgrid.models.view_model import (
    CalendarViewModel,
    ScheduleViewModel,
    calendar_sort_key,
    is_allday_like,
    schedule_sort_key,
)


class TestScheduleViewModel:
    """Tests for the schedule decorator."""

    def test_layout_defaults(self):
        vm = ScheduleViewModel.create(timed("A", 5, 9, 10))

        assert (vm.top, vm.left, vm.width, vm.height) == (0, 0, 0, 0)
        assert vm.has_collide is False
        assert vm.hidden is False
        assert vm.has_multi_dates is False
        assert vm.exceed_left is False and vm.exceed_right is False

    def test_render_span_falls_back_to_model(self):
        schedule = timed("A", 5, 9, 10)
        vm = ScheduleViewModel(schedule)

        assert vm.get_starts() == schedule.start
        assert vm.get_ends() == schedule.end

        vm.render_starts = at(5)
        assert vm.get_starts() == at(5)
        assert schedule.start == at(5, 9)

    def test_shares_identity_with_schedule(self):
        schedule = timed("A", 5, 9, 10)
        vm = ScheduleViewModel(schedule)

        assert vm.cid() == schedule.cid()
        assert vm.value_of() is schedule

    def test_schedule_fields_read_through(self):
        vm = ScheduleViewModel(timed("Standup", 5, 9, 10, calendar_id='work'))

        assert vm.title == "Standup"
        assert vm.calendar_id == 'work'
        assert vm.is_all_day is False

    def test_collides_with_uses_render_span(self):
        bar = ScheduleViewModel(allday("Trip", 5))
        meeting = ScheduleViewModel(timed("Meeting", 5, 9, 10))
        other_day = ScheduleViewModel(timed("Later", 6, 9, 10))

        assert bar.collides_with(meeting) is True
        assert bar.collides_with(other_day) is False

    def test_to_dict(self):
        vm = ScheduleViewModel(timed("A", 5, 9, 10, id='a1'))
        vm.top = 3

        data = vm.to_dict()

        assert data['top'] == 3
        assert data['id'] == 'a1'
        assert data['title'] == 'A'


class TestCalendarViewModel:
    """Tests for the per-calendar day summary."""

    def test_summary_fields(self):
        schedules = [timed("a", 5, 9, 10), timed("b", 5, 11, 12)]
        vm = CalendarViewModel.create('work', at(5), schedules, {'id': 'work', 'name': 'Work'})

        assert vm.get_count() == 2
        assert vm.get_calendar_id() == 'work'
        assert vm.get_schedules() == schedules
        assert vm.get_starts() == vm.get_ends() == vm.get_date() == at(5)
        assert vm.duration() == timedelta(0)

    def test_own_identity(self):
        schedules = [timed("a", 5, 9, 10)]
        first = CalendarViewModel('work', at(5), schedules)
        second = CalendarViewModel('work', at(5), schedules)

        assert first.cid() != second.cid()
        assert first.cid() != schedules[0].cid()

    def test_collides_on_same_date(self):
        vm = CalendarViewModel('work', at(5), [])

        assert vm.collides_with(CalendarViewModel('home', at(5, 18), [])) is True
        assert vm.collides_with(CalendarViewModel('home', at(6), [])) is False

    def test_is_never_allday_like(self):
        assert is_allday_like(CalendarViewModel('work', at(5), [])) is False


class TestOrdering:
    """Tests for the calendar and schedule sort keys."""

    def test_calendar_order_by_start(self):
        late = ScheduleViewModel(timed("late", 5, 15, 16))
        early = ScheduleViewModel(timed("early", 5, 9, 10))

        assert sorted([late, early], key=calendar_sort_key) == [early, late]

    def test_same_start_allday_then_longer_first(self):
        bar = ScheduleViewModel(allday("bar", 5))
        long_block = ScheduleViewModel(timed("long", 5, 0, 3))
        short_block = ScheduleViewModel(timed("short", 5, 0, 1))

        ordered = sorted([short_block, long_block, bar], key=calendar_sort_key)

        assert ordered == [bar, long_block, short_block]

    def test_same_everything_falls_back_to_id(self):
        first = ScheduleViewModel(timed("x", 5, 9, 10))
        second = ScheduleViewModel(timed("x", 5, 9, 10))

        assert sorted([second, first], key=calendar_sort_key) == [first, second]

    def test_schedule_order_puts_allday_first(self):
        morning = ScheduleViewModel(timed("morning", 5, 0, 1))
        bar = ScheduleViewModel(allday("bar", 5))
        multi = ScheduleViewModel(timed("overnight", 5, 22, 23))
        multi.has_multi_dates = True

        ordered = sorted([morning, multi, bar], key=schedule_sort_key)

        assert ordered == [bar, multi, morning]
