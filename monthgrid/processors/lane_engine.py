# File: monthgrid/processors/lane_engine.py
"""
Lane assignment for timed schedules in the month grid.

All-day-like view models (all-day flag or a span over several dates) already
hold their final ``top`` when this module runs. The two policies here place
the remaining timed view models of each day below or between those bars:

- ``adjust_time_top_index`` (all-day first): timed schedules of a day stack
  one after another under the tallest all-day bar, in calendar order.
- ``stack_time_from_top``: each timed schedule keeps its current lane if it
  is free for that day, otherwise takes the lowest free lane.

Per-day lane state is passed in and returned explicitly so that one call
never sees the state of another.
"""

from typing import Dict, Iterable, List, Optional

from monthgrid.core.collection import Collection
from monthgrid.models.common import format_ymd
from monthgrid.models.view_model import calendar_sort_key
from monthgrid.utils.logger import setup_logger

logger = setup_logger(__name__)

MaxTopState = Dict[str, int]
OccupiedLaneState = Dict[str, List[int]]


def only_time_filter(view_model) -> bool:
    """True for single-day schedules with a time of day."""
    model = view_model.value_of()
    return not getattr(model, 'is_all_day', False) and not view_model.has_multi_dates


def only_allday_filter(view_model) -> bool:
    """True for all-day schedules and schedules spanning several dates."""
    model = view_model.value_of()
    return bool(getattr(model, 'is_all_day', False) or view_model.has_multi_dates)


def weight_top_value(view_model) -> None:
    """Base positioner callback: shift every lane down by one."""
    view_model.top = (view_model.top or 0) + 1


def _as_collection(view_models) -> Collection:
    if isinstance(view_models, Collection):
        return view_models
    collection = Collection()
    collection.add(*view_models)
    return collection


def _cell(date_matrix, ymd: str) -> List[int]:
    return list(date_matrix.get(ymd) or [])


def _allday_tops_at_ymd(ymd: str, allday_view_models: Collection, date_matrix) -> List[int]:
    tops: List[int] = []
    for cid in _cell(date_matrix, ymd):
        allday_view_models.do_when_has(cid, lambda view_model: tops.append(view_model.top))
    return tops


def get_allday_max_top_index_at_ymd(ymd: str, allday_view_models, date_matrix) -> int:
    """
    Highest top among the all-day-like view models listed in a day cell.

    Args:
        ymd: Day key (YYYYMMDD)
        allday_view_models: All-day-like view models, keyed by id
        date_matrix: Day key -> schedule ids

    Returns:
        The max top, or 0 when the day holds no all-day-like view model
    """
    tops = _allday_tops_at_ymd(ymd, _as_collection(allday_view_models), date_matrix)
    if tops:
        return max(tops)
    return 0


def _partition(view_models: Collection):
    allday = view_models.find(only_allday_filter)
    timed = view_models.find(only_time_filter).sort(key=calendar_sort_key)
    return allday, timed


def adjust_time_top_index(view_models: Iterable, date_matrix,
                          max_index_in_ymd: Optional[MaxTopState] = None) -> MaxTopState:
    """
    All-day first policy: number timed view models per day after the all-day bars.

    Within a day every timed view model gets the next integer after the
    previous one, starting at the day's max all-day top + 1. The counter is
    not reset by gaps in time.

    Args:
        view_models: All view models of the query
        date_matrix: Day key -> schedule ids
        max_index_in_ymd: Counters from a previous call to continue from

    Returns:
        Day key -> last assigned top
    """
    collection = _as_collection(view_models)
    allday, sorted_time_view_models = _partition(collection)
    state: MaxTopState = max_index_in_ymd if max_index_in_ymd is not None else {}

    for view_model in sorted_time_view_models:
        ymd = format_ymd(view_model.get_starts(), repr(view_model))
        if ymd not in state:
            state[ymd] = get_allday_max_top_index_at_ymd(ymd, allday, date_matrix)

        state[ymd] += 1
        view_model.top = state[ymd]

    logger.debug(f"Adjusted {len(sorted_time_view_models)} timed view models over {len(state)} days")
    return state


def stack_time_from_top(view_models: Iterable, date_matrix,
                        indice_in_ymd: Optional[OccupiedLaneState] = None) -> OccupiedLaneState:
    """
    First-fit policy: keep a timed view model's lane unless it is taken that day.

    A day's occupied lanes start as the tops of the all-day-like view models in
    its cell. A timed view model whose top is taken moves to the first lane in
    1..max(occupied)+1 that is not; its lane is then recorded as occupied.
    Lanes are never released within a call.

    Args:
        view_models: All view models of the query
        date_matrix: Day key -> schedule ids
        indice_in_ymd: Occupied lanes from a previous call to continue from

    Returns:
        Day key -> occupied lanes (duplicates kept)
    """
    collection = _as_collection(view_models)
    allday, sorted_time_view_models = _partition(collection)
    state: OccupiedLaneState = indice_in_ymd if indice_in_ymd is not None else {}

    for view_model in sorted_time_view_models:
        ymd = format_ymd(view_model.get_starts(), repr(view_model))
        occupied = state.get(ymd)
        if occupied is None:
            occupied = state[ymd] = _allday_tops_at_ymd(ymd, allday, date_matrix)

        if view_model.top in occupied:
            max_top = max(occupied) + 1
            for lane in range(1, max_top + 1):
                if lane not in occupied:
                    view_model.top = lane
                    break

        occupied.append(view_model.top)

    logger.debug(f"Stacked {len(sorted_time_view_models)} timed view models over {len(state)} days")
    return state
