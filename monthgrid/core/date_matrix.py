# File: monthgrid/core/date_matrix.py

from collections import defaultdict
from typing import Dict, Iterable, List

from monthgrid.models.common import date_range, end_of_day, format_ymd, start_of_day


class DateMatrix:
    """
    Day key (YYYYMMDD) -> ids of the schedules visible in that day cell.

    Ids are kept in registration order. A missing day key means the cell is
    empty.
    """

    def __init__(self):
        self._cells: Dict[str, List[int]] = defaultdict(list)

    @classmethod
    def from_schedules(cls, schedules: Iterable) -> 'DateMatrix':
        matrix = cls()
        for schedule in schedules:
            matrix.add(schedule)
        return matrix

    @staticmethod
    def ymd_list(schedule) -> List[str]:
        """Day keys covered by a schedule, from the start of its first day to the end of its last."""
        start = start_of_day(schedule.get_starts())
        end = end_of_day(schedule.get_ends())
        return [format_ymd(day, schedule.title) for day in date_range(start, end)]

    def add(self, schedule) -> None:
        cid = schedule.cid()
        for ymd in self.ymd_list(schedule):
            cell = self._cells[ymd]
            if cid not in cell:
                cell.append(cid)

    def remove(self, schedule) -> None:
        cid = schedule.cid()
        for ymd in list(self._cells):
            cell = self._cells[ymd]
            if cid in cell:
                cell.remove(cid)
            if not cell:
                del self._cells[ymd]

    def clear(self) -> None:
        self._cells.clear()

    def get(self, ymd: str) -> List[int]:
        """Ids in a day cell; an unknown day yields an empty list."""
        return list(self._cells.get(ymd, ()))

    def __getitem__(self, ymd: str) -> List[int]:
        return self.get(ymd)

    def __contains__(self, ymd: str) -> bool:
        return ymd in self._cells

    def keys(self) -> List[str]:
        return sorted(self._cells)

    def __len__(self) -> int:
        return len(self._cells)
