# File: monthgrid/processors/collision.py
"""
Collision grouping and the base lane pass that runs before lane_engine.
"""

from datetime import datetime
from typing import Any, Callable, List, Optional

from monthgrid.core.collection import Collection
from monthgrid.models.common import date_range, end_of_day, format_ymd, start_of_day

Matrix = List[List[Any]]


def get_collision_group(view_models: List[Any]) -> List[List[int]]:
    """
    Group ids of view models that collide, in the given (sorted) order.

    Each view model joins the group of the latest earlier view model it
    collides with; otherwise it opens a new group.
    """
    if not view_models:
        return []

    collision_groups: List[List[int]] = [[view_models[0].cid()]]

    for index, view_model in enumerate(view_models[1:], start=1):
        found_previous = False
        for previous in reversed(view_models[:index]):
            if view_model.collides_with(previous):
                found_previous = True
                previous_id = previous.cid()
                for group in reversed(collision_groups):
                    if previous_id in group:
                        group.append(view_model.cid())
                        break
                break

        if not found_previous:
            collision_groups.append([view_model.cid()])

    return collision_groups


def get_last_row_in_column(matrix: Matrix, col: int) -> Optional[int]:
    """Index of the lowest row holding something in col, or None."""
    for row in range(len(matrix) - 1, -1, -1):
        if col < len(matrix[row]) and matrix[row][col] is not None:
            return row
    return None


def get_matrices(view_models: Collection, collision_groups: List[List[int]]) -> List[Matrix]:
    """
    Lay each collision group out as a 2-D matrix.

    A view model takes the first column whose last occupant it does not
    collide with (one row further down), or a fresh column on row 0.
    """
    result: List[Matrix] = []

    for group in collision_groups:
        matrix: Matrix = [[]]
        for cid in group:
            view_model = view_models.get(cid)
            col = 0
            found = False
            while not found:
                last_row = get_last_row_in_column(matrix, col)
                if last_row is None:
                    matrix[0].append(view_model)
                    found = True
                elif not view_model.collides_with(matrix[last_row][col]):
                    next_row = last_row + 1
                    if next_row == len(matrix):
                        matrix.append([])
                    row = matrix[next_row]
                    while len(row) <= col:
                        row.append(None)
                    row[col] = view_model
                    found = True
                col += 1
        result.append(matrix)

    return result


def position_view_models(start: datetime, end: datetime, matrices: List[Matrix],
                         iteratee: Optional[Callable[[Any], None]] = None) -> None:
    """
    Assign the base layout: top = column in its matrix, left = day offset, width = days.

    iteratee runs on every placed view model afterwards.
    """
    ymd_list = [format_ymd(day) for day in date_range(start, end)]

    for matrix in matrices:
        for row in matrix:
            for index, view_model in enumerate(row):
                if view_model is None:
                    continue
                ymd = format_ymd(view_model.get_starts(), repr(view_model))
                date_length = len(date_range(start_of_day(view_model.get_starts()),
                                             end_of_day(view_model.get_ends())))
                view_model.top = index
                view_model.left = ymd_list.index(ymd) if ymd in ymd_list else -1
                view_model.width = date_length
                if iteratee:
                    iteratee(view_model)
