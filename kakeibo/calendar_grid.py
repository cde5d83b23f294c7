"""Month calendar layout.

A grid is a flat, row-major list of cells starting on Sunday: ``None`` for
each leading placeholder, then one ``date`` per day of the month. The final
week is not padded, so ``len(grid) == first_weekday + days_in_month``.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple, TypeVar

from .validators import validate_year_month

Cell = Optional[date]
T = TypeVar("T")

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st, counting Sunday as 0."""
    year, month = validate_year_month(year, month)
    # date.weekday() counts Monday as 0.
    return (date(year, month, 1).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    year, month = validate_year_month(year, month)
    if month == 12:
        # date(10000, 1, 1) is out of range.
        return 31
    # Day 0 of the following month is the last day of this one.
    last_day = date(year, month + 1, 1) - timedelta(days=1)
    return last_day.day


def build(year: int, month: int) -> List[Cell]:
    year, month = validate_year_month(year, month)
    cells: List[Cell] = [None] * first_weekday(year, month)
    cells.extend(date(year, month, day) for day in range(1, days_in_month(year, month) + 1))
    return cells


def weeks(cells: Sequence[T]) -> List[List[T]]:
    """Chunk a grid into rows of seven; the last row may be shorter."""
    return [list(cells[start:start + 7]) for start in range(0, len(cells), 7)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months forward (or back), rolling the year over."""
    year, month = validate_year_month(year, month)
    index = year * 12 + (month - 1) + delta
    return validate_year_month(index // 12, index % 12 + 1)
