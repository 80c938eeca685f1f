from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Tuple

from habitflow import dates
from habitflow.constants import DAY_LABELS, MONTH_LABELS
from habitflow.edit_window import window_for
from habitflow.errors import MalformedInput

SUNDAY = 0
MONDAY = 1


@dataclass(frozen=True)
class DayCell:
    date_key: str
    day: int
    is_today: bool
    window: str


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    blanks: int
    cells: Tuple[Optional[DayCell], ...]

    @property
    def headers(self) -> List[str]:
        return list(DAY_LABELS)

    @property
    def day_cells(self) -> List[DayCell]:
        return [cell for cell in self.cells if cell is not None]

    def rows(self) -> List[List[Optional[DayCell]]]:
        padded = list(self.cells)
        while len(padded) % 7:
            padded.append(None)
        return [padded[idx:idx + 7] for idx in range(0, len(padded), 7)]


def _check_month(month, year):
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise MalformedInput(f"Month must be between 1 and 12, got {month!r}")
    if not isinstance(year, int) or not 1 <= year <= 9999:
        raise MalformedInput(f"Invalid year: {year!r}")


def days_in_month(month: int, year: int) -> int:
    _check_month(month, year)
    return calendar.monthrange(year, month)[1]


def first_weekday_of_month(month: int, year: int) -> int:
    """Weekday of the 1st with Sunday as 0."""
    _check_month(month, year)
    return (date(year, month, 1).weekday() + 1) % 7


def leading_blanks(first_weekday: int) -> int:
    if first_weekday == MONDAY:
        return 0
    if first_weekday == SUNDAY:
        return 6
    return first_weekday - 1


def build_month_grid(month: int, year: int, zone: Optional[tzinfo] = None, clock: Optional[dates.Clock] = None) -> MonthGrid:
    today_key = dates.today(zone, clock)
    blanks = leading_blanks(first_weekday_of_month(month, year))
    cells: List[Optional[DayCell]] = [None] * blanks
    for day in range(1, days_in_month(month, year) + 1):
        key = dates.to_date_key(date(year, month, day))
        cells.append(
            DayCell(
                date_key=key,
                day=day,
                is_today=key == today_key,
                window=window_for(key, today_key),
            )
        )
    return MonthGrid(year=year, month=month, blanks=blanks, cells=tuple(cells))


def build_week_strip(reference=None, zone: Optional[tzinfo] = None, clock: Optional[dates.Clock] = None) -> List[str]:
    """Seven keys from Monday to Sunday of the week holding ``reference``."""
    if reference is None:
        reference = dates.today_date(zone, clock)
    elif isinstance(reference, str):
        reference = dates.key_to_date(reference)
    elif isinstance(reference, datetime):
        if zone is not None and reference.tzinfo is not None:
            reference = reference.astimezone(zone)
        reference = reference.date()
    current_day = (reference.weekday() + 1) % 7
    distance = -6 if current_day == SUNDAY else 1 - current_day
    first = reference + timedelta(days=distance)
    return [dates.to_date_key(first + timedelta(days=offset)) for offset in range(7)]


def previous_month(month: int, year: int) -> Tuple[int, int]:
    _check_month(month, year)
    if month == 1:
        return 12, year - 1
    return month - 1, year


def next_month(month: int, year: int) -> Tuple[int, int]:
    _check_month(month, year)
    if month == 12:
        return 1, year + 1
    return month + 1, year


@dataclass(frozen=True)
class MonthCursor:
    year: int
    month: int

    def __post_init__(self):
        _check_month(self.month, self.year)

    @classmethod
    def current(cls, zone: Optional[tzinfo] = None, clock: Optional[dates.Clock] = None) -> "MonthCursor":
        day = dates.today_date(zone, clock)
        return cls(year=day.year, month=day.month)

    @property
    def label(self) -> str:
        return f"{MONTH_LABELS[self.month - 1]} {self.year}"

    def previous(self) -> "MonthCursor":
        month, year = previous_month(self.month, self.year)
        return MonthCursor(year=year, month=month)

    def next(self) -> "MonthCursor":
        month, year = next_month(self.month, self.year)
        return MonthCursor(year=year, month=month)

    def grid(self, zone: Optional[tzinfo] = None, clock: Optional[dates.Clock] = None) -> MonthGrid:
        return build_month_grid(self.month, self.year, zone, clock)
