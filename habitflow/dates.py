"""Local calendar-day identity.

A date key is the zero-padded ``YYYY-MM-DD`` text of the observer's local
year, month and day. Keys are built from those fields only; a timestamp is
never normalised to UTC first, otherwise evening hours west of Greenwich
would land on the previous day.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Optional

from habitflow.errors import MalformedInput

BEFORE = "before"
SAME = "same"
AFTER = "after"

Clock = Callable[[], datetime]

_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def now(zone: Optional[tzinfo] = None, clock: Optional[Clock] = None) -> datetime:
    """Current wall-clock time, read fresh on every call."""
    current = clock() if clock is not None else datetime.now(zone)
    if zone is not None and current.tzinfo is not None:
        current = current.astimezone(zone)
    return current


def to_date_key(point, zone: Optional[tzinfo] = None) -> str:
    if isinstance(point, datetime):
        if zone is not None and point.tzinfo is not None:
            point = point.astimezone(zone)
    elif not isinstance(point, date):
        raise TypeError(f"Expected date or datetime, got {type(point).__name__}")
    return f"{point.year:04d}-{point.month:02d}-{point.day:02d}"


def today(zone: Optional[tzinfo] = None, clock: Optional[Clock] = None) -> str:
    return to_date_key(now(zone, clock), zone)


def today_date(zone: Optional[tzinfo] = None, clock: Optional[Clock] = None) -> date:
    current = now(zone, clock)
    return date(current.year, current.month, current.day)


def compare(a: str, b: str) -> str:
    if a < b:
        return BEFORE
    if a > b:
        return AFTER
    return SAME


def parse_date_key(text) -> str:
    """Validate a manually entered date and return its canonical key."""
    value = str(text or "").strip()
    if not _KEY_PATTERN.match(value):
        raise MalformedInput(f"Invalid date format: {value!r}. Use YYYY-MM-DD")
    try:
        parsed = date.fromisoformat(value)
    except ValueError as exc:
        raise MalformedInput(f"Invalid date: {value!r}") from exc
    return to_date_key(parsed)


def key_to_date(key: str) -> date:
    return date.fromisoformat(parse_date_key(key))


def shift(key: str, days: int) -> str:
    return to_date_key(key_to_date(key) + timedelta(days=days))
