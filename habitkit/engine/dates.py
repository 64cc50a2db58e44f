"""Calendar-day identifiers.

A day id is the local calendar date formatted "YYYY-MM-DD". Ids sort
chronologically as plain strings, which the streak and bucketing code
relies on.
"""
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from habitkit.config import settings
from habitkit.errors import HabitValidationError

DayLike = Union[str, date]

_DAY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def day_id(moment: Union[date, datetime]) -> str:
    # datetime keeps its own wall-clock fields; no conversion to UTC.
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def _zone(tz: Optional[str]) -> Optional[ZoneInfo]:
    name = (tz if tz is not None else settings.APP_TIMEZONE) or ""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HabitValidationError(f"unknown timezone: {name}") from exc


def today_id(tz: Optional[str] = None) -> str:
    zone = _zone(tz)
    now = datetime.now(zone) if zone else datetime.now()
    return day_id(now)


def parse_day(value: DayLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise HabitValidationError(f"invalid day: {value!r}")
    m = _DAY_RE.match(value.strip())
    if not m or len(value.strip()) != 10:
        raise HabitValidationError(f"invalid day id '{value}', expected YYYY-MM-DD")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as exc:
        raise HabitValidationError(f"invalid day id '{value}'") from exc


def normalize_day(value: DayLike) -> str:
    """Canonical id for a day id, a date, or a legacy ISO timestamp ("2023-10-25T08:00:00.000Z")."""
    if isinstance(value, (date, datetime)):
        return day_id(value)
    if isinstance(value, str):
        raw = value.strip()
        if "T" in raw:
            raw = raw.split("T", 1)[0]
        return day_id(parse_day(raw))
    raise HabitValidationError(f"invalid day: {value!r}")


def shift_day(day: DayLike, days: int) -> str:
    return day_id(parse_day(day) + timedelta(days=days))


def previous_day(day: DayLike) -> str:
    return shift_day(day, -1)


def week_start(day: DayLike) -> date:
    d = parse_day(day)
    return d - timedelta(days=d.weekday())  # Monday-start


def is_future(day: DayLike, today: DayLike) -> bool:
    return normalize_day(day) > normalize_day(today)
