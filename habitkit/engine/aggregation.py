"""View buckets for a habit's history: month calendars, week rows,
heatmap columns and per-week time totals.

Everything here is pure and never mutates a record. Weeks start on
Monday. "today" is always a day id so comparisons never depend on the
wall clock's time of day.
"""
import calendar
import math
from datetime import date, timedelta
from typing import Iterable, List, Optional, Set

from habitkit.config import settings
from habitkit.engine.dates import day_id, normalize_day, parse_day, today_id, week_start
from habitkit.errors import HabitValidationError
from habitkit.schemas.habit import HabitKind, HabitRecord
from habitkit.schemas.views import DailySummary, DayCell, MonthGrid, WeekColumn, WeekRow, WeekTotal

HEATMAP_MIN_WEEKS = 52


def _today(today: Optional[str]) -> str:
    return normalize_day(today) if today else today_id()


def _cell(record: HabitRecord, d: date, today: str, done: Set[str]) -> DayCell:
    key = day_id(d)
    return DayCell(
        day=key,
        day_of_month=d.day,
        weekday=d.weekday(),
        completed=key in done,
        future=key > today,
        is_today=key == today,
        minutes=record.minutes_on(key) if record.kind == HabitKind.TIME else None,
    )


def _week_cells(record: HabitRecord, monday: date, today: str, done: Set[str]) -> List[DayCell]:
    return [_cell(record, monday + timedelta(days=i), today, done) for i in range(7)]


def month_grid(record: HabitRecord, year: int, month: int, today: Optional[str] = None) -> MonthGrid:
    if not 1 <= month <= 12:
        raise HabitValidationError(f"month must be in 1..12, got {month}")
    if not 1 <= year <= 9999:
        raise HabitValidationError(f"year out of range: {year}")
    today = _today(today)
    done = set(record.completed_dates)

    try:
        rows = calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(year, month)
    except (ValueError, OverflowError) as exc:
        # padding days fall outside the supported date range
        raise HabitValidationError(f"{year}-{month:02d} is outside the supported calendar") from exc

    weeks: List[List[Optional[DayCell]]] = []
    for week in rows:
        weeks.append([_cell(record, d, today, done) if d.month == month else None for d in week])

    completed_count = sum(1 for row in weeks for cell in row if cell is not None and cell.completed)
    return MonthGrid(year=year, month=month, weeks=weeks, completed_count=completed_count)


def week_row(record: HabitRecord, reference_day: str, today: Optional[str] = None) -> WeekRow:
    today = _today(today)
    monday = week_start(reference_day)
    try:
        cells = _week_cells(record, monday, today, set(record.completed_dates))
    except OverflowError as exc:
        raise HabitValidationError(f"the week of {reference_day} runs past year 9999") from exc
    return WeekRow(
        start=day_id(monday),
        end=day_id(monday + timedelta(days=6)),
        cells=cells,
        completed_count=sum(1 for c in cells if c.completed),
        total_minutes=sum(c.minutes or 0 for c in cells),
    )


def _check_window(window_weeks: int) -> None:
    if window_weeks > settings.MAX_WINDOW_WEEKS:
        raise HabitValidationError(f"window_weeks must be at most {settings.MAX_WINDOW_WEEKS}, got {window_weeks}")


def _first_monday(today: str, weeks: int) -> date:
    try:
        return week_start(today) - timedelta(weeks=weeks - 1)
    except OverflowError as exc:
        raise HabitValidationError(f"a {weeks}-week window reaches before year 1") from exc


def weeks_since_earliest(record: HabitRecord, today: str) -> int:
    past = [d for d in record.completed_dates if d <= today]
    if not past:
        return 0
    delta = (parse_day(today) - parse_day(min(past))).days
    return math.ceil(delta / 7) + 1


def heatmap_window(record: HabitRecord, window_weeks: Optional[int] = None, today: Optional[str] = None) -> int:
    if window_weeks is not None:
        _check_window(window_weeks)
    today = _today(today)
    return max(HEATMAP_MIN_WEEKS, window_weeks or 0, weeks_since_earliest(record, today))


def heatmap_columns(
    record: HabitRecord, window_weeks: Optional[int] = None, today: Optional[str] = None
) -> List[WeekColumn]:
    """Week columns, oldest first, the last one being the current week.

    The window never clips a past completion, and is at least
    ``HEATMAP_MIN_WEEKS`` long.
    """
    today = _today(today)
    weeks = heatmap_window(record, window_weeks, today)
    done = set(record.completed_dates)
    first_monday = _first_monday(today, weeks)

    columns: List[WeekColumn] = []
    for w in range(weeks):
        monday = first_monday + timedelta(weeks=w)
        columns.append(WeekColumn(start=day_id(monday), cells=_week_cells(record, monday, today, done)))
    return columns


def weekly_time_totals(
    record: HabitRecord, window_weeks: Optional[int] = None, today: Optional[str] = None
) -> List[WeekTotal]:
    if window_weeks is None:
        window_weeks = settings.TIME_TOTALS_WEEKS
    if window_weeks < 0:
        raise HabitValidationError("window_weeks must not be negative")
    _check_window(window_weeks)
    today = _today(today)
    first_monday = _first_monday(today, max(window_weeks, 1))

    totals: List[WeekTotal] = []
    for w in range(window_weeks):
        monday = first_monday + timedelta(weeks=w)
        daily = [record.minutes_on(day_id(monday + timedelta(days=i))) for i in range(7)]
        totals.append(
            WeekTotal(
                start=day_id(monday),
                end=day_id(monday + timedelta(days=6)),
                daily_minutes=daily,
                total_minutes=sum(daily),
            )
        )
    return totals


def filter_by_category(records: Iterable[HabitRecord], category: Optional[str]) -> List[HabitRecord]:
    wanted = (category or "").strip().lower()
    if not wanted:
        return list(records)
    return [r for r in records if wanted in {c.lower() for c in r.categories}]


def list_categories(records: Iterable[HabitRecord]) -> List[str]:
    seen = {}
    for record in records:
        for label in record.categories:
            seen.setdefault(label.lower(), label)
    return sorted(seen.values(), key=str.lower)


def daily_summary(records: Iterable[HabitRecord], day: Optional[str] = None) -> DailySummary:
    key = _today(day)
    items = list(records)
    return DailySummary(day=key, completed=sum(1 for r in items if r.is_completed(key)), total=len(items))
