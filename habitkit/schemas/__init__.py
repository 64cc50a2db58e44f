from habitkit.schemas.habit import (
    HabitKind,
    HabitRecord,
    HabitTarget,
    IconType,
    Reminder,
    ReminderRepeat,
    ReminderScheduleSpec,
    TargetPeriodicity,
    TimeOfDay,
)
from habitkit.schemas.payloads import HabitCreateIn, HabitUpdateIn, LogTimeIn, ReminderIn, ToggleIn
from habitkit.schemas.views import DailySummary, DayCell, MonthGrid, WeekColumn, WeekRow, WeekTotal

__all__ = [
    "HabitKind",
    "HabitRecord",
    "HabitTarget",
    "IconType",
    "Reminder",
    "ReminderRepeat",
    "ReminderScheduleSpec",
    "TargetPeriodicity",
    "TimeOfDay",
    "HabitCreateIn",
    "HabitUpdateIn",
    "LogTimeIn",
    "ReminderIn",
    "ToggleIn",
    "DailySummary",
    "DayCell",
    "MonthGrid",
    "WeekColumn",
    "WeekRow",
    "WeekTotal",
]
