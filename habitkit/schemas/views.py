from typing import List, Optional

from pydantic import BaseModel


class DayCell(BaseModel):
    day: str
    day_of_month: int
    weekday: int
    completed: bool
    future: bool
    is_today: bool
    minutes: Optional[int] = None


class MonthGrid(BaseModel):
    year: int
    month: int
    weeks: List[List[Optional[DayCell]]]
    completed_count: int


class WeekRow(BaseModel):
    start: str
    end: str
    cells: List[DayCell]
    completed_count: int
    total_minutes: int


class WeekColumn(BaseModel):
    start: str
    cells: List[DayCell]


class WeekTotal(BaseModel):
    start: str
    end: str
    daily_minutes: List[int]
    total_minutes: int


class DailySummary(BaseModel):
    day: str
    completed: int
    total: int
