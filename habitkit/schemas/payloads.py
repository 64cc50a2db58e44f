from typing import List, Optional

from pydantic import BaseModel, Field

from habitkit.schemas.habit import HabitKind, HabitTarget, IconType, Reminder


class HabitCreateIn(BaseModel):
    name: str
    icon: str = "dumbbell"
    icon_type: IconType = IconType.ICON
    color: Optional[str] = None
    kind: HabitKind = HabitKind.CHECKMARK
    target: Optional[HabitTarget] = None
    categories: List[str] = Field(default_factory=list)
    reminders: List[Reminder] = Field(default_factory=list)


class HabitUpdateIn(BaseModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    icon_type: Optional[IconType] = None
    color: Optional[str] = None
    kind: Optional[HabitKind] = None
    target: Optional[HabitTarget] = None
    categories: Optional[List[str]] = None
    reminders: Optional[List[Reminder]] = None


class ToggleIn(BaseModel):
    day: Optional[str] = None


class LogTimeIn(BaseModel):
    day: Optional[str] = None
    minutes: int


class ReminderIn(BaseModel):
    hour: int
    minute: int = 0
    enabled: bool = True
