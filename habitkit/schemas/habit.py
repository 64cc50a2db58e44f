from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, NonNegativeInt, field_validator, model_validator
from pydantic.alias_generators import to_camel

from habitkit.config import settings
from habitkit.engine.dates import normalize_day


def new_id() -> str:
    return uuid4().hex


class IconType(str, Enum):
    ICON = "icon"
    EMOJI = "emoji"


class HabitKind(str, Enum):
    CHECKMARK = "checkmark"
    TIME = "time"


class TargetPeriodicity(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class ReminderRepeat(str, Enum):
    DAILY = "daily"


class HabitTarget(BaseModel):
    periodicity: TargetPeriodicity = TargetPeriodicity.DAILY
    count: int = Field(default=1, ge=1)


class TimeOfDay(BaseModel):
    hour: int = Field(ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)

    def label(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


class ReminderScheduleSpec(BaseModel):
    """What an external notification service needs to fire a reminder."""

    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)
    repeats: ReminderRepeat = ReminderRepeat.DAILY
    enabled: bool = True

    class Config:
        frozen = True


class Reminder(BaseModel):
    id: str = Field(default_factory=new_id)
    time_of_day: TimeOfDay
    enabled: bool = True
    repeats: ReminderRepeat = ReminderRepeat.DAILY
    schedule_handle: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def _legacy_reminder(cls, data: Any) -> Any:
        # old shape: {id, time: "HH:MM", isEnabled, days, notificationId}
        if not isinstance(data, dict) or "time" not in data:
            return data
        if "timeOfDay" in data or "time_of_day" in data:
            return data
        data = dict(data)
        hour, _, minute = str(data.pop("time")).partition(":")
        data["timeOfDay"] = {"hour": int(hour), "minute": int(minute or 0)}
        if "isEnabled" in data:
            data.setdefault("enabled", data.pop("isEnabled"))
        if "notificationId" in data:
            data.setdefault("scheduleHandle", data.pop("notificationId"))
        data.pop("days", None)
        return data

    def schedule_spec(self) -> ReminderScheduleSpec:
        return ReminderScheduleSpec(
            hour=self.time_of_day.hour,
            minute=self.time_of_day.minute,
            repeats=self.repeats,
            enabled=self.enabled,
        )


class HabitRecord(BaseModel):
    """A habit and its completion history.

    ``completed_dates`` holds unique canonical day ids. For time habits
    ``progress`` maps day ids to logged minutes and every logged day is also
    completed. ``streak`` is derived; it is recomputed by the engine on every
    history change and by the store on load.
    """

    id: str = Field(default_factory=new_id)
    name: str
    icon: str = "dumbbell"
    icon_type: IconType = IconType.ICON
    color: Optional[str] = None
    kind: HabitKind = HabitKind.CHECKMARK
    target: Optional[HabitTarget] = None
    completed_dates: List[str] = Field(default_factory=list)
    progress: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    streak: int = Field(default=0, ge=0)
    categories: List[str] = Field(default_factory=list)
    reminders: List[Reminder] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def _legacy_record(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "kind" not in data and "type" in data:
            data["kind"] = data.pop("type")
        if "hasTarget" in data:
            has_target = data.pop("hasTarget")
            target_type = data.pop("targetType", None)
            target_count = data.pop("targetCount", None)
            if has_target and "target" not in data:
                data["target"] = {"periodicity": target_type or "daily", "count": target_count or 1}
        if data.get("color") == "":
            data["color"] = None
        return data

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("habit name must not be empty")
        return value

    @field_validator("icon_type", mode="before")
    @classmethod
    def _icon_type(cls, value: Any) -> Any:
        if isinstance(value, IconType):
            return value
        return IconType.EMOJI if str(value).lower() == "emoji" else IconType.ICON

    @field_validator("completed_dates", mode="before")
    @classmethod
    def _unique_days(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple, set)):
            return value
        seen: Dict[str, None] = {}
        for item in value:
            seen.setdefault(normalize_day(item), None)
        return list(seen)

    @field_validator("progress", mode="before")
    @classmethod
    def _progress_days(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {normalize_day(k): v for k, v in value.items()}

    @field_validator("categories", mode="before")
    @classmethod
    def _categories(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple, set)):
            return value
        labels: List[str] = []
        lowered = set()
        for item in value:
            label = str(item).strip()
            if label and label.lower() not in lowered:
                lowered.add(label.lower())
                labels.append(label)
        return labels

    @model_validator(mode="after")
    def _logged_days_are_completed(self) -> "HabitRecord":
        if self.kind == HabitKind.TIME:
            self.progress = {d: m for d, m in self.progress.items() if m > 0}
            for d in sorted(self.progress):
                if d not in self.completed_dates:
                    self.completed_dates.append(d)
        return self

    def is_completed(self, day: str) -> bool:
        return day in self.completed_dates

    def minutes_on(self, day: str) -> int:
        return self.progress.get(day, 0)

    def display_color(self, default: Optional[str] = None) -> str:
        if self.color:
            return self.color
        if default is not None:
            return default
        return settings.DEFAULT_HABIT_COLOR

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
