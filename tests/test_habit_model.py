import pytest
from pydantic import ValidationError

from habitkit.config import settings
from habitkit.schemas import (
    HabitKind,
    HabitRecord,
    IconType,
    Reminder,
    ReminderScheduleSpec,
    TargetPeriodicity,
)

LEGACY_RECORD = {
    "id": "legacy-1",
    "name": "  Read  ",
    "icon": "📚",
    "iconType": "emoji",
    "color": "",
    "type": "time",
    "hasTarget": True,
    "targetType": "weekly",
    "targetCount": 3,
    "completedDates": ["2023-10-25T08:00:00.000Z", "2023-10-25"],
    "progress": {"2023-10-24": 30},
    "streak": 9,
    "categories": ["Study", "study", " "],
    "reminders": [
        {"id": "r1", "time": "07:30", "isEnabled": True, "days": [1, 2, 3], "notificationId": "n-1"}
    ],
    "createdAt": "2023-10-01T10:00:00",
}


def test_defaults():
    record = HabitRecord(name="Run")
    assert record.id
    assert record.kind == HabitKind.CHECKMARK
    assert record.icon_type == IconType.ICON
    assert record.completed_dates == []
    assert record.progress == {}
    assert record.streak == 0
    assert record.target is None


def test_blank_name_is_rejected():
    with pytest.raises(ValidationError):
        HabitRecord(name="   ")


def test_negative_minutes_are_rejected():
    with pytest.raises(ValidationError):
        HabitRecord(name="Read", kind="time", progress={"2023-10-25": -5})


def test_completed_dates_are_normalized_and_unique():
    record = HabitRecord(name="Run", completed_dates=["2023-10-24", "2023-10-24T23:00:00Z", "2023-10-25"])
    assert record.completed_dates == ["2023-10-24", "2023-10-25"]


def test_invalid_day_in_history_is_rejected():
    with pytest.raises(ValidationError):
        HabitRecord(name="Run", completed_dates=["not-a-day"])


def test_logged_days_are_completed_for_time_habits():
    record = HabitRecord(name="Read", kind="time", progress={"2023-10-23": 30, "2023-10-24": 0})
    assert record.progress == {"2023-10-23": 30}
    assert record.completed_dates == ["2023-10-23"]
    assert record.minutes_on("2023-10-23") == 30
    assert record.minutes_on("2023-10-24") == 0


def test_legacy_record_is_upgraded():
    record = HabitRecord.model_validate(LEGACY_RECORD)
    assert record.name == "Read"
    assert record.kind == HabitKind.TIME
    assert record.icon_type == IconType.EMOJI
    assert record.color is None
    assert record.target.periodicity == TargetPeriodicity.WEEKLY
    assert record.target.count == 3
    assert record.completed_dates == ["2023-10-25", "2023-10-24"]
    assert record.categories == ["Study"]

    reminder = record.reminders[0]
    assert reminder.id == "r1"
    assert reminder.time_of_day.hour == 7
    assert reminder.time_of_day.minute == 30
    assert reminder.enabled is True
    assert reminder.schedule_handle == "n-1"


def test_unknown_icon_type_falls_back_to_icon():
    assert HabitRecord(name="Run", icon_type="sticker").icon_type == IconType.ICON


def test_categories_dedupe_case_insensitively():
    record = HabitRecord(name="Run", categories=[" Fitness", "fitness", "Morning", ""])
    assert record.categories == ["Fitness", "Morning"]


def test_storage_dump_uses_camel_case_keys():
    record = HabitRecord(name="Run", completed_dates=["2023-10-25"])
    record.reminders.append(Reminder(time_of_day={"hour": 8}))
    data = record.to_storage()
    assert {"id", "name", "iconType", "completedDates", "createdAt", "streak"} <= set(data)
    assert "completed_dates" not in data
    assert data["reminders"][0]["timeOfDay"] == {"hour": 8, "minute": 0}
    assert data["reminders"][0]["scheduleHandle"] is None
    assert HabitRecord.model_validate(data).to_storage() == data


def test_display_color_falls_back_to_default():
    assert HabitRecord(name="Run", color="#FF0000").display_color() == "#FF0000"
    assert HabitRecord(name="Run").display_color() == settings.DEFAULT_HABIT_COLOR
    assert HabitRecord(name="Run").display_color("#000000") == "#000000"


def test_target_count_must_be_positive():
    with pytest.raises(ValidationError):
        HabitRecord(name="Run", target={"periodicity": "weekly", "count": 0})


@pytest.mark.parametrize("hour, minute", [(24, 0), (-1, 0), (7, 60), (7, -1)])
def test_schedule_spec_rejects_out_of_range_times(hour, minute):
    with pytest.raises(ValidationError):
        ReminderScheduleSpec(hour=hour, minute=minute)


def test_schedule_spec_is_frozen():
    spec = ReminderScheduleSpec(hour=7, minute=30)
    with pytest.raises(ValidationError):
        spec.hour = 8


def test_reminder_builds_its_schedule_spec():
    reminder = Reminder(time_of_day={"hour": 21, "minute": 5}, enabled=False)
    assert reminder.schedule_spec() == ReminderScheduleSpec(hour=21, minute=5, enabled=False)
    assert reminder.time_of_day.label() == "21:05"
