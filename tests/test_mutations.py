import pytest

from habitkit.engine.dates import previous_day, today_id
from habitkit.engine.mutations import create_habit, edit_habit, log_time, toggle_completion
from habitkit.errors import HabitValidationError
from habitkit.schemas import HabitKind, HabitTarget, TargetPeriodicity
from tests.conftest import TODAY


def test_create_habit_starts_with_empty_history():
    record = create_habit("  Meditate ", kind="time", categories=["Mind"], completed_dates=["2023-10-25"], streak=5)
    assert record.name == "Meditate"
    assert record.kind == HabitKind.TIME
    assert record.completed_dates == []
    assert record.progress == {}
    assert record.streak == 0
    assert record.id != create_habit("Meditate").id


def test_create_habit_rejects_blank_name():
    with pytest.raises(HabitValidationError, match="name"):
        create_habit("   ")


def test_toggle_on_then_off(checkmark_habit):
    toggle_completion(checkmark_habit, "2023-10-25", today=TODAY)
    assert checkmark_habit.completed_dates == ["2023-10-25"]
    assert checkmark_habit.streak == 1

    toggle_completion(checkmark_habit, "2023-10-25", today=TODAY)
    assert checkmark_habit.completed_dates == []
    assert checkmark_habit.streak == 0


def test_toggle_extends_streak(checkmark_habit):
    for day in ("2023-10-23", "2023-10-24", "2023-10-25"):
        toggle_completion(checkmark_habit, day, today=TODAY)
    assert checkmark_habit.streak == 3

    toggle_completion(checkmark_habit, "2023-10-24", today=TODAY)
    assert checkmark_habit.streak == 1


def test_toggle_defaults_to_today(checkmark_habit):
    toggle_completion(checkmark_habit)
    assert checkmark_habit.completed_dates == [today_id()]
    assert checkmark_habit.streak == 1


def test_toggle_rejects_bad_day(checkmark_habit):
    with pytest.raises(HabitValidationError):
        toggle_completion(checkmark_habit, "2023-13-01", today=TODAY)
    assert checkmark_habit.completed_dates == []


def test_uncompleting_a_time_habit_drops_its_minutes(time_habit):
    log_time(time_habit, "2023-10-25", 45, today=TODAY)
    toggle_completion(time_habit, "2023-10-25", today=TODAY)
    assert time_habit.completed_dates == []
    assert time_habit.progress == {}


def test_log_then_clear_time(time_habit):
    log_time(time_habit, "2023-10-25", 90, today=TODAY)
    assert time_habit.progress == {"2023-10-25": 90}
    assert time_habit.completed_dates == ["2023-10-25"]
    assert time_habit.streak == 1

    log_time(time_habit, "2023-10-25", 0, today=TODAY)
    assert time_habit.progress == {}
    assert time_habit.completed_dates == []
    assert time_habit.streak == 0


def test_log_time_overwrites_and_is_idempotent(time_habit):
    log_time(time_habit, "2023-10-24", 20, today=TODAY)
    log_time(time_habit, "2023-10-24", 35, today=TODAY)
    log_time(time_habit, "2023-10-24", 35, today=TODAY)
    assert time_habit.progress == {"2023-10-24": 35}
    assert time_habit.completed_dates == ["2023-10-24"]
    assert time_habit.streak == 1


def test_clearing_an_unlogged_day_is_a_no_op(time_habit):
    log_time(time_habit, "2023-10-25", 0, today=TODAY)
    assert time_habit.progress == {}
    assert time_habit.completed_dates == []


@pytest.mark.parametrize("minutes", [-1, 1.5, "30", True, None])
def test_log_time_rejects_bad_minutes(time_habit, minutes):
    log_time(time_habit, "2023-10-24", 10, today=TODAY)
    with pytest.raises(HabitValidationError):
        log_time(time_habit, "2023-10-25", minutes, today=TODAY)
    assert time_habit.progress == {"2023-10-24": 10}
    assert time_habit.completed_dates == ["2023-10-24"]


def test_log_time_rejects_checkmark_habits(checkmark_habit):
    with pytest.raises(HabitValidationError, match="not time-tracked"):
        log_time(checkmark_habit, "2023-10-25", 10, today=TODAY)
    assert checkmark_habit.progress == {}


def test_edit_changes_presentation_fields(checkmark_habit):
    edit_habit(
        checkmark_habit,
        name="Evening run",
        color="#123456",
        categories=["Fitness", "Evening"],
        target={"periodicity": "weekly", "count": 4},
    )
    assert checkmark_habit.id == "run"
    assert checkmark_habit.name == "Evening run"
    assert checkmark_habit.color == "#123456"
    assert checkmark_habit.categories == ["Fitness", "Evening"]
    assert checkmark_habit.target == HabitTarget(periodicity=TargetPeriodicity.WEEKLY, count=4)


def test_edit_keeps_history_and_recomputes_streak(checkmark_habit):
    today = today_id()
    checkmark_habit.completed_dates = [previous_day(today), today]
    checkmark_habit.streak = 0
    edit_habit(checkmark_habit, name="Run 5k")
    assert checkmark_habit.completed_dates == [previous_day(today), today]
    assert checkmark_habit.streak == 2


def test_edit_to_checkmark_drops_progress(time_habit):
    log_time(time_habit, "2023-10-25", 30, today=TODAY)
    edit_habit(time_habit, kind="checkmark")
    assert time_habit.kind == HabitKind.CHECKMARK
    assert time_habit.progress == {}
    assert time_habit.completed_dates == ["2023-10-25"]


def test_rejected_edit_leaves_record_unchanged(checkmark_habit):
    before = checkmark_habit.model_dump()
    with pytest.raises(HabitValidationError):
        edit_habit(checkmark_habit, name=" ", color="#000000")
    with pytest.raises(HabitValidationError, match="cannot be edited"):
        edit_habit(checkmark_habit, streak=10)
    assert checkmark_habit.model_dump() == before


def test_future_day_cannot_be_completed(checkmark_habit):
    for day in ("2023-10-23", "2023-10-24", "2023-10-25"):
        toggle_completion(checkmark_habit, day, today=TODAY)
    with pytest.raises(HabitValidationError, match="future"):
        toggle_completion(checkmark_habit, "2023-10-26", today=TODAY)
    assert checkmark_habit.completed_dates == ["2023-10-23", "2023-10-24", "2023-10-25"]
    assert checkmark_habit.streak == 3


def test_stored_future_day_can_still_be_cleared(checkmark_habit):
    checkmark_habit.completed_dates = ["2023-10-25", "2023-10-27"]
    toggle_completion(checkmark_habit, "2023-10-27", today=TODAY)
    assert checkmark_habit.completed_dates == ["2023-10-25"]
    assert checkmark_habit.streak == 1


def test_future_time_cannot_be_logged(time_habit):
    log_time(time_habit, "2023-10-25", 20, today=TODAY)
    with pytest.raises(HabitValidationError, match="future"):
        log_time(time_habit, "2023-10-26", 30, today=TODAY)
    assert time_habit.progress == {"2023-10-25": 20}
    assert time_habit.completed_dates == ["2023-10-25"]
    assert time_habit.streak == 1

    log_time(time_habit, "2023-10-26", 0, today=TODAY)
    assert time_habit.progress == {"2023-10-25": 20}
