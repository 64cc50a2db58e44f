"""Use cases that change a habit.

Each operation validates its input first, so a rejected call leaves the
record untouched, then updates the history and recomputes the streak in
the same step. Records are changed in place and returned; persisting them
is the caller's job (``ProgressStore.update``).
"""
import logging
from typing import Any, Optional

from pydantic import ValidationError

from habitkit.engine.dates import is_future, normalize_day, today_id
from habitkit.engine.streaks import refresh_streak
from habitkit.errors import HabitValidationError
from habitkit.schemas.habit import HabitKind, HabitRecord

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "icon", "icon_type", "color", "kind", "target", "categories", "reminders")


def _day(day: Optional[str], today: str) -> str:
    return normalize_day(day) if day else today


def _reject_future(day: str, today: str) -> None:
    if is_future(day, today):
        raise HabitValidationError(f"{day} is in the future")


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or str(exc)


def create_habit(name: str, **fields: Any) -> HabitRecord:
    """Build a new habit with a fresh id and an empty history."""
    for derived in ("completed_dates", "progress", "streak"):
        fields.pop(derived, None)
    try:
        record = HabitRecord(name=name, **fields)
    except ValidationError as exc:
        raise HabitValidationError(_validation_message(exc)) from exc
    logger.debug("Created habit %s (%s)", record.id, record.kind.value)
    return record


def edit_habit(record: HabitRecord, **changes: Any) -> HabitRecord:
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise HabitValidationError(f"fields cannot be edited: {', '.join(unknown)}")

    data = record.model_dump()
    data.update(changes)
    try:
        updated = HabitRecord.model_validate(data)
    except ValidationError as exc:
        raise HabitValidationError(_validation_message(exc)) from exc

    if updated.kind == HabitKind.CHECKMARK:
        updated.progress = {}
    for field in EDITABLE_FIELDS:
        setattr(record, field, getattr(updated, field))
    record.completed_dates = updated.completed_dates
    record.progress = updated.progress
    return refresh_streak(record)


def toggle_completion(record: HabitRecord, day: Optional[str] = None, today: Optional[str] = None) -> HabitRecord:
    """Flip ``day`` between done and not done.

    Future days cannot be marked done; one that is already stored can still be
    cleared.
    """
    today = normalize_day(today) if today else today_id()
    key = _day(day, today)
    if key in record.completed_dates:
        record.completed_dates = [d for d in record.completed_dates if d != key]
        record.progress.pop(key, None)
    else:
        _reject_future(key, today)
        record.completed_dates.append(key)
    return refresh_streak(record, today)


def log_time(
    record: HabitRecord, day: Optional[str], minutes: int, today: Optional[str] = None
) -> HabitRecord:
    """Set the minutes spent on ``day``; zero minutes un-completes the day."""
    if record.kind != HabitKind.TIME:
        raise HabitValidationError(f"habit {record.id} is not time-tracked")
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise HabitValidationError(f"minutes must be an integer, got {minutes!r}")
    if minutes < 0:
        raise HabitValidationError("minutes must not be negative")
    today = normalize_day(today) if today else today_id()
    key = _day(day, today)

    if minutes == 0:
        record.progress.pop(key, None)
        record.completed_dates = [d for d in record.completed_dates if d != key]
    else:
        _reject_future(key, today)
        record.progress[key] = minutes
        if key not in record.completed_dates:
            record.completed_dates.append(key)
    return refresh_streak(record, today)
