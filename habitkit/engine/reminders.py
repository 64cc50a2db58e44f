"""Reminder bookkeeping.

The engine only describes *when* a reminder fires (``ReminderScheduleSpec``)
and keeps the handle an external notification service hands back. Delivery
is entirely the scheduler's business.
"""
import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from habitkit.errors import HabitValidationError
from habitkit.schemas.habit import HabitRecord, Reminder, ReminderScheduleSpec, TimeOfDay

logger = logging.getLogger(__name__)


class NotificationScheduler(Protocol):
    async def schedule(self, spec: ReminderScheduleSpec) -> str:
        ...

    async def cancel(self, handle: str) -> None:
        ...


def build_schedule_spec(hour: int, minute: int, enabled: bool = True) -> ReminderScheduleSpec:
    try:
        return ReminderScheduleSpec(hour=hour, minute=minute, enabled=enabled)
    except ValidationError as exc:
        raise HabitValidationError(f"invalid reminder time {hour}:{minute}") from exc


def _find(record: HabitRecord, reminder_id: str) -> Optional[Reminder]:
    return next((r for r in record.reminders if r.id == reminder_id), None)


def add_reminder(record: HabitRecord, hour: int, minute: int = 0, enabled: bool = True) -> Reminder:
    spec = build_schedule_spec(hour, minute, enabled)
    reminder = Reminder(time_of_day=TimeOfDay(hour=spec.hour, minute=spec.minute), enabled=spec.enabled)
    record.reminders.append(reminder)
    return reminder


def set_reminder_enabled(record: HabitRecord, reminder_id: str, enabled: bool) -> Optional[Reminder]:
    reminder = _find(record, reminder_id)
    if reminder is not None:
        reminder.enabled = enabled
    return reminder


def remove_reminder(record: HabitRecord, reminder_id: str) -> Optional[Reminder]:
    """Drop a reminder from the list. Its handle, if any, is returned with it so the caller can cancel it."""
    reminder = _find(record, reminder_id)
    if reminder is not None:
        record.reminders = [r for r in record.reminders if r.id != reminder_id]
    return reminder


async def sync_reminders(record: HabitRecord, scheduler: NotificationScheduler) -> HabitRecord:
    """Schedule enabled reminders without a handle, cancel disabled ones that still hold one."""
    for reminder in record.reminders:
        if reminder.enabled and not reminder.schedule_handle:
            reminder.schedule_handle = await scheduler.schedule(reminder.schedule_spec())
            logger.info("Scheduled reminder %s for habit %s at %s", reminder.id, record.id, reminder.time_of_day.label())
        elif not reminder.enabled and reminder.schedule_handle:
            await scheduler.cancel(reminder.schedule_handle)
            logger.info("Cancelled reminder %s for habit %s", reminder.id, record.id)
            reminder.schedule_handle = None
    return record


async def cancel_reminders(record: HabitRecord, scheduler: NotificationScheduler) -> HabitRecord:
    for reminder in record.reminders:
        if reminder.schedule_handle:
            await scheduler.cancel(reminder.schedule_handle)
            reminder.schedule_handle = None
    return record
