from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from habitkit.api.deps import get_scheduler, get_store, mutation_lock
from habitkit.crud import ProgressStore
from habitkit.engine.aggregation import (
    daily_summary,
    filter_by_category,
    heatmap_columns,
    list_categories,
    month_grid,
    week_row,
    weekly_time_totals,
)
from habitkit.engine.dates import parse_day, today_id
from habitkit.engine.mutations import create_habit, edit_habit, log_time, toggle_completion
from habitkit.engine.reminders import (
    NotificationScheduler,
    add_reminder,
    cancel_reminders,
    remove_reminder,
    set_reminder_enabled,
    sync_reminders,
)
from habitkit.errors import DuplicateIdError, StorageWriteError
from habitkit.schemas import HabitCreateIn, HabitRecord, HabitUpdateIn, LogTimeIn, ReminderIn, ToggleIn

router = APIRouter(prefix="/v1/habits", tags=["habits"])


class ReminderToggleIn(BaseModel):
    enabled: bool


def _dump(record: HabitRecord) -> Dict[str, Any]:
    return record.to_storage()


async def _get_or_404(store: ProgressStore, habit_id: str) -> HabitRecord:
    record = await store.get(habit_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return record


@router.get("")
async def list_habits(category: Optional[str] = None, store: ProgressStore = Depends(get_store)) -> Dict[str, Any]:
    records = filter_by_category(await store.load_all(), category)
    return {"items": [_dump(r) for r in records]}


@router.get("/categories")
async def categories(store: ProgressStore = Depends(get_store)) -> Dict[str, Any]:
    return {"items": list_categories(await store.load_all())}


@router.get("/summary")
async def summary(day: Optional[str] = None, store: ProgressStore = Depends(get_store)) -> Dict[str, Any]:
    return daily_summary(await store.load_all(), day).model_dump()


@router.post("", status_code=201)
async def create(
    payload: HabitCreateIn,
    store: ProgressStore = Depends(get_store),
    scheduler: Optional[NotificationScheduler] = Depends(get_scheduler),
) -> Dict[str, Any]:
    async with mutation_lock():
        record = create_habit(**payload.model_dump())
        if scheduler is not None:
            await sync_reminders(record, scheduler)
        try:
            await store.insert(record)
        except (DuplicateIdError, StorageWriteError):
            if scheduler is not None:
                await cancel_reminders(record, scheduler)
            raise
    return _dump(record)


@router.get("/{habit_id}")
async def get_habit(habit_id: str, store: ProgressStore = Depends(get_store)) -> Dict[str, Any]:
    return _dump(await _get_or_404(store, habit_id))


@router.patch("/{habit_id}")
async def update_habit(
    habit_id: str,
    payload: HabitUpdateIn,
    store: ProgressStore = Depends(get_store),
    scheduler: Optional[NotificationScheduler] = Depends(get_scheduler),
) -> Dict[str, Any]:
    async with mutation_lock():
        record = await _get_or_404(store, habit_id)
        edit_habit(record, **payload.model_dump(exclude_unset=True))
        if scheduler is not None:
            await sync_reminders(record, scheduler)
        await store.update(record)
    return _dump(record)


@router.delete("/{habit_id}")
async def delete_habit(
    habit_id: str,
    store: ProgressStore = Depends(get_store),
    scheduler: Optional[NotificationScheduler] = Depends(get_scheduler),
) -> Dict[str, Any]:
    async with mutation_lock():
        record = await store.get(habit_id)
        if record is not None and scheduler is not None:
            await cancel_reminders(record, scheduler)
        remaining = await store.remove(habit_id)
    return {"deleted": record is not None, "count": len(remaining)}


@router.post("/{habit_id}/toggle")
async def toggle(habit_id: str, payload: ToggleIn, store: ProgressStore = Depends(get_store)) -> Dict[str, Any]:
    async with mutation_lock():
        record = await _get_or_404(store, habit_id)
        toggle_completion(record, payload.day)
        await store.update(record)
    return _dump(record)


@router.post("/{habit_id}/log")
async def log(habit_id: str, payload: LogTimeIn, store: ProgressStore = Depends(get_store)) -> Dict[str, Any]:
    async with mutation_lock():
        record = await _get_or_404(store, habit_id)
        log_time(record, payload.day, payload.minutes)
        await store.update(record)
    return _dump(record)


@router.post("/{habit_id}/reminders", status_code=201)
async def create_reminder(
    habit_id: str,
    payload: ReminderIn,
    store: ProgressStore = Depends(get_store),
    scheduler: Optional[NotificationScheduler] = Depends(get_scheduler),
) -> Dict[str, Any]:
    async with mutation_lock():
        record = await _get_or_404(store, habit_id)
        add_reminder(record, payload.hour, payload.minute, payload.enabled)
        if scheduler is not None:
            await sync_reminders(record, scheduler)
        await store.update(record)
    return _dump(record)


@router.patch("/{habit_id}/reminders/{reminder_id}")
async def toggle_reminder(
    habit_id: str,
    reminder_id: str,
    payload: ReminderToggleIn,
    store: ProgressStore = Depends(get_store),
    scheduler: Optional[NotificationScheduler] = Depends(get_scheduler),
) -> Dict[str, Any]:
    async with mutation_lock():
        record = await _get_or_404(store, habit_id)
        if set_reminder_enabled(record, reminder_id, payload.enabled) is None:
            raise HTTPException(status_code=404, detail="Reminder not found")
        if scheduler is not None:
            await sync_reminders(record, scheduler)
        await store.update(record)
    return _dump(record)


@router.delete("/{habit_id}/reminders/{reminder_id}")
async def delete_reminder(
    habit_id: str,
    reminder_id: str,
    store: ProgressStore = Depends(get_store),
    scheduler: Optional[NotificationScheduler] = Depends(get_scheduler),
) -> Dict[str, Any]:
    async with mutation_lock():
        record = await _get_or_404(store, habit_id)
        removed = remove_reminder(record, reminder_id)
        if removed is not None and removed.schedule_handle and scheduler is not None:
            await scheduler.cancel(removed.schedule_handle)
        await store.update(record)
    return _dump(record)


@router.get("/{habit_id}/month")
async def month_view(
    habit_id: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
    store: ProgressStore = Depends(get_store),
) -> Dict[str, Any]:
    record = await _get_or_404(store, habit_id)
    today = today_id()
    current = parse_day(today)
    return month_grid(
        record,
        year if year is not None else current.year,
        month if month is not None else current.month,
        today,
    ).model_dump()


@router.get("/{habit_id}/week")
async def week(habit_id: str, day: Optional[str] = None, store: ProgressStore = Depends(get_store)) -> Dict[str, Any]:
    record = await _get_or_404(store, habit_id)
    today = today_id()
    return week_row(record, day or today, today).model_dump()


@router.get("/{habit_id}/heatmap")
async def heatmap(
    habit_id: str, weeks: Optional[int] = None, store: ProgressStore = Depends(get_store)
) -> Dict[str, Any]:
    record = await _get_or_404(store, habit_id)
    columns = heatmap_columns(record, weeks)
    return {"weeks": len(columns), "columns": [c.model_dump() for c in columns]}


@router.get("/{habit_id}/time-totals")
async def time_totals(
    habit_id: str, weeks: Optional[int] = None, store: ProgressStore = Depends(get_store)
) -> Dict[str, Any]:
    record = await _get_or_404(store, habit_id)
    return {"items": [w.model_dump() for w in weekly_time_totals(record, weeks)]}
