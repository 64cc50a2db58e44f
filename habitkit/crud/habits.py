import json
import logging
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from habitkit.config import settings
from habitkit.engine.dates import today_id
from habitkit.engine.streaks import refresh_streak
from habitkit.errors import DuplicateIdError, StorageReadError, StorageWriteError
from habitkit.schemas.habit import HabitRecord
from habitkit.storage import KeyValueStorage

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[HabitRecord])


class ProgressStore:
    """The whole habit collection under one storage key.

    Every write is load, change in memory, save everything back. There is
    no locking: callers must not overlap mutations.
    """

    def __init__(self, storage: KeyValueStorage, key: Optional[str] = None) -> None:
        self.storage = storage
        self.key = key or settings.STORAGE_KEY

    async def load_all(self) -> List[HabitRecord]:
        try:
            raw = await self.storage.get(self.key)
        except Exception as exc:
            logger.warning("Reading %s failed, using an empty collection: %s", self.key, exc)
            return []
        if raw is None:
            return []

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise StorageReadError(f"{self.key} does not hold a list")
            records = _records_adapter.validate_python(payload)
        except (ValueError, StorageReadError) as exc:
            # json.JSONDecodeError and pydantic's ValidationError are both ValueErrors
            logger.warning("Discarding unreadable habit data under %s: %s", self.key, _short(exc))
            return []

        today = today_id()
        for record in records:
            refresh_streak(record, today)
        return records

    async def save_all(self, records: Sequence[HabitRecord]) -> None:
        value = json.dumps([r.to_storage() for r in records], ensure_ascii=False)
        try:
            await self.storage.set(self.key, value)
        except Exception as exc:
            logger.exception("Saving %d habits under %s failed", len(records), self.key)
            raise StorageWriteError(f"saving {self.key} failed: {exc}") from exc

    async def get(self, habit_id: str) -> Optional[HabitRecord]:
        records = await self.load_all()
        return next((r for r in records if r.id == habit_id), None)

    async def insert(self, record: HabitRecord) -> List[HabitRecord]:
        records = await self.load_all()
        if any(r.id == record.id for r in records):
            raise DuplicateIdError(record.id)
        records.append(record)
        await self.save_all(records)
        logger.info("Added habit %s", record.id)
        return records

    async def update(self, record: HabitRecord) -> List[HabitRecord]:
        records = await self.load_all()
        found = False
        for index, existing in enumerate(records):
            if existing.id == record.id:
                records[index] = record
                found = True
        if not found:
            logger.debug("Update for unknown habit %s ignored", record.id)
        await self.save_all(records)
        return records

    async def remove(self, habit_id: str) -> List[HabitRecord]:
        records = await self.load_all()
        remaining = [r for r in records if r.id != habit_id]
        if len(remaining) != len(records):
            logger.info("Removed habit %s", habit_id)
        await self.save_all(remaining)
        return remaining


def _short(exc: Exception, limit: int = 300) -> str:
    text = str(exc).replace("\n", " ")
    return text if len(text) <= limit else text[:limit] + "..."
