import asyncio
import weakref
from typing import Optional

from habitkit.config import settings
from habitkit.crud import ProgressStore
from habitkit.db import SessionLocal
from habitkit.engine.reminders import NotificationScheduler
from habitkit.storage import KeyValueStorage, MemoryKeyValueStorage, SqlKeyValueStorage

_storage: Optional[KeyValueStorage] = None
_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = weakref.WeakKeyDictionary()


def mutation_lock() -> asyncio.Lock:
    """One read-modify-write at a time per event loop; the store itself does no locking."""
    loop = asyncio.get_running_loop()
    lock = _locks.get(loop)
    if lock is None:
        lock = _locks[loop] = asyncio.Lock()
    return lock


def get_storage() -> KeyValueStorage:
    global _storage
    if _storage is None:
        if settings.STORAGE_BACKEND == "memory":
            _storage = MemoryKeyValueStorage()
        else:
            _storage = SqlKeyValueStorage(SessionLocal)
    return _storage


def get_store() -> ProgressStore:
    return ProgressStore(get_storage(), settings.STORAGE_KEY)


def get_scheduler() -> Optional[NotificationScheduler]:
    # No notification service is wired in by default; an embedding app overrides this dependency.
    return None
