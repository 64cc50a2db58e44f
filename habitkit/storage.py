import asyncio
from typing import Callable, Dict, Optional, Protocol

from sqlalchemy.orm import Session

from habitkit.models import KeyValueEntry


class KeyValueStorage(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class SqlKeyValueStorage:
    """Durable key-value pairs in the ``kv_store`` table.

    Sessions are synchronous; each call runs in a worker thread so the
    awaiting caller only suspends for the I/O itself.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self.session_factory = session_factory

    def _get(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            entry = db.get(KeyValueEntry, key)
            return entry.value if entry else None

    def _set(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            entry = db.get(KeyValueEntry, key)
            if entry:
                entry.value = value
            else:
                entry = KeyValueEntry(key=key, value=value)
            db.add(entry)
            db.commit()

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)


class MemoryKeyValueStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
