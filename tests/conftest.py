import pytest

from habitkit.crud import ProgressStore
from habitkit.db import build_engine, build_session_factory
from habitkit.models import Base
from habitkit.schemas import HabitKind, HabitRecord
from habitkit.storage import MemoryKeyValueStorage, SqlKeyValueStorage

TODAY = "2023-10-25"  # a Wednesday


class FakeScheduler:
    """Records schedule/cancel calls instead of talking to a notification service."""

    def __init__(self):
        self.scheduled = []
        self.cancelled = []

    async def schedule(self, spec):
        handle = f"notification-{len(self.scheduled) + 1}"
        self.scheduled.append((handle, spec))
        return handle

    async def cancel(self, handle):
        self.cancelled.append(handle)


class BrokenStorage:
    def __init__(self, fail_get=False, fail_set=True):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.data = {}

    async def get(self, key):
        if self.fail_get:
            raise OSError("disk unavailable")
        return self.data.get(key)

    async def set(self, key, value):
        if self.fail_set:
            raise OSError("disk full")
        self.data[key] = value


@pytest.fixture
def memory_storage():
    return MemoryKeyValueStorage()


@pytest.fixture
def store(memory_storage):
    return ProgressStore(memory_storage, "@test_habits")


@pytest.fixture
def sql_storage(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'habits.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlKeyValueStorage(build_session_factory(engine))
    engine.dispose()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def checkmark_habit():
    return HabitRecord(id="run", name="Run", categories=["Fitness", "Morning"])


@pytest.fixture
def time_habit():
    return HabitRecord(id="read", name="Read", kind=HabitKind.TIME, categories=["Study"])
