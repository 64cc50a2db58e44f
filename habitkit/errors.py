class HabitError(Exception):
    """Base class for habit engine errors."""


class StorageReadError(HabitError):
    """Stored collection could not be read or decoded. Logged, never raised to callers."""


class StorageWriteError(HabitError):
    """Persisting the collection failed. In-memory state is not rolled back."""


class HabitValidationError(HabitError, ValueError):
    """Input rejected before any mutation was attempted."""


class DuplicateIdError(HabitError):
    def __init__(self, habit_id: str) -> None:
        super().__init__(f"habit id already exists: {habit_id}")
        self.habit_id = habit_id
