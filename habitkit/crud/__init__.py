from habitkit.crud.habits import ProgressStore

__all__ = [
    "ProgressStore",
]
