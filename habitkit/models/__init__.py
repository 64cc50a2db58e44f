from habitkit.models.base import Base
from habitkit.models.kv_entry import KeyValueEntry

__all__ = [
    "Base",
    "KeyValueEntry",
]
