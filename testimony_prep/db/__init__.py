"""Key-value storage backends"""

from testimony_prep.db.base import KeyValueStore
from testimony_prep.db.memory import MemoryStore
from testimony_prep.db.sqlite import SQLiteStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
]
