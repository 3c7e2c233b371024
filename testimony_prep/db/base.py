"""Abstract key-value store, strategy pattern for SQLite/in-memory switching"""

from abc import ABC, abstractmethod
from typing import List, Optional


class KeyValueStore(ABC):
    """String-keyed blob storage used for sessions, the usage ledger and identity.
    Implemented by both SQLite and in-memory backends."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key if present."""

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List keys starting with prefix, sorted."""
