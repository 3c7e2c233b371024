"""In-process key-value store"""

from typing import Dict, List, Optional

from testimony_prep.db.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dict-backed store; lives as long as the process (like a browser tab)"""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))
