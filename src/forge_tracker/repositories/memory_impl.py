"""In-memory implementation of the key-value store for testing."""

from typing import Dict, Optional

from .interfaces import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """In-memory implementation of KeyValueStore."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self.write_count += 1

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        """Copy of every stored value, for assertions."""
        return dict(self._values)
