"""Abstract repository interfaces for the persistence layer."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreError(Exception):
    """Raised when the storage backend fails to read or write a value."""

    pass


class KeyValueStore(ABC):
    """Synchronous string key-value store used to persist tracker state."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get the value stored under ``key``, or None if it was never set."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; removing a missing key is not an error."""
        pass

    def close(self) -> None:
        """Release backend resources. Stores without any keep the default."""
        pass
