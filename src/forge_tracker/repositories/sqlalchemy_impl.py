"""SQLAlchemy concrete implementation of the key-value store."""

from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from .interfaces import KeyValueStore, KeyValueStoreError
from ..db.models import KeyValueEntry
from ..utils.logging_config import get_logger, log_exception

logger = get_logger("storage")


class SQLAlchemyKeyValueStore(KeyValueStore):
    """
    KeyValueStore backed by the ``key_value_entries`` table.

    Every write is committed immediately so a crash never loses a mutation
    that already returned. When built with ``engine`` the store owns it and
    disposes it on close.
    """

    def __init__(self, session: Session, engine: Optional[Engine] = None):
        self._session = session
        self._engine = engine

    def get(self, key: str) -> Optional[str]:
        try:
            entry = self._session.get(KeyValueEntry, key)
        except SQLAlchemyError as e:
            self._session.rollback()
            log_exception("storage", e, {"operation": "get", "key": key})
            raise KeyValueStoreError(f"Failed to read key '{key}': {e}") from e
        return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        try:
            entry = self._session.get(KeyValueEntry, key)
            if entry is None:
                self._session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            log_exception("storage", e, {"operation": "set", "key": key})
            raise KeyValueStoreError(f"Failed to write key '{key}': {e}") from e

        logger.debug(f"Stored key '{key}' ({len(value)} chars)")

    def delete(self, key: str) -> None:
        try:
            entry = self._session.get(KeyValueEntry, key)
            if entry is not None:
                self._session.delete(entry)
                self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            log_exception("storage", e, {"operation": "delete", "key": key})
            raise KeyValueStoreError(f"Failed to delete key '{key}': {e}") from e

    def close(self) -> None:
        """Close the session and dispose the owned engine, if any."""
        self._session.close()
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug("Disposed database engine")
