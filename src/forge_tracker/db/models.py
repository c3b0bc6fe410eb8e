"""SQLAlchemy models for the Forge tracker."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime

from .database import Base


class KeyValueEntry(Base):
    """A single string value stored under a string key."""

    __tablename__ = "key_value_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key='{self.key}', length={len(self.value or '')})>"
