"""Base model classes and mixins."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import JSON, Column, DateTime, Integer, inspect
from sqlalchemy.dialects.postgresql import JSONB

from src.core.database import Base

# JSON everywhere, JSONB on PostgreSQL
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin for adding created_at and updated_at timestamps."""

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Record creation timestamp"
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Record last update timestamp"
    )


class BaseModel(Base, TimestampMixin):
    """
    Base model class with common fields and functionality.

    Every catalog entity (artists, genres, albums, singles, metadata,
    copyrights and stats) carries an integer surrogate key and creation /
    update timestamps.
    """

    __abstract__ = True

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Primary key"
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model instance to dictionary."""
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Decimal):
                value = float(value)
            result[column.name] = value
        return result

    def loaded(self, key: str) -> Any:
        """Value of an attribute if it is already loaded, without triggering IO."""
        if key in inspect(self).unloaded:
            return None
        return getattr(self, key)

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"
