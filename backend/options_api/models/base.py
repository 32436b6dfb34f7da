"""
Base class and OptionMixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from shared.config.constants import Limits


def utcnow() -> datetime:
    """Timezone-aware current time used for every timestamp column."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timestamp stored and returned as aware UTC.

    SQLite keeps no offset, so rows read back from it are naive; they are
    tagged as UTC here. Naive values written by callers are taken as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        return None if value is None else _as_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        return None if value is None else _as_utc(value)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class OptionMixin:
    """
    Columns shared by every option table.

    Fields added:
    - name, description: The option label and its optional explanation
    - created_at, updated_at: Set on insert; updated_at refreshed on every update
    - deleted_at: Soft delete marker (None = active)

    The primary key is declared by the model factory because its type
    depends on the kind's id strategy.
    """

    name: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(
        String(Limits.MAX_DESCRIPTION_LENGTH), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(), nullable=True, index=True
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, "id", None)
        state = "deleted" if self.is_deleted else "active"
        return f"<{class_name}(id={id_val}, {state})>"
