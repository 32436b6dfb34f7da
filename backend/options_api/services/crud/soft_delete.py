"""
Timestamp helpers for the option lifecycle.

Soft delete only sets deleted_at; there is no restore. Every helper takes
the timestamp explicitly so a batch shares one instant.
"""

from datetime import datetime
from typing import Any, Iterable, TypeVar

from options_api.models import OptionMixin, utcnow

T = TypeVar("T", bound=OptionMixin)

# Never written from caller data
_PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at", "deleted_at"})


def mark_deleted(entities: Iterable[T], when: datetime | None = None) -> list[T]:
    """Set deleted_at on every entity to the same instant."""
    when = when or utcnow()
    marked = []
    for entity in entities:
        entity.deleted_at = when
        marked.append(entity)
    return marked


def touch_updated(entity: T, when: datetime | None = None) -> T:
    """Refresh updated_at."""
    entity.updated_at = when or utcnow()
    return entity


def apply_changes(entity: T, data: dict[str, Any], when: datetime | None = None) -> T:
    """
    Overwrite the given fields and refresh updated_at.

    id, created_at and deleted_at are never written from caller data.
    """
    for field_name, value in data.items():
        if field_name in _PROTECTED_FIELDS:
            continue
        setattr(entity, field_name, value)
    return touch_updated(entity, when)

