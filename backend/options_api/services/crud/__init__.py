"""
Data access helpers for option tables.

- repository: OptionRepository (soft-delete aware queries)
- soft_delete: deleted_at / updated_at helpers
"""

from .repository import OptionRepository
from .soft_delete import apply_changes, mark_deleted, touch_updated

__all__ = [
    "OptionRepository",
    "apply_changes",
    "mark_deleted",
    "touch_updated",
]
