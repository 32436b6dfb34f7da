"""
SQLAlchemy ORM Models Package.

- base: Base class, OptionMixin and the UTCDateTime column type
- option: option_model() factory, one mapped class per registered kind
- outbox: OutboxEvent for export change events
"""

from .base import Base, OptionMixin, UTCDateTime, utcnow
from .option import option_model, register_all_models
from .outbox import OutboxEvent, OutboxStatus

# Map every option table at import time so create_all() sees them
register_all_models()

__all__ = [
    "Base",
    "OptionMixin",
    "UTCDateTime",
    "utcnow",
    "option_model",
    "register_all_models",
    "OutboxEvent",
    "OutboxStatus",
]
