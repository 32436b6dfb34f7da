"""
Change events for exportable option kinds.

- outbox_service: write_change_event() inside the mutation transaction
- export_processor: ExportProcessor and process_pending() consuming them
"""

from .outbox_service import write_change_event
from .export_processor import (
    ExportProcessor,
    get_export_processor,
    pending_count,
    process_pending,
    start_export_processor,
    stop_export_processor,
)

__all__ = [
    "write_change_event",
    "ExportProcessor",
    "get_export_processor",
    "pending_count",
    "process_pending",
    "start_export_processor",
    "stop_export_processor",
]
