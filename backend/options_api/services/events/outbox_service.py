"""
Outbox writes for exportable option kinds.

Usage in the lifecycle service:
    1. Apply the mutation on the session
    2. Call write_change_event() with the same session
    3. Commit (option rows and event are saved atomically)

The export processor later reads the event and regenerates the export.
"""

import json
from typing import Any, Sequence

from sqlalchemy.orm import Session

from shared.config.constants import ChangeAction
from shared.config.logging import get_logger
from options_api.models import OutboxEvent, OutboxStatus
from options_api.registry import OptionEntity

logger = get_logger(__name__)


def write_change_event(
    db: Session,
    entity: OptionEntity,
    action: str,
    ids: Sequence[Any],
) -> OutboxEvent:
    """
    Queue a change event for an option kind.

    MUST be called within the same transaction as the mutation.

    Args:
        db: Session used for the mutation
        entity: Kind that changed
        action: One of ChangeAction
        ids: Affected option ids (may be empty for hard delete all)

    Returns:
        The pending OutboxEvent (not flushed)
    """
    if action not in ChangeAction.ALL:
        raise ValueError(f"Unknown change action: {action}")

    event = OutboxEvent(
        entity=entity.slug,
        action=action,
        payload=json.dumps([str(i) for i in ids]),
        status=OutboxStatus.PENDING,
        retry_count=0,
    )
    db.add(event)
    # Caller controls the transaction
    logger.debug("Change event queued", entity=entity.slug, action=action, count=len(ids))
    return event
