"""
Export processor for outbox change events.

Reads PENDING events, groups them by option kind, regenerates each kind's
export once per batch and marks the events PUBLISHED. An export failure
sends the events back to PENDING until they reach the retry limit, after
which they are marked FAILED.

Runs as:
1. An asyncio task started in the FastAPI lifespan
2. A one-shot batch from the CLI (process-outbox) or tests (process_pending)
"""

import asyncio
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from shared.config.logging import export_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import get_db_context
from options_api.exporters import EXPORTERS
from options_api.models import OutboxEvent, OutboxStatus


def process_pending(
    db: Session,
    *,
    export_dir: Path | None = None,
    batch_size: int | None = None,
    max_retries: int | None = None,
) -> int:
    """
    Process one batch of PENDING events.

    Returns:
        Number of events marked PUBLISHED
    """
    export_dir = Path(export_dir or settings.export_dir)
    batch_size = batch_size or settings.export_batch_size
    max_retries = max_retries or settings.export_max_retries

    events = db.execute(
        select(OutboxEvent)
        .where(OutboxEvent.status == OutboxStatus.PENDING)
        .order_by(OutboxEvent.created_at.asc(), OutboxEvent.id.asc())
        .limit(batch_size)
        .with_for_update(skip_locked=True)  # Parallel workers skip claimed rows
    ).scalars().all()

    if not events:
        return 0

    # Claim the batch
    db.execute(
        update(OutboxEvent)
        .where(OutboxEvent.id.in_([e.id for e in events]))
        .values(status=OutboxStatus.PROCESSING)
    )
    db.commit()

    by_entity: dict[str, list[OutboxEvent]] = defaultdict(list)
    for event in events:
        by_entity[event.entity].append(event)

    published = 0
    for slug, entity_events in by_entity.items():
        target = EXPORTERS.get(slug)
        if target is None:
            for event in entity_events:
                event.status = OutboxStatus.FAILED
                event.last_error = f"No exporter registered for {slug}"
            logger.error("Outbox events without exporter", entity=slug, count=len(entity_events))
            continue

        try:
            rows = target.write(db, target.path(export_dir))
        except Exception as e:
            logger.error("Export failed", entity=slug, error=str(e), exc_info=True)
            for event in entity_events:
                event.retry_count += 1
                event.last_error = str(e)
                if event.retry_count >= max_retries:
                    event.status = OutboxStatus.FAILED
                    logger.error(
                        "Outbox event failed after max retries",
                        event_id=event.id,
                        entity=slug,
                    )
                else:
                    event.status = OutboxStatus.PENDING
            continue

        now = datetime.now(timezone.utc)
        for event in entity_events:
            event.status = OutboxStatus.PUBLISHED
            event.processed_at = now
            event.last_error = None
        published += len(entity_events)
        logger.info("Export regenerated", entity=slug, events=len(entity_events), rows=rows)

    db.commit()
    return published


def pending_count(db: Session) -> int:
    """Number of events waiting to be processed."""
    query = select(func.count()).select_from(OutboxEvent).where(
        OutboxEvent.status == OutboxStatus.PENDING
    )
    return db.scalar(query) or 0


class ExportProcessor:
    """
    Polls the outbox and runs process_pending in a worker thread.

    Status transitions: PENDING -> PROCESSING -> PUBLISHED, or back to
    PENDING on failure until FAILED.
    """

    def __init__(self, poll_interval: float | None = None):
        self._poll_interval = poll_interval or settings.export_poll_interval
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the processor loop."""
        if self._running:
            logger.warning("Export processor already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Export processor started", poll_interval=self._poll_interval)

    async def stop(self) -> None:
        """Stop the processor gracefully."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Export processor stopped")

    async def _run_loop(self) -> None:
        while self._running:
            try:
                processed = await asyncio.to_thread(self._process_batch)
                if processed == 0:
                    await asyncio.sleep(self._poll_interval)
            except Exception as e:
                logger.error("Export processor error", error=str(e))
                await asyncio.sleep(self._poll_interval)

    def _process_batch(self) -> int:
        with get_db_context() as db:
            try:
                return process_pending(db)
            except Exception:
                db.rollback()
                raise


# Singleton instance
_processor: ExportProcessor | None = None


def get_export_processor() -> ExportProcessor:
    """Get the singleton export processor instance."""
    global _processor
    if _processor is None:
        _processor = ExportProcessor()
    return _processor


async def start_export_processor() -> None:
    """Start the export processor (FastAPI lifespan startup)."""
    await get_export_processor().start()


async def stop_export_processor() -> None:
    """Stop the export processor (FastAPI lifespan shutdown)."""
    await get_export_processor().stop()
