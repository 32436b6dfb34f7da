"""
Lifecycle service for option kinds.

One OptionService instance serves one kind for one request. Every
operation is a single transaction: the whole input is validated first,
then the mutation is applied and committed. Batch operations collect
every offending id before failing, so nothing is partially applied.

States:
    ACTIVE (deleted_at is None) --soft delete--> SOFT_DELETED
    either state --hard delete--> removed
    hard update is allowed in both states and keeps deleted_at

Usage:
    from options_api.registry import get_entity
    from options_api.services.option_service import OptionService

    service = OptionService(db, get_entity("execution_period_option"))
    created = service.create_one({"name": "Quarterly", "description": "Every 3 months"})
    service.soft_delete_one(created.id)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Sequence

from pydantic import BaseModel
from sqlalchemy.orm import Session

from shared.config.constants import ChangeAction, Limits
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    AlreadyDeletedError,
    DatabaseError,
    InvalidArgumentError,
    NotFoundError,
)
from shared.utils.validators import dedupe_preserving_order
from options_api.exporters import EXPORTERS
from options_api.models import OptionMixin, option_model, utcnow
from options_api.registry import OptionEntity
from options_api.schemas import OptionOutputBase, output_schema, payload_dict
from options_api.services.crud.repository import OptionRepository
from options_api.services.crud.soft_delete import apply_changes, mark_deleted
from options_api.services.events.outbox_service import write_change_event
from options_api.services.ids import allocate_token_ids, coerce_id, coerce_ids
from options_api.services.validation import check_unique, clean_payload

logger = get_logger(__name__)

Payload = BaseModel | dict[str, Any]


class OptionService:
    """
    Create, read, update and delete options of one kind.

    Args:
        db: Request-scoped session.
        entity: Registry entry of the kind.
        export_sync: Regenerate the export inline after each write instead
            of queueing an outbox event. Defaults to settings.export_sync.
        export_dir: Directory for inline exports. Defaults to settings.export_dir.
    """

    def __init__(
        self,
        db: Session,
        entity: OptionEntity,
        *,
        export_sync: bool | None = None,
        export_dir: Path | None = None,
    ):
        self._db = db
        self._entity = entity
        self._model = option_model(entity)
        self._repo = OptionRepository(self._model, db)
        self._output_schema = output_schema(entity)
        self._export_sync = settings.export_sync if export_sync is None else export_sync
        self._export_dir = Path(export_dir or settings.export_dir)

    @property
    def entity(self) -> OptionEntity:
        return self._entity

    @property
    def repo(self) -> OptionRepository:
        return self._repo

    @property
    def label(self) -> str:
        return self._entity.label

    # =========================================================================
    # Create
    # =========================================================================

    def create_one(self, data: Payload | None) -> OptionOutputBase:
        """
        Create one option.

        Raises:
            InvalidArgumentError: If data is null or a field breaks its rule.
            AlreadyExistsError: If a uniqueness key is already used.
        """
        if data is None:
            raise InvalidArgumentError(f"{self.label} cannot be null", entity=self._entity.slug)
        return self.create_many([data])[0]

    def create_many(self, items: Sequence[Payload | None] | None) -> list[OptionOutputBase]:
        """
        Create several options atomically.

        Every item is validated, then uniqueness is checked against the
        stored rows (soft-deleted included) and within the batch.

        Raises:
            InvalidArgumentError: If the list is null, empty or too long, or any item is invalid.
            AlreadyExistsError: If any uniqueness key is already used or repeated.
        """
        items = self._require_batch(items)
        cleaned = [
            clean_payload(self._entity, payload_dict(item), partial=False) for item in items
        ]
        check_unique(self._entity, self._repo, [(None, values, values) for values in cleaned])

        now = utcnow()
        if self._entity.uses_sequence:
            ids: list[Any] = [None] * len(cleaned)
        else:
            ids = allocate_token_ids(self._entity.id_prefix, len(cleaned), self._repo.exists)

        records = []
        for option_id, values in zip(ids, cleaned):
            record = self._model(**values, created_at=now, updated_at=now, deleted_at=None)
            if option_id is not None:
                record.id = option_id
            records.append(record)
        self._repo.add_all(records)

        self._commit(ChangeAction.CREATED, records, operation="create")
        logger.info(
            "Options created",
            entity=self._entity.slug,
            ids=[r.id for r in records],
        )
        return [self.to_output(r) for r in records]

    # =========================================================================
    # Read
    # =========================================================================

    def read_one(self, option_id: Any) -> OptionOutputBase:
        """
        Read one active option.

        Raises:
            InvalidArgumentError: If the id is null or malformed.
            NotFoundError: If the option is absent or soft-deleted.
        """
        option_id = coerce_id(self._entity, option_id)
        record = self._repo.find_by_id(option_id)
        if record is None:
            raise NotFoundError(self.label, option_id)
        return self.to_output(record)

    def read_many(self, option_ids: Iterable[Any] | None) -> list[OptionOutputBase]:
        """
        Read active options by id.

        Missing and soft-deleted ids are skipped. Repeated ids are returned
        once, in the order they were first requested.
        """
        ids = dedupe_preserving_order(coerce_ids(self._entity, option_ids))
        found = self._repo.find_by_ids(ids)
        return [self.to_output(found[i]) for i in ids if i in found]

    def read_all(self) -> list[OptionOutputBase]:
        """All active options in creation order. Empty list when there are none."""
        return [self.to_output(r) for r in self._repo.find_all()]

    def hard_read_all(self) -> list[OptionOutputBase]:
        """All options, soft-deleted included."""
        return [self.to_output(r) for r in self._repo.find_all(include_deleted=True)]

    def count(self, *, include_deleted: bool = False) -> int:
        return self._repo.count(include_deleted=include_deleted)

    # =========================================================================
    # Update
    # =========================================================================

    def update_one(self, option_id: Any, data: Payload | None) -> OptionOutputBase:
        """
        Update an active option with the fields present in data.

        Raises:
            InvalidArgumentError: If the id or data is null or a field breaks its rule.
            NotFoundError: If the option is absent or soft-deleted.
            AlreadyExistsError: If the change collides with another option.
        """
        return self._update([(option_id, data)], include_deleted=False)[0]

    def update_many(self, items: Sequence[Payload | None] | None) -> list[OptionOutputBase]:
        """
        Update several active options. Each item carries its own id.

        Raises:
            NotFoundError: Listing every id that is absent or soft-deleted.
        """
        return self._update(self._split_items(items), include_deleted=False)

    def hard_update_one(self, option_id: Any, data: Payload | None) -> OptionOutputBase:
        """
        Update an option whatever its deletion state. deleted_at is kept.

        Field rules and uniqueness still apply.
        """
        return self._update([(option_id, data)], include_deleted=True)[0]

    def hard_update_many(self, items: Sequence[Payload | None] | None) -> list[OptionOutputBase]:
        """Hard update several options. Each item carries its own id."""
        return self._update(self._split_items(items), include_deleted=True)

    def _split_items(self, items: Sequence[Payload | None] | None) -> list[tuple[Any, Any]]:
        items = self._require_batch(items)
        pairs = []
        for item in items:
            data = payload_dict(item)
            if data is None:
                raise InvalidArgumentError(f"{self.label} cannot be null", entity=self._entity.slug)
            pairs.append((data.pop("id", None), data))
        return pairs

    def _update(
        self,
        pairs: Sequence[tuple[Any, Payload | None]],
        *,
        include_deleted: bool,
    ) -> list[OptionOutputBase]:
        ids = [coerce_id(self._entity, option_id) for option_id, _ in pairs]
        if len(set(ids)) != len(ids):
            raise InvalidArgumentError(
                f"{self.label} ids must not repeat in one update", entity=self._entity.slug
            )
        changes = [
            clean_payload(self._entity, payload_dict(data), partial=True) for _, data in pairs
        ]

        found = self._repo.find_by_ids(ids, include_deleted=include_deleted)
        missing = [i for i in ids if i not in found]
        if missing:
            self._raise_not_found(missing)

        candidates = []
        for option_id, changed in zip(ids, changes):
            record = found[option_id]
            final = {name: getattr(record, name) for name in self._entity.unique_fields}
            final.update({k: v for k, v in changed.items() if k in final})
            candidates.append((option_id, final, changed))
        check_unique(self._entity, self._repo, candidates)

        now = utcnow()
        records = [apply_changes(found[i], changed, now) for i, changed in zip(ids, changes)]

        self._commit(ChangeAction.UPDATED, records, operation="update")
        logger.info(
            "Options updated",
            entity=self._entity.slug,
            ids=ids,
            hard=include_deleted,
        )
        return [self.to_output(r) for r in records]

    # =========================================================================
    # Soft delete
    # =========================================================================

    def soft_delete_one(self, option_id: Any) -> OptionOutputBase:
        """
        Mark one option as deleted.

        Raises:
            NotFoundError: If the option does not exist.
            AlreadyDeletedError: If it is already soft-deleted.
        """
        return self.soft_delete_many([option_id])[0]

    def soft_delete_many(self, option_ids: Iterable[Any] | None) -> list[OptionOutputBase]:
        """
        Mark several options as deleted with one shared timestamp.

        All ids must exist (missing ones are reported together), then none
        may already be deleted (also reported together).
        """
        ids = dedupe_preserving_order(coerce_ids(self._entity, option_ids))
        self._check_batch_size(ids)
        found = self._repo.find_by_ids(ids, include_deleted=True)

        missing = [i for i in ids if i not in found]
        if missing:
            self._raise_not_found(missing)

        already = [i for i in ids if found[i].is_deleted]
        if already:
            raise AlreadyDeletedError(self.label, ids=already)

        records = mark_deleted((found[i] for i in ids), utcnow())

        self._commit(ChangeAction.SOFT_DELETED, records, operation="soft delete")
        logger.info("Options soft deleted", entity=self._entity.slug, ids=ids)
        return [self.to_output(r) for r in records]

    # =========================================================================
    # Hard delete
    # =========================================================================

    def hard_delete_one(self, option_id: Any) -> OptionOutputBase:
        """
        Permanently remove one option, soft-deleted or not.

        Returns:
            The option as it was before removal.
        """
        return self.hard_delete_many([option_id])[0]

    def hard_delete_many(self, option_ids: Iterable[Any] | None) -> list[OptionOutputBase]:
        """
        Permanently remove several options.

        Raises:
            NotFoundError: Listing every id absent from the store. Nothing is removed.
        """
        ids = dedupe_preserving_order(coerce_ids(self._entity, option_ids))
        self._check_batch_size(ids)
        found = self._repo.find_by_ids(ids, include_deleted=True)

        missing = [i for i in ids if i not in found]
        if missing:
            self._raise_not_found(missing)

        removed = [self.to_output(found[i]) for i in ids]
        for option_id in ids:
            self._repo.delete(found[option_id])

        self._commit(ChangeAction.HARD_DELETED, ids, operation="hard delete")
        logger.info("Options hard deleted", entity=self._entity.slug, ids=ids)
        return removed

    def hard_delete_all(self) -> int:
        """
        Permanently remove every option of the kind.

        Returns:
            Number of removed rows.
        """
        removed = self._repo.delete_all()
        self._commit(ChangeAction.HARD_DELETED, [], operation="hard delete all")
        logger.info("All options hard deleted", entity=self._entity.slug, count=removed)
        return removed

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, record: OptionMixin) -> OptionOutputBase:
        return self._output_schema.model_validate(record)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_batch(self, items: Sequence[Any] | None) -> list[Any]:
        if items is None:
            raise InvalidArgumentError(f"{self.label} list cannot be null", entity=self._entity.slug)
        items = list(items)
        if not items:
            raise InvalidArgumentError(f"{self.label} list cannot be empty", entity=self._entity.slug)
        if any(item is None for item in items):
            raise InvalidArgumentError(f"{self.label} cannot be null", entity=self._entity.slug)
        self._check_batch_size(items)
        return items

    def _check_batch_size(self, items: Sequence[Any]) -> None:
        if len(items) > Limits.MAX_BATCH_SIZE:
            raise InvalidArgumentError(
                f"{self.label} batch cannot exceed {Limits.MAX_BATCH_SIZE} items",
                entity=self._entity.slug,
                size=len(items),
            )

    def _raise_not_found(self, missing: list[Any]) -> None:
        if len(missing) == 1:
            raise NotFoundError(self.label, missing[0])
        raise NotFoundError(self.label, ids=missing)

    def _commit(self, action: str, changed: Sequence[Any], *, operation: str) -> None:
        """
        Commit the pending mutation, queueing a change event for exportable kinds.

        Raises:
            DatabaseError: If the flush or commit fails (after rollback).
        """
        queue_event = self._entity.exportable and not self._export_sync
        try:
            if queue_event:
                self._db.flush()
                ids = [c.id if isinstance(c, OptionMixin) else c for c in changed]
                write_change_event(self._db, self._entity, action, ids)
            safe_commit(self._db)
        except Exception as e:
            self._db.rollback()
            logger.error(
                f"Failed to {operation} {self.label}",
                entity=self._entity.slug,
                error=str(e),
            )
            raise DatabaseError(f"{operation} of {self.label.lower()}") from e

        if self._entity.exportable and self._export_sync:
            self._export_now()

    def _export_now(self) -> None:
        target = EXPORTERS.get(self._entity.slug)
        if target is None:
            return
        try:
            target.write(self._db, target.path(self._export_dir))
        except Exception as e:
            # The write is committed; a failed inline export is reported, not rolled back
            logger.error(
                "Inline export failed",
                entity=self._entity.slug,
                error=str(e),
                exc_info=True,
            )
