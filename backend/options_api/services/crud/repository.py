"""
Repository for option tables.

Provides the data access layer for OptionService. Soft-deleted rows
(deleted_at set) are hidden unless include_deleted=True.

Usage:
    from options_api.models import option_model
    from options_api.services.crud.repository import OptionRepository

    repo = OptionRepository(option_model(entity), db)
    option = repo.find_by_id("GENDER_OPT_20250724120830123_48213")
    options = repo.find_all(include_deleted=True)
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import delete, exists as sql_exists, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from options_api.models import OptionMixin

ModelT = TypeVar("ModelT", bound=OptionMixin)


class OptionRepository(Generic[ModelT]):
    """Database operations for one option table."""

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> Session:
        """The database session."""
        return self._session

    def _base_query(self) -> Select:
        return select(self._model)

    def _apply_deleted_filter(self, query: Select, include_deleted: bool) -> Select:
        if not include_deleted:
            query = query.where(self._model.deleted_at.is_(None))
        return query

    def _ordered(self, query: Select) -> Select:
        return query.order_by(self._model.created_at.asc(), self._model.id.asc())

    def find_by_id(self, entity_id: Any, *, include_deleted: bool = False) -> ModelT | None:
        """
        Find option by primary key.

        Args:
            entity_id: The primary key value.
            include_deleted: Include soft-deleted rows.

        Returns:
            Option or None if not found.
        """
        query = self._base_query().where(self._model.id == entity_id)
        query = self._apply_deleted_filter(query, include_deleted)
        return self._session.scalar(query)

    def find_by_ids(
        self, entity_ids: Sequence[Any], *, include_deleted: bool = False
    ) -> dict[Any, ModelT]:
        """Find options by primary keys, keyed by id. Missing ids are absent."""
        if not entity_ids:
            return {}
        query = self._base_query().where(self._model.id.in_(list(entity_ids)))
        query = self._apply_deleted_filter(query, include_deleted)
        return {row.id: row for row in self._session.scalars(query).all()}

    def find_all(self, *, include_deleted: bool = False) -> Sequence[ModelT]:
        """All options ordered by creation time, then id."""
        query = self._apply_deleted_filter(self._base_query(), include_deleted)
        return self._session.scalars(self._ordered(query)).all()

    def count(self, *, include_deleted: bool = False) -> int:
        query = select(func.count()).select_from(self._model)
        if not include_deleted:
            query = query.where(self._model.deleted_at.is_(None))
        return self._session.scalar(query) or 0

    def exists(self, entity_id: Any) -> bool:
        """Check if a row exists by id, soft-deleted or not."""
        query = select(sql_exists().where(self._model.id == entity_id))
        return self._session.scalar(query) or False

    def find_conflict(
        self,
        field_name: str,
        values: Sequence[Any],
        *,
        exclude_ids: Sequence[Any] = (),
    ) -> ModelT | None:
        """
        First row, active or soft-deleted, whose field matches one of the values.

        Args:
            field_name: Column checked for uniqueness.
            values: Candidate values.
            exclude_ids: Rows ignored by the check (records being updated).
        """
        if not values:
            return None
        column = getattr(self._model, field_name)
        query = self._base_query().where(column.in_(list(values)))
        if exclude_ids:
            query = query.where(self._model.id.not_in(list(exclude_ids)))
        return self._session.scalars(self._ordered(query).limit(1)).first()

    def add(self, entity: ModelT) -> ModelT:
        """Add option to session (not committed)."""
        self._session.add(entity)
        return entity

    def add_all(self, entities: Sequence[ModelT]) -> Sequence[ModelT]:
        """Add options to session (not committed)."""
        self._session.add_all(entities)
        return entities

    def delete(self, entity: ModelT) -> None:
        """Delete option from session (not committed)."""
        self._session.delete(entity)

    def delete_all(self) -> int:
        """Delete every row of the table (not committed). Returns the row count."""
        result = self._session.execute(delete(self._model))
        return result.rowcount or 0

    def flush(self) -> None:
        self._session.flush()

    def refresh(self, entity: ModelT) -> ModelT:
        """Refresh option from database."""
        self._session.refresh(entity)
        return entity
