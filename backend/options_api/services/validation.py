"""
Field rules and uniqueness checks for option payloads.

Format rules come from the registry (name, description and each
FieldSpec). Validator ValueErrors are reported as InvalidArgumentError;
uniqueness violations as AlreadyExistsError.
"""

from __future__ import annotations

from typing import Any, Sequence

from shared.config.constants import Limits
from shared.utils.exceptions import AlreadyExistsError, InvalidArgumentError
from shared.utils.validators import clean_text, validate_pattern
from options_api.registry import FieldSpec, OptionEntity
from options_api.services.crud.repository import OptionRepository


def _field_specs(entity: OptionEntity) -> list[FieldSpec]:
    return [
        FieldSpec(name="name", max_length=Limits.MAX_NAME_LENGTH, required=True),
        *entity.extra_fields,
        FieldSpec(name="description", max_length=Limits.MAX_DESCRIPTION_LENGTH),
    ]


def clean_payload(
    entity: OptionEntity,
    data: dict[str, Any] | None,
    *,
    partial: bool,
) -> dict[str, Any]:
    """
    Validate one create or update payload and return its cleaned fields.

    Args:
        entity: Kind the payload belongs to.
        data: Raw fields. Unknown keys (id included) are dropped.
        partial: True for updates, where only the sent fields are checked.

    Raises:
        InvalidArgumentError: If the payload is null or a field breaks its rule.
    """
    if data is None:
        raise InvalidArgumentError(f"{entity.label} cannot be null", entity=entity.slug)

    cleaned: dict[str, Any] = {}
    for spec in _field_specs(entity):
        if partial and spec.name not in data:
            continue
        try:
            value = clean_text(
                data.get(spec.name),
                field=spec.name,
                max_length=spec.max_length,
                required=spec.required,
            )
            if value is not None and spec.pattern:
                validate_pattern(value, spec.pattern, spec.pattern_message or f"Invalid {spec.name}")
        except ValueError as e:
            raise InvalidArgumentError(
                f"{entity.label}: {e}", entity=entity.slug, field=spec.name
            ) from e
        cleaned[spec.name] = value

    if partial and not cleaned:
        raise InvalidArgumentError(
            f"{entity.label} update has no fields to change", entity=entity.slug
        )
    return cleaned


def check_unique(
    entity: OptionEntity,
    repo: OptionRepository,
    candidates: Sequence[tuple[Any, dict[str, Any], dict[str, Any]]],
) -> None:
    """
    Enforce the uniqueness keys of a kind for a batch of writes.

    Args:
        candidates: (id, final_values, changed_values) per record. id is None
            for creates. final_values is the state the record will have
            after the write; changed_values the fields being written.

    Stored rows, soft-deleted ones included, are compared against the
    changed values; the batch is compared against itself on final values.
    Rows that are part of the batch are left out of the stored comparison.

    Raises:
        AlreadyExistsError: On the first conflicting field and value.
    """
    batch_ids = [record_id for record_id, _, _ in candidates if record_id is not None]

    for field_name in entity.unique_fields:
        seen: set[Any] = set()
        for _, final_values, _ in candidates:
            value = final_values.get(field_name)
            if value is None:
                continue
            if value in seen:
                raise AlreadyExistsError(entity.label, field_name, value)
            seen.add(value)

        changed = [
            changed_values[field_name]
            for _, _, changed_values in candidates
            if changed_values.get(field_name) is not None
        ]
        conflict = repo.find_conflict(field_name, changed, exclude_ids=batch_ids)
        if conflict is not None:
            raise AlreadyExistsError(entity.label, field_name, getattr(conflict, field_name))
