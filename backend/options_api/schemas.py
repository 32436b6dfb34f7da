"""
Pydantic schemas for option kinds.

Schemas are generated per registered kind from its OptionEntity, so every
kind exposes the same shape plus its extra fields. Field values are typed
here but length, format and presence rules are enforced by the service
layer, which reports them as 400 responses.
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, create_model

from options_api.registry import OptionEntity

# Ids arrive as integers for sequence kinds and strings for token kinds
OptionId = Union[int, str]


class OptionInputBase(BaseModel):
    """Shared config for create and update payloads."""

    # Unknown keys (including a caller-supplied id on create) are dropped
    model_config = ConfigDict(extra="ignore")


class OptionOutputBase(BaseModel):
    """Shared config for option responses."""

    model_config = ConfigDict(from_attributes=True)

    id: OptionId
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


def _schema_prefix(entity: OptionEntity) -> str:
    return "".join(part.capitalize() for part in entity.slug.split("_"))


@lru_cache(maxsize=None)
def create_schema(entity: OptionEntity) -> type[OptionInputBase]:
    """Payload for create/one and each item of create/many."""
    fields: dict[str, Any] = {
        "name": (Optional[str], None),
        "description": (Optional[str], None),
    }
    for spec in entity.extra_fields:
        fields[spec.name] = (Optional[str], None)
    return create_model(
        f"{_schema_prefix(entity)}Create",
        __base__=OptionInputBase,
        **fields,
    )


@lru_cache(maxsize=None)
def update_schema(entity: OptionEntity) -> type[OptionInputBase]:
    """Payload for update/one and hard update/one. Only sent fields are applied."""
    return create_model(
        f"{_schema_prefix(entity)}Update",
        __base__=create_schema(entity),
    )


@lru_cache(maxsize=None)
def update_item_schema(entity: OptionEntity) -> type[OptionInputBase]:
    """One item of update/many and hard update/all: the fields plus its id."""
    return create_model(
        f"{_schema_prefix(entity)}UpdateItem",
        __base__=create_schema(entity),
        id=(Optional[OptionId], None),
    )


@lru_cache(maxsize=None)
def output_schema(entity: OptionEntity) -> type[OptionOutputBase]:
    """Response shape for a single option."""
    fields: dict[str, Any] = {
        spec.name: (Optional[str], None) for spec in entity.extra_fields
    }
    return create_model(
        f"{_schema_prefix(entity)}Output",
        __base__=OptionOutputBase,
        **fields,
    )


def payload_dict(payload: BaseModel | dict[str, Any] | None) -> dict[str, Any] | None:
    """Fields the caller actually sent, as a plain dict."""
    if payload is None:
        return None
    if isinstance(payload, BaseModel):
        return payload.model_dump(exclude_unset=True)
    return dict(payload)


class OptionKindOutput(BaseModel):
    """Entry of GET /api/options."""

    slug: str
    label: str
    path: str
    id_strategy: str
    fields: list[str]
    unique_fields: list[str]
    exportable: bool
