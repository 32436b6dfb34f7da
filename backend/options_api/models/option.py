"""
Model factory for option tables.

Each registered kind gets its own mapped class built on OptionMixin.
Classes are created once and cached, so repeated calls return the same
mapper.
"""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import mapped_column

from shared.config.constants import Limits
from options_api.registry import OPTION_ENTITIES, OptionEntity

from .base import Base, OptionMixin

_MODELS: dict[str, type[OptionMixin]] = {}


def _class_name(entity: OptionEntity) -> str:
    return "".join(part.capitalize() for part in entity.slug.split("_")) + "Model"


def option_model(entity: OptionEntity) -> type[OptionMixin]:
    """
    Return the mapped class for an option kind, creating it on first use.

    Sequence kinds use an autoincrement integer key; token kinds use a
    string key generated by the service.
    """
    model = _MODELS.get(entity.slug)
    if model is not None:
        return model

    if entity.uses_sequence:
        id_column = mapped_column(Integer, primary_key=True, autoincrement=True)
    else:
        id_column = mapped_column(String(Limits.MAX_ID_LENGTH), primary_key=True)

    attrs: dict[str, object] = {
        "__tablename__": entity.table_name,
        "id": id_column,
    }
    for spec in entity.extra_fields:
        attrs[spec.name] = mapped_column(
            String(spec.max_length),
            nullable=not spec.required,
            index=spec.name in entity.unique_fields,
        )

    model = type(_class_name(entity), (OptionMixin, Base), attrs)
    _MODELS[entity.slug] = model
    return model


def register_all_models() -> dict[str, type[OptionMixin]]:
    """Map every registered kind so Base.metadata knows all tables."""
    return {slug: option_model(entity) for slug, entity in OPTION_ENTITIES.items()}
