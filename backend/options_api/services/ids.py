"""
Identifier strategies for option kinds.

Sequence kinds get integer keys from the database. Token kinds get
process-generated keys of the form:

    {PREFIX}_{yyyyMMddHHmmssSSS}_{n}      e.g. COUNTRY_OPT_20250724120830123_48213

where n is a random integer in [1, 10_000_000).
"""

from __future__ import annotations

import random
import re
from datetime import datetime
from typing import Any, Callable, Iterable

from shared.config.constants import (
    SEQUENCE_ID_MAX,
    SEQUENCE_ID_MIN,
    TOKEN_RANDOM_MAX,
    TOKEN_RANDOM_MIN,
    TOKEN_TIMESTAMP_FORMAT,
)
from shared.utils.exceptions import InvalidArgumentError
from options_api.registry import OptionEntity

_rng = random.SystemRandom()

# Attempts before giving up on finding an unused token
MAX_TOKEN_ATTEMPTS = 10

# ASCII digits only, short enough for int() to stay cheap
_SEQUENCE_ID = re.compile(r"[+-]?[0-9]{1,20}")


def generate_token_id(prefix: str, now: datetime | None = None) -> str:
    """Build one token id for the given prefix."""
    now = now or datetime.now()
    # %f is microseconds; the token keeps milliseconds
    stamp = now.strftime(TOKEN_TIMESTAMP_FORMAT)[:-3]
    number = _rng.randrange(TOKEN_RANDOM_MIN, TOKEN_RANDOM_MAX)
    return f"{prefix}_{stamp}_{number}"


def allocate_token_ids(
    prefix: str,
    count: int,
    is_taken: Callable[[str], bool],
) -> list[str]:
    """
    Generate count distinct token ids that are not already stored.

    Args:
        prefix: Token prefix of the kind.
        count: Number of ids needed.
        is_taken: Predicate telling whether an id is already stored.

    Raises:
        RuntimeError: If no free id is found after MAX_TOKEN_ATTEMPTS tries.
    """
    issued: list[str] = []
    seen: set[str] = set()
    for _ in range(count):
        for _attempt in range(MAX_TOKEN_ATTEMPTS):
            candidate = generate_token_id(prefix)
            if candidate not in seen and not is_taken(candidate):
                break
        else:
            raise RuntimeError(f"Could not allocate a unique id for prefix {prefix}")
        seen.add(candidate)
        issued.append(candidate)
    return issued


def coerce_id(entity: OptionEntity, raw: Any) -> int | str:
    """
    Normalize a caller-supplied id to the key type of the kind.

    Raises:
        InvalidArgumentError: If the id is missing or of the wrong shape.
    """
    if raw is None:
        raise InvalidArgumentError(f"{entity.label} id cannot be null", entity=entity.slug)

    if entity.uses_sequence:
        if isinstance(raw, bool):
            raise InvalidArgumentError(f"Invalid {entity.label} id: {raw}", entity=entity.slug)
        if isinstance(raw, int):
            value = raw
        else:
            text = str(raw).strip()
            if _SEQUENCE_ID.fullmatch(text) is None:
                raise InvalidArgumentError(f"Invalid {entity.label} id: {raw}", entity=entity.slug)
            value = int(text)
        if not SEQUENCE_ID_MIN <= value <= SEQUENCE_ID_MAX:
            raise InvalidArgumentError(
                f"{entity.label} id out of range: {raw}", entity=entity.slug
            )
        return value

    text = str(raw).strip()
    if not text:
        raise InvalidArgumentError(f"{entity.label} id cannot be blank", entity=entity.slug)
    return text


def coerce_ids(entity: OptionEntity, raw_ids: Iterable[Any] | None) -> list[int | str]:
    """
    Normalize a list of ids, keeping order and duplicates.

    Raises:
        InvalidArgumentError: If the list is missing or empty, or any id is invalid.
    """
    if raw_ids is None:
        raise InvalidArgumentError(f"{entity.label} ids cannot be null", entity=entity.slug)
    ids = [coerce_id(entity, raw) for raw in raw_ids]
    if not ids:
        raise InvalidArgumentError(f"{entity.label} ids cannot be empty", entity=entity.slug)
    return ids
