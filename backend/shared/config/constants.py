"""
Centralized constants for the backend application.
Avoids magic strings and repeated limits across modules.

Usage:
    from shared.config.constants import Limits, IdStrategy, ChangeAction

    if len(name) > Limits.MAX_NAME_LENGTH:
        ...
"""

from typing import Final


# =============================================================================
# Field and batch limits
# =============================================================================


class Limits:
    """Size limits shared by schemas and the lifecycle service."""

    MAX_NAME_LENGTH: Final[int] = 255
    MAX_DESCRIPTION_LENGTH: Final[int] = 255
    MAX_ID_LENGTH: Final[int] = 64
    # Upper bound for every *_many operation
    MAX_BATCH_SIZE: Final[int] = 500


# =============================================================================
# Identifier strategies
# =============================================================================


class IdStrategy:
    """How an option kind gets its primary key."""

    SEQUENCE: Final[str] = "sequence"  # Database-assigned integer
    TOKEN: Final[str] = "token"        # Process-generated string token

    ALL: Final[frozenset[str]] = frozenset({SEQUENCE, TOKEN})


# Token ids look like COUNTRY_OPT_20250724120830123_48213
TOKEN_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d%H%M%S%f"
TOKEN_RANDOM_MIN: Final[int] = 1
TOKEN_RANDOM_MAX: Final[int] = 10_000_000

# Sequence keys are 32-bit INTEGER columns
SEQUENCE_ID_MIN: Final[int] = -(2**31)
SEQUENCE_ID_MAX: Final[int] = 2**31 - 1


# =============================================================================
# Change events
# =============================================================================


class ChangeAction:
    """Actions recorded in the outbox for exportable option kinds."""

    CREATED: Final[str] = "CREATED"
    UPDATED: Final[str] = "UPDATED"
    SOFT_DELETED: Final[str] = "SOFT_DELETED"
    HARD_DELETED: Final[str] = "HARD_DELETED"

    ALL: Final[frozenset[str]] = frozenset({CREATED, UPDATED, SOFT_DELETED, HARD_DELETED})


# =============================================================================
# Response envelope
# =============================================================================


class ResponseStatus:
    """Status strings used in the response envelope."""

    OK: Final[str] = "OK"
    ERROR: Final[str] = "Error"
