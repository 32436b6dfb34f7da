"""
Utilities module: Exceptions, validators, schemas.
"""

from shared.utils.exceptions import (
    AppException,
    InvalidArgumentError,
    NotFoundError,
    AlreadyExistsError,
    AlreadyDeletedError,
    DatabaseError,
)
from shared.utils.validators import (
    clean_text,
    validate_pattern,
    dedupe_preserving_order,
)
from shared.utils.schemas import ErrorResponse, ResponseMessage, Envelope, envelope

__all__ = [
    # exceptions
    "AppException",
    "InvalidArgumentError",
    "NotFoundError",
    "AlreadyExistsError",
    "AlreadyDeletedError",
    "DatabaseError",
    # validators
    "clean_text",
    "validate_pattern",
    "dedupe_preserving_order",
    # schemas
    "ErrorResponse",
    "ResponseMessage",
    "Envelope",
    "envelope",
]
