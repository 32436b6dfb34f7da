"""
Centralized HTTP exceptions for consistent error handling.
Every exception logs itself with its context when raised.

Usage:
    from shared.utils.exceptions import NotFoundError, AlreadyExistsError

    raise NotFoundError("Country option", option_id)
    raise NotFoundError("Gender option", ids=missing_ids)
    raise AlreadyExistsError("Country option", "code", "RW")
"""

from typing import Any, Sequence

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class to get consistent
    logging and a `{"detail": ...}` response body.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


def _format_ids(ids: Sequence[Any]) -> str:
    return "[" + ", ".join(str(i) for i in ids) + "]"


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class InvalidArgumentError(AppException):
    """
    Null or malformed input (400).

    Usage:
        raise InvalidArgumentError("Option id cannot be null")
        raise InvalidArgumentError("Dial code must look like +250", field="dial_code")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Record not found, or soft-deleted for soft-aware operations (404).

    Usage:
        raise NotFoundError("Gender option", 12)
        raise NotFoundError("Gender option", ids=["a", "b"])
    """

    def __init__(
        self,
        entity: str,
        entity_id: int | str | None = None,
        *,
        ids: Sequence[int | str] | None = None,
        **log_context: Any,
    ):
        self.entity = entity
        self.ids = list(ids) if ids is not None else (
            [entity_id] if entity_id is not None else []
        )

        if ids is not None:
            detail = f"{entity} not found with ids: {_format_ids(ids)}"
        elif entity_id is not None:
            detail = f"{entity} not found with id: {entity_id}"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            ids=self.ids,
            **log_context,
        )


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class AlreadyExistsError(AppException):
    """
    Uniqueness violation on create or update (409).

    Usage:
        raise AlreadyExistsError("Country option", "name", "Rwanda")
    """

    def __init__(self, entity: str, field: str, value: Any, **log_context: Any):
        self.entity = entity
        self.field = field
        self.value = value
        detail = f"{entity} already exists with {field}: {value}"
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            entity=entity,
            field=field,
            **log_context,
        )


class AlreadyDeletedError(AppException):
    """
    Soft delete attempted on a record that is already soft-deleted (409).

    Usage:
        raise AlreadyDeletedError("Reason option", ids=[4, 9])
    """

    def __init__(self, entity: str, *, ids: Sequence[int | str], **log_context: Any):
        self.entity = entity
        self.ids = list(ids)
        if len(self.ids) == 1:
            detail = f"{entity} with id: {self.ids[0]} is already deleted"
        else:
            detail = f"{entity} already deleted with ids: {_format_ids(self.ids)}"
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            entity=entity,
            ids=self.ids,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to write export", path=str(path))
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
