"""
Shared Pydantic schemas used across the application.
"""

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from shared.config.constants import ResponseStatus

DataT = TypeVar("DataT")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Response Envelope
# =============================================================================


class ResponseMessage(BaseModel):
    """Outcome summary attached to every option response."""

    message: str
    status: str = ResponseStatus.OK
    status_code: int = 200
    timestamp: datetime = Field(default_factory=_utcnow)


class Envelope(BaseModel, Generic[DataT]):
    """Successful response: payload plus a response message."""

    data: DataT
    response_message: ResponseMessage


def envelope(data: Any, message: str, status_code: int = 200) -> dict[str, Any]:
    """Build an envelope dict for a router return value."""
    return {
        "data": data,
        "response_message": ResponseMessage(message=message, status_code=status_code),
    }


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Body returned by every AppException."""

    detail: str
