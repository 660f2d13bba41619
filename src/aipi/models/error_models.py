"""
Standardized error response models for aipi.

Any HTTP adapter sitting on top of aipi renders :class:`AipiError` through
these models so clients get one consistent error shape.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from aipi.core.errors import ErrorTag

if TYPE_CHECKING:
    from aipi.core.errors import AipiError


class ErrorCode(str, Enum):
    """Client facing error codes."""

    # Resource errors (3xxx)
    RESOURCE_NOT_FOUND = "RES_3001"
    RESOURCE_ALREADY_EXISTS = "RES_3002"

    # Capability errors (4xxx)
    NOT_SUPPORTED = "CAP_4001"

    # Validation errors (2xxx)
    VALIDATION_ERROR = "VAL_2001"

    # Internal errors (9xxx)
    INTERNAL_ERROR = "INT_9001"
    INTERNAL_UNEXPECTED = "INT_9999"


class ErrorResponse(BaseModel):
    """Standardized error response model.

    Example response:
    {
        "error": {
            "code": "RES_3001",
            "message": "chat not found",
            "request_id": "req_abc123",
            "timestamp": "2025-01-15T10:30:00Z",
            "path": "/chats/abc"
        }
    }
    """

    code: ErrorCode | str
    message: str
    request_id: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    path: str | None = None
    # Debug info - only included on request
    debug: dict[str, Any] | None = Field(default=None, exclude=True)

    def to_dict(self, include_debug: bool = False) -> dict[str, Any]:
        """Convert to dictionary for a JSON response.

        Args:
            include_debug: Include debug information (only in development)
        """
        data = self.model_dump(mode="json", exclude_none=True)
        if include_debug and self.debug:
            data["debug"] = self.debug
        return {"error": data}


# HTTP status code mappings for error codes
ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.RESOURCE_NOT_FOUND: 404,
    ErrorCode.RESOURCE_ALREADY_EXISTS: 409,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.NOT_SUPPORTED: 501,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.INTERNAL_UNEXPECTED: 500,
}


def error_code_for(error: AipiError) -> ErrorCode | str:
    """Pick the client facing code for an error.

    An explicit ``error_code`` on the error wins, otherwise the code is
    derived from its tags.
    """
    if error.info.error_code:
        return error.info.error_code
    if error.info.unexpected:
        return ErrorCode.INTERNAL_UNEXPECTED
    if error.has_tag(ErrorTag.NOT_FOUND):
        return ErrorCode.RESOURCE_NOT_FOUND
    if error.has_tag(ErrorTag.NOT_SUPPORTED):
        return ErrorCode.NOT_SUPPORTED
    if error.has_tag(ErrorTag.TYPE_ERROR):
        return ErrorCode.VALIDATION_ERROR
    return ErrorCode.INTERNAL_ERROR


def get_status_code(error: AipiError) -> int:
    """Get HTTP status for an error, preferring the status it carries."""
    if error.info.http_status != 500:
        return error.info.http_status
    code = error_code_for(error)
    if isinstance(code, ErrorCode):
        return ERROR_CODE_TO_STATUS.get(code, 500)
    return 500


__all__ = [
    "ERROR_CODE_TO_STATUS",
    "ErrorCode",
    "ErrorResponse",
    "error_code_for",
    "get_status_code",
]
