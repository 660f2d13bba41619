"""
Error hierarchy for aipi.

A single root (:class:`AipiError`) carries all error metadata. Categories are
expressed with tags instead of deep subclassing, so callers check
``err.has_tag(ErrorTag.NOT_FOUND)`` rather than catching a specific class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aipi.models.error_models import ErrorResponse


class ErrorTag(str, Enum):
    """Tags used to categorize errors."""

    NOT_FOUND = "not-found"
    TYPE_ERROR = "type-error"
    NOT_SUPPORTED = "not-supported"


@dataclass
class AipiErrorInfo:
    """Metadata attached to every AipiError.

    Attributes:
        message: Human readable message
        cause: Underlying error or payload that triggered this one
        data: Arbitrary structured data for callers
        tags: Error categories
        unexpected: Marks errors that indicate a bug rather than a user fault
        http_status: Status an HTTP adapter should answer with
        error_code: Code sent to clients in server responses
        http_message: Message sent to clients (empty means generic)
    """

    message: str = "AIPI Error"
    cause: Any = None
    data: Any = None
    tags: list[ErrorTag] = field(default_factory=list)
    unexpected: bool = False
    http_status: int = 500
    error_code: str = ""
    http_message: str = ""


class AipiError(Exception):
    """Root error for everything raised by aipi."""

    def __init__(
        self,
        message: str | None = None,
        *,
        cause: Any = None,
        data: Any = None,
        tags: list[ErrorTag] | None = None,
        unexpected: bool = False,
        http_status: int | None = None,
        error_code: str = "",
        http_message: str | bool = "",
    ) -> None:
        """
        Args:
            message: Human readable message
            cause: Underlying error or payload
            data: Structured data for callers
            tags: Error categories
            unexpected: True if this indicates a bug
            http_status: HTTP status (defaults to 500)
            error_code: Client facing error code
            http_message: Client facing message, ``True`` reuses ``message``
        """
        text = "AIPI Error"
        if unexpected:
            text += " (unexpected)"
        if message:
            text += f": {message}"
        super().__init__(text)

        if http_message is True:
            resolved_http_message = message or ""
        else:
            resolved_http_message = http_message or ""

        self.info = AipiErrorInfo(
            message=message or "AIPI Error",
            cause=cause,
            data=data,
            tags=list(tags or []),
            unexpected=unexpected,
            http_status=http_status or 500,
            error_code=error_code,
            http_message=resolved_http_message,
        )
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def cause_is_aipi_error(self) -> bool:
        return isinstance(self.info.cause, AipiError)

    def add_tag(self, tag: ErrorTag) -> None:
        if tag not in self.info.tags:
            self.info.tags.append(tag)

    def remove_tag(self, tag: ErrorTag) -> None:
        self.info.tags = [t for t in self.info.tags if t != tag]

    def has_tag(self, tag: ErrorTag) -> bool:
        return tag in self.info.tags

    def to_response(self, request_id: str | None = None, path: str | None = None) -> ErrorResponse:
        """Build the standardized error response an HTTP adapter should send.

        Args:
            request_id: Request identifier for tracing
            path: Request path

        Returns:
            ErrorResponse with the public message only
        """
        from aipi.models.error_models import ErrorResponse, error_code_for

        return ErrorResponse(
            code=error_code_for(self),
            message=self.info.http_message or "Internal error",
            request_id=request_id,
            path=path,
            debug={"message": self.info.message, "tags": [t.value for t in self.info.tags]},
        )


class NotFoundError(AipiError):
    """A requested entity (chat, agent, message...) does not exist."""

    def __init__(self, subject: str, message: str | None = None) -> None:
        text = f"{subject} not found" + (f". {message}" if message else "")
        super().__init__(text, tags=[ErrorTag.NOT_FOUND], http_status=404, http_message=True)


class NotSupportedError(AipiError):
    """The adapter does not offer the requested capability."""

    def __init__(self, subject: str, message: str | None = None) -> None:
        text = f"{subject} not supported" + (f". {message}" if message else "")
        super().__init__(text, tags=[ErrorTag.NOT_SUPPORTED], http_status=501)
        self.subject = subject


class ResourceNotFoundError(AipiError):
    """Dependency resolution failed for a mandatory resource."""

    def __init__(self, resource: type | str) -> None:
        name = resource.__name__ if isinstance(resource, type) else str(resource)
        super().__init__(f"Resource {name} not found", tags=[ErrorTag.NOT_FOUND])


class KeyExistsError(AipiError):
    """A persister refused to overwrite an existing entry."""

    def __init__(self, key: Any = None) -> None:
        super().__init__("Key already exists.", data=key, http_status=409, error_code="RES_3002")


class NotMountedError(AipiError):
    """Something that needs a mounted resource was used before mount."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Not yet mounted", http_status=500)


class SchemaValidationError(AipiError):
    """Raised by schema builders when the built schema is invalid.

    The validation messages are available on ``errors`` and ``info.data``.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Schema validation failed", cause=list(errors), data=list(errors), tags=[ErrorTag.TYPE_ERROR])
        self.errors = list(errors)


__all__ = [
    "AipiError",
    "AipiErrorInfo",
    "ErrorTag",
    "KeyExistsError",
    "NotFoundError",
    "NotMountedError",
    "NotSupportedError",
    "ResourceNotFoundError",
    "SchemaValidationError",
]
