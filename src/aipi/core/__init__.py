"""Core configuration and error types."""

from .constants import Settings, get_settings
from .errors import (
    AipiError,
    AipiErrorInfo,
    ErrorTag,
    KeyExistsError,
    NotFoundError,
    NotMountedError,
    NotSupportedError,
    ResourceNotFoundError,
    SchemaValidationError,
)

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
    "Settings",
    "get_settings",
]
