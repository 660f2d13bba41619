"""
Constants and configuration for aipi.
Centralizes magic numbers and configuration values.
Includes Pydantic validation for environment variables.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ============================================================================
# Registry Configuration
# ============================================================================

#: Priority used by ``AipiRegistry.use`` when none is given.
#: Resources with a higher priority are resolved first.
DEFAULT_PRIORITY = 100

#: Priority for resources registered by presets.
#: Lower than DEFAULT_PRIORITY so user-registered resources always win.
DEFAULT_RESOURCE_PRIORITY = 50

#: Icon shown in the registry dump for buckets without their own icon.
DEFAULT_REGISTRY_ICON = "🪣"

REGISTRY_DUMP_HEADER = "## *aipi* Registry 📖 ##"
REGISTRY_DUMP_FOOTER = "## *aipi* end ##"

# ============================================================================
# Identifiers
# ============================================================================

#: Characters used for generated chat, agent, run and resource ids.
ID_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

#: Default length of generated ids.
ID_LENGTH = 8

# ============================================================================
# Persistence
# ============================================================================

#: Prefix applied to every tag of a persister object key.
#: Keeps tag values from colliding with plain key values.
PERSISTER_TAG_PREFIX = "$$"

#: Key types used by chats and agencies in a shared persister.
CHAT_KEY_TYPE = "chat"
AGENT_KEY_TYPE = "agent"

#: File suffix for documents written by FileSystemPersister.
FS_PERSISTER_SUFFIX = ".json"

# ============================================================================
# JSON Schema
# ============================================================================

#: Combinator keywords visited by the sub-schema traversal, in visiting order.
SCHEMA_COMBINATORS: tuple[str, ...] = ("anyOf", "allOf", "oneOf")

#: Types accepted by function-call (strict) schema profiles.
STRICT_SCHEMA_TYPES: frozenset[str] = frozenset({"array", "boolean", "integer", "number", "object", "string"})

# ============================================================================
# Logging Configuration
# ============================================================================

#: Maximum size in bytes for log files before rotation (10MB).
LOG_MAX_SIZE = 10 * 1024 * 1024

#: Number of event log backups to retain during rotation.
LOG_BACKUP_COUNT_EVENTS = 5

#: Number of error log backups to retain during rotation.
LOG_BACKUP_COUNT_ERRORS = 3

# ============================================================================
# Environment Configuration with Pydantic Validation
# ============================================================================


class Settings(BaseSettings):
    """Environment settings with validation.

    Loads from ``AIPI_*`` environment variables and a ``.env`` file.
    Validates on first access to fail fast on configuration errors.
    """

    debug: bool = Field(default=False, description="Enable debug logging")
    log_dir: str | None = Field(default=None, description="Directory for JSON log files (disabled when unset)")
    print_registry: bool = Field(default=False, description="Log the registry dump after bootstrap")

    default_priority: int = Field(default=DEFAULT_PRIORITY, description="Priority for registered resources")
    default_resource_priority: int = Field(
        default=DEFAULT_RESOURCE_PRIORITY,
        description="Priority for resources registered by presets",
    )

    fs_persister_dir: str = Field(default="data/persister", description="Base directory for FileSystemPersister")
    id_length: int = Field(default=ID_LENGTH, description="Length of generated ids")

    model_config = SettingsConfigDict(
        env_prefix="AIPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_priority", "default_resource_priority")
    @classmethod
    def validate_priority(cls, v: int) -> int:
        """Priorities are ordered descending, negatives are almost always a typo."""
        if v < 0:
            raise ValueError("priority must be >= 0")
        return v

    @field_validator("id_length")
    @classmethod
    def validate_id_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("id_length must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses LRU cache to ensure we only load and validate settings once.
    """
    return Settings()
