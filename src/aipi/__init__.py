"""
aipi: provider-agnostic core for conversational AI.

Capability contracts (chats, agents, embeddings, completions, persisters,
schema validators) plus the shared infrastructure every provider adapter
plugs into.
"""

from aipi.agents import Agency, AgencyConfig, Agent, ChatAgency, ChatAgencyConfig
from aipi.app import AipiApp, AipiRegistry, BootstrapOptions, Covering, Resource
from aipi.chats import Chat, Chats, ChatsConfig, Completer, parse_tool_calls, parse_tool_match, stack_snapshots
from aipi.core import (
    AipiError,
    ErrorTag,
    KeyExistsError,
    NotFoundError,
    NotMountedError,
    NotSupportedError,
    ResourceNotFoundError,
    SchemaValidationError,
    Settings,
    get_settings,
)
from aipi.embeddings import TextEmbedder
from aipi.persister import FileSystemPersister, MemoryPersister, Persister
from aipi.presets import default_preset
from aipi.schemas import (
    JSONSchemaBuilder,
    JSONSchemaValidator,
    OpenAIJSONSchemaBuilder,
    SchemaBuilder,
    StrictJSONSchemaBuilder,
)

__version__ = "0.1.0"

__all__ = [
    "AipiApp",
    "AipiError",
    "AipiRegistry",
    "Agency",
    "AgencyConfig",
    "Agent",
    "BootstrapOptions",
    "Chat",
    "ChatAgency",
    "ChatAgencyConfig",
    "Chats",
    "ChatsConfig",
    "Completer",
    "Covering",
    "ErrorTag",
    "FileSystemPersister",
    "JSONSchemaBuilder",
    "JSONSchemaValidator",
    "KeyExistsError",
    "MemoryPersister",
    "NotFoundError",
    "NotMountedError",
    "NotSupportedError",
    "OpenAIJSONSchemaBuilder",
    "Persister",
    "Resource",
    "ResourceNotFoundError",
    "SchemaBuilder",
    "SchemaValidationError",
    "Settings",
    "StrictJSONSchemaBuilder",
    "TextEmbedder",
    "default_preset",
    "get_settings",
    "parse_tool_calls",
    "parse_tool_match",
    "stack_snapshots",
]
