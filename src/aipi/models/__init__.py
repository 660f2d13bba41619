"""Pydantic models for aipi data, inputs and results."""

from .agent_models import (
    AgentConfig,
    AgentConfigPatch,
    CreateAgentContextInput,
    CreateAgentInput,
    CreateAgentResult,
    Instructions,
    ListAgentsResult,
    LoadAgentResult,
    SerializedAgent,
    UpdateAgentData,
    UpdateAgentInput,
)
from .chat_models import (
    ChatResources,
    ChatResourcesPatch,
    ChatSnapshot,
    ClearChatsResult,
    CreateChatContextInput,
    CreateChatInput,
    CreateChatResult,
    Format,
    ListChatsResult,
    LoadChatResult,
    Message,
    QueryOptions,
    RefreshChatResult,
    RunChatInput,
    RunChatResult,
    RunInit,
    RunResponse,
    SerializedChat,
    Tool,
    ToolMatch,
    UpdateChatData,
    UpdateChatInput,
)
from .embedding_models import CompleteOptions, CompleteResult, TextEmbedInput, Vector
from .error_models import ErrorCode, ErrorResponse, get_status_code
from .persister_models import PersisterClearOptions, PersisterObjectKey, PersisterSaveOptions

__all__ = [
    "AgentConfig",
    "AgentConfigPatch",
    "ChatResources",
    "ChatResourcesPatch",
    "ChatSnapshot",
    "ClearChatsResult",
    "CompleteOptions",
    "CompleteResult",
    "CreateAgentContextInput",
    "CreateAgentInput",
    "CreateAgentResult",
    "CreateChatContextInput",
    "CreateChatInput",
    "CreateChatResult",
    "ErrorCode",
    "ErrorResponse",
    "Format",
    "Instructions",
    "ListAgentsResult",
    "ListChatsResult",
    "LoadAgentResult",
    "LoadChatResult",
    "Message",
    "PersisterClearOptions",
    "PersisterObjectKey",
    "PersisterSaveOptions",
    "QueryOptions",
    "RefreshChatResult",
    "RunChatInput",
    "RunChatResult",
    "RunInit",
    "RunResponse",
    "SerializedAgent",
    "SerializedChat",
    "TextEmbedInput",
    "Tool",
    "ToolMatch",
    "UpdateAgentData",
    "UpdateAgentInput",
    "UpdateChatData",
    "UpdateChatInput",
    "Vector",
    "get_status_code",
]
