"""
Chat data models.

Pydantic models for messages, tools, snapshots and the inputs/results
exchanged between ``Chats`` and its adapter hooks.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

MessageRole = Literal["user", "system", "assistant", "tool"] | str


class Message(BaseModel):
    """A single chat message.

    Only ``role`` is required; adapters fill whichever content fields
    their provider understands.
    """

    role: MessageRole
    text_content: str | None = None
    content: Any = None
    attachments: Any = None
    info: Any = None
    id: str | None = None
    index: int | None = None


class Tool(BaseModel):
    """A tool (function) a model may call."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["function"] | str = "function"
    name: str = Field(..., min_length=1)
    description: str | None = None
    configure: Any = None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema", description="JSON schema of the params")
    data: Any = None


class ToolMatch(BaseModel):
    """A tool invocation requested by a model response.

    When ``parse_error`` is set, ``params`` is not trustworthy and
    ``raw_params`` holds the unparsed payload.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tool: str
    params: Any = None
    raw_params: Any = None
    parse_error: Any = None
    index: int | None = None
    ref: str | None = None

    @field_serializer("parse_error")
    def _serialize_parse_error(self, value: Any) -> Any:
        if isinstance(value, BaseException):
            return repr(value)
        return value


class Format(BaseModel):
    """Requested response format."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["text", "json"] | str | None = None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")


class ChatSnapshot(BaseModel):
    """Accumulated state of a chat. Append-only by convention."""

    messages: list[Message] = Field(default_factory=list)
    tool_matches: list[ToolMatch] = Field(default_factory=list)


class ChatResources(BaseModel):
    tools: list[Tool] = Field(default_factory=list)
    resources: Any = None


class ChatResourcesPatch(BaseModel):
    """Partial ``ChatResources``. Unset fields leave the chat untouched."""

    tools: list[Tool] | None = None
    resources: Any = None


class SerializedChat(BaseModel):
    chat_id: str
    resources: ChatResources = Field(default_factory=ChatResources)
    snapshot: ChatSnapshot = Field(default_factory=ChatSnapshot)


class RunResponse(BaseModel):
    run_id: str
    snapshot: ChatSnapshot = Field(default_factory=ChatSnapshot)


RunChatResult = RunResponse


class UpdateChatData(BaseModel):
    resources: ChatResourcesPatch | None = None


class RunInit(BaseModel):
    """What a chat hands to its engine when it runs."""

    messages: list[Message] | None = None
    resources: ChatResourcesPatch | None = None
    choices: int | None = Field(default=None, ge=1)
    response_format: Format | None = None


class CreateChatInput(BaseModel):
    resources: ChatResourcesPatch | None = None
    snapshot: ChatSnapshot | None = None
    persist: bool = Field(default=True, description="Persist the chat after creation when a persister is set")


class CreateChatResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    chat_id: str
    context: Any = None
    snapshot: ChatSnapshot = Field(default_factory=ChatSnapshot)


class LoadChatResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    snapshot: ChatSnapshot = Field(default_factory=ChatSnapshot)
    resources: ChatResources = Field(default_factory=ChatResources)
    context: Any = None


class ListChatsResult(BaseModel):
    chat_ids: list[str] = Field(default_factory=list)


class RunChatInput(BaseModel):
    """Caller input for a run.

    ``messages`` and ``resources`` apply to this run only.
    """

    messages: list[Message] | None = None
    resources: ChatResourcesPatch | None = None
    choices: int | None = Field(default=None, ge=1, description="Number of choices to generate")
    response_format: Format | None = None


class RefreshChatResult(BaseModel):
    snapshot: ChatSnapshot = Field(default_factory=ChatSnapshot)


class UpdateChatInput(BaseModel):
    data: UpdateChatData = Field(default_factory=UpdateChatData)


class CreateChatContextInput(BaseModel):
    chat_id: str = Field(default="", description="Empty while a chat is being created")


class ClearChatsResult(BaseModel):
    """Outcome of a best-effort batch deletion."""

    deleted: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict, description="Chat id -> error message")

    @property
    def ok(self) -> bool:
        return not self.failed


class QueryOptions(BaseModel):
    """Common pagination and ordering options."""

    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)
    sort: str | None = None
    after: str | None = None
    before: str | None = None
    order: Literal["asc", "desc"] | str | None = None


__all__ = [
    "ChatResources",
    "ChatResourcesPatch",
    "ChatSnapshot",
    "ClearChatsResult",
    "CreateChatContextInput",
    "CreateChatInput",
    "CreateChatResult",
    "Format",
    "ListChatsResult",
    "LoadChatResult",
    "Message",
    "MessageRole",
    "QueryOptions",
    "RefreshChatResult",
    "RunChatInput",
    "RunChatResult",
    "RunInit",
    "RunResponse",
    "SerializedChat",
    "Tool",
    "ToolMatch",
    "UpdateChatData",
    "UpdateChatInput",
]
