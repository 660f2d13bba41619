"""
Chats: conversation lifecycle on top of a small set of adapter hooks.

A provider adapter subclasses :class:`Chats` and implements the protected
hooks (``create_chat``, ``run_chat``, ``push_messages``...). The base class
turns them into the public lifecycle (start, get, run, update, end, list)
and persists chats through an optional persister.

Adapters signal missing provider capabilities by raising
``NotSupportedError``; the base class lets it propagate unchanged.
"""

from __future__ import annotations

import asyncio

from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar

from aipi.app.resource import Resource
from aipi.chats.chat import Chat, ChatOptions
from aipi.core.constants import CHAT_KEY_TYPE
from aipi.core.errors import NotFoundError
from aipi.models.chat_models import (
    ChatResources,
    ChatResourcesPatch,
    ChatSnapshot,
    ClearChatsResult,
    CreateChatContextInput,
    CreateChatInput,
    CreateChatResult,
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
    UpdateChatData,
    UpdateChatInput,
)
from aipi.models.persister_models import PersisterObjectKey, PersisterSaveOptions
from aipi.persister.persister import Persister
from aipi.utils.logger import logger
from aipi.utils.system import deep_merge

C = TypeVar("C")

ChatPersister = Persister[Any, Any]
AnyOptions = Mapping[str, Any]


@dataclass
class ChatsConfig:
    """
    Attributes:
        persister: Persist chats with this persister
        persister_tags: Tags added to every persister key (e.g. ``["agent", "a1"]``)
    """

    persister: ChatPersister | None = None
    persister_tags: list[str] = field(default_factory=list)


def merge_tools(base: list[Tool], extra: list[Tool] | None) -> list[Tool]:
    """``base`` followed by ``extra``; an extra tool replaces a base tool of the same name."""
    if not extra:
        return list(base)
    names = {tool.name for tool in extra}
    return [tool for tool in base if tool.name not in names] + list(extra)


class _ChatsEngine:
    """Engine binding chats created by a :class:`Chats` to its hooks."""

    def __init__(self, owner: Chats[Any]) -> None:
        self._owner = owner

    async def add_messages(self, chat: Chat[Any], messages: list[Message]) -> None:
        await self._owner.push_messages(chat, messages)

    async def delete_message(self, chat: Chat[Any], message_id: str) -> None:
        await self._owner.delete_message(chat, message_id)

    async def load_messages(self, chat: Chat[Any], query: QueryOptions | None = None) -> list[Message]:
        return await self._owner.load_messages(chat, query)

    async def refresh(self, chat: Chat[Any]) -> ChatSnapshot:
        result = await self._owner.refresh_chat(chat)
        return result.snapshot

    async def run(self, chat: Chat[Any], init: RunInit, options: AnyOptions | None = None) -> RunResponse:
        patch = init.resources or ChatResourcesPatch()
        resources = ChatResourcesPatch(
            tools=merge_tools(chat.tools, patch.tools),
            resources=deep_merge(chat.resources, patch.resources),
        )
        run_input = RunChatInput(
            messages=init.messages,
            resources=resources,
            choices=init.choices,
            response_format=init.response_format,
        )
        result = await self._owner.run_chat(chat, run_input, options)
        return RunResponse(run_id=result.run_id, snapshot=result.snapshot)

    async def update(self, chat: Chat[Any], data: UpdateChatData) -> None:
        await self._owner.alter_chat(chat, UpdateChatInput(data=data))

    async def on_change(self, chat: Chat[Any]) -> None:
        await self._owner.persist_chat(chat)


class Chats(Resource, Generic[C]):
    """
    A flexible chat system for chat bots, conversational agents and more.

    Chats can be loaded from an external source or persisted locally. When
    and how chats are loaded and run is up to the implementation.

    A fetched chat keeps persisting on change only when the persister already
    holds its entry. Chats started with ``persist=False`` (or never saved)
    therefore stay out of the persister, also across restarts.

    Type Args:
        C: Provider specific chat context (e.g. a thread id)
    """

    icon: ClassVar[str | None] = "💬"

    def __init__(self, config: ChatsConfig | None = None) -> None:
        super().__init__()
        self.config = config or ChatsConfig()
        self._persister: ChatPersister | None = self.config.persister
        self._persister_tags: list[str] = list(self.config.persister_tags)

    # #### Persistence ####

    @property
    def persister(self) -> ChatPersister | None:
        return self._persister

    def set_persister(self, persister: ChatPersister | None) -> None:
        """Persister used for chats unless disabled per chat."""
        self._persister = persister

    @property
    def persister_tags(self) -> list[str]:
        return list(self._persister_tags)

    def add_persister_tags(self, *tags: str) -> None:
        self._persister_tags.extend(tags)

    def set_persister_tags(self, tags: list[str]) -> None:
        self._persister_tags = list(tags)

    def chat_key(self, chat_id: str) -> PersisterObjectKey:
        return Persister.key(CHAT_KEY_TYPE, chat_id, self._persister_tags)

    async def persist_chat(self, chat: Chat[C]) -> None:
        """Save the chat when a persister is set and the chat auto-persists."""
        if self._persister is None or not chat.auto_persist:
            return
        await self._persister.save(self.chat_key(chat.id), chat.serialize(), PersisterSaveOptions(overwrite=True))
        logger.debug("Chat persisted", chat_id=chat.id)

    async def revive(self, serialized: SerializedChat | Mapping[str, Any]) -> Chat[C]:
        """Rebuild a chat from its serialized form with a fresh context."""
        if not isinstance(serialized, SerializedChat):
            serialized = SerializedChat.model_validate(serialized)
        context = await self.create_chat_context(CreateChatContextInput(chat_id=serialized.chat_id))
        return Chat(
            self._engine(),
            serialized.chat_id,
            serialized.resources,
            serialized.snapshot,
            context,
            await self._chat_options(serialized.chat_id),
        )

    async def restore_chat(self, chat_id: str) -> Chat[C] | None:
        """Revive a chat from the persister. None without a persister or entry."""
        if self._persister is None:
            return None
        serialized = await self._persister.load(self.chat_key(chat_id))
        if serialized is None:
            return None
        return await self.revive(serialized)

    def _engine(self) -> _ChatsEngine:
        return _ChatsEngine(self)

    async def _chat_options(self, chat_id: str) -> ChatOptions:
        """Options for a chat that is fetched rather than started here.

        With a persister set, only chats that already have an entry keep
        persisting, so a chat started with ``persist=False`` stays unsaved.
        """
        if self._persister is None:
            return ChatOptions()
        return ChatOptions(auto_persist=await self._persister.has(self.chat_key(chat_id)))

    # #### Chats ####

    async def start_chat(self, input: CreateChatInput | None = None, options: AnyOptions | None = None) -> Chat[C]:
        """Start a new chat.

        The chat is saved before returning when a persister is set and
        ``input.persist`` is true.
        """
        input = input or CreateChatInput()
        result = await self.create_chat(input, options)

        patch = input.resources or ChatResourcesPatch()
        chat: Chat[C] = Chat(
            self._engine(),
            result.chat_id,
            ChatResources(tools=list(patch.tools or []), resources=patch.resources),
            result.snapshot,
            result.context,
            ChatOptions(auto_persist=input.persist),
        )
        await self.persist_chat(chat)
        logger.info("Chat started", chat_id=chat.id)
        return chat

    async def get_chat(self, chat_id: str) -> Chat[C] | None:
        """Get a chat by id, None when it does not exist."""
        data = await self.load_chat(chat_id)
        if data is None:
            return None
        options = await self._chat_options(chat_id)
        return Chat(self._engine(), chat_id, data.resources, data.snapshot, data.context, options)

    async def _find_chat(self, chat_id: str) -> Chat[C]:
        chat = await self.get_chat(chat_id)
        if chat is None:
            raise NotFoundError("chat", f"id: {chat_id}")
        return chat

    async def update_chat(self, chat_id: str, input: UpdateChatInput) -> None:
        """Update a chat.

        Raises:
            NotFoundError: If the chat does not exist
        """
        chat = await self._find_chat(chat_id)
        await chat.update(input.data)

    async def end_chat(self, chat_id: str) -> None:
        """End a chat. Deletes it from the provider and the persister."""
        await self.delete_chat(chat_id)
        if self._persister is not None:
            await self._persister.delete(self.chat_key(chat_id))
        logger.info("Chat ended", chat_id=chat_id)

    async def clear_chats(self) -> ClearChatsResult:
        """End every listed chat concurrently.

        Best effort: a failed deletion does not stop the others. Failures are
        reported per chat id.
        """
        chat_ids = await self.list_chats()
        outcomes = await asyncio.gather(*(self.end_chat(chat_id) for chat_id in chat_ids), return_exceptions=True)

        result = ClearChatsResult()
        for chat_id, outcome in zip(chat_ids, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.warning(f"Failed to delete chat: {outcome}", chat_id=chat_id)
                result.failed[chat_id] = str(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.deleted.append(chat_id)
        return result

    async def list_chats(self, query: QueryOptions | None = None, options: AnyOptions | None = None) -> list[str]:
        """Ids of all chats."""
        result = await self.load_chats(query, options)
        return result.chat_ids

    async def run(
        self, chat_id: str, input: RunChatInput | None = None, options: AnyOptions | None = None
    ) -> RunChatResult:
        """Run a chat.

        The run's tools and resources are merged with the chat's own, and the
        returned snapshot is appended to the chat.

        Raises:
            NotFoundError: If the chat does not exist
        """
        input = input or RunChatInput()
        chat = await self._find_chat(chat_id)
        init = RunInit(
            messages=input.messages,
            resources=input.resources,
            choices=input.choices,
            response_format=input.response_format,
        )
        response = await chat.run(init, options)
        logger.info("Chat run finished", chat_id=chat_id, run_id=response.run_id)
        return response

    # #### Messages ####

    async def add_messages(self, chat_id: str, messages: list[Message]) -> None:
        chat = await self._find_chat(chat_id)
        await chat.push_messages(messages)

    async def remove_message(self, chat_id: str, message_id: str) -> None:
        chat = await self._find_chat(chat_id)
        await chat.delete_message(message_id)

    async def list_messages(self, chat_id: str, query: QueryOptions | None = None) -> list[Message]:
        chat = await self._find_chat(chat_id)
        return await self.load_messages(chat, query)

    async def get_message(self, chat_id: str, message_id: str) -> Message | None:
        """A message of a chat, None for an unknown message id."""
        chat = await self._find_chat(chat_id)
        return await self.load_message(chat, message_id)

    # #### Adapter hooks ####

    @abstractmethod
    async def create_chat(self, input: CreateChatInput, options: AnyOptions | None = None) -> CreateChatResult: ...

    @abstractmethod
    async def create_chat_context(self, input: CreateChatContextInput, options: AnyOptions | None = None) -> C: ...

    @abstractmethod
    async def refresh_chat(self, chat: Chat[C]) -> RefreshChatResult: ...

    @abstractmethod
    async def load_chat(self, chat_id: str) -> LoadChatResult | None: ...

    @abstractmethod
    async def alter_chat(self, chat: Chat[C], input: UpdateChatInput) -> None: ...

    @abstractmethod
    async def delete_chat(self, chat_id: str) -> None: ...

    @abstractmethod
    async def load_chats(self, query: QueryOptions | None = None, options: AnyOptions | None = None) -> ListChatsResult: ...

    @abstractmethod
    async def run_chat(self, chat: Chat[C], input: RunChatInput, options: AnyOptions | None = None) -> RunChatResult:
        """Run the chat and return only what the run added (a snapshot delta)."""

    @abstractmethod
    async def push_messages(self, chat: Chat[C], messages: list[Message]) -> None: ...

    @abstractmethod
    async def delete_message(self, chat: Chat[C], message_id: str) -> None: ...

    @abstractmethod
    async def load_messages(self, chat: Chat[C], query: QueryOptions | None = None) -> list[Message]: ...

    @abstractmethod
    async def load_message(self, chat: Chat[C], message_id: str) -> Message | None: ...


__all__ = ["ChatPersister", "Chats", "ChatsConfig", "merge_tools"]
