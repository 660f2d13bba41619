"""
Chat state.

A :class:`Chat` holds one conversation's resources, snapshot and provider
context. It never talks to a provider itself: every side effect goes through
the :class:`ChatEngine` handed to it by its owning ``Chats``. Mutating methods
await ``engine.on_change`` before returning, so persistence has completed (or
its error has propagated) by the time the caller resumes.

Callers must not run overlapping mutations on the same chat; there is no
internal locking.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from aipi.core.errors import AipiError
from aipi.models.chat_models import (
    ChatResources,
    ChatSnapshot,
    Message,
    QueryOptions,
    RunInit,
    RunResponse,
    SerializedChat,
    Tool,
    UpdateChatData,
)
from aipi.utils.system import deep_merge

C = TypeVar("C")

SnapshotUpdate = Mapping[str, Any] | ChatSnapshot | Callable[[ChatSnapshot], ChatSnapshot]


class ChatEngine(Protocol):
    """Side effects a chat delegates to its owner."""

    async def add_messages(self, chat: Chat[Any], messages: list[Message]) -> None: ...

    async def delete_message(self, chat: Chat[Any], message_id: str) -> None: ...

    async def load_messages(self, chat: Chat[Any], query: QueryOptions | None = None) -> list[Message]: ...

    async def refresh(self, chat: Chat[Any]) -> ChatSnapshot: ...

    async def run(self, chat: Chat[Any], init: RunInit, options: Mapping[str, Any] | None = None) -> RunResponse: ...

    async def update(self, chat: Chat[Any], data: UpdateChatData) -> None: ...

    async def on_change(self, chat: Chat[Any]) -> None:
        """Called after every mutation. Persists the chat when configured to."""
        ...


@dataclass(frozen=True)
class ChatOptions:
    """
    Attributes:
        auto_persist: Persist on change. Has no effect unless the owning
            ``Chats`` has a persister.
    """

    auto_persist: bool = True


def stack_snapshots(a: ChatSnapshot, b: ChatSnapshot) -> ChatSnapshot:
    """Append ``b`` to ``a``. Order is preserved and nothing is deduplicated."""
    return ChatSnapshot(
        messages=[*a.messages, *b.messages],
        tool_matches=[*a.tool_matches, *b.tool_matches],
    )


class Chat(Generic[C]):
    """A single conversation."""

    stack_snapshots = staticmethod(stack_snapshots)

    def __init__(
        self,
        engine: ChatEngine,
        chat_id: str,
        resources: ChatResources,
        snapshot: ChatSnapshot,
        context: C,
        options: ChatOptions | None = None,
    ) -> None:
        self._engine = engine
        self._id = chat_id
        self._resources = resources
        self._snapshot = snapshot
        self._context = context
        self._last_run_id = ""
        self._auto_persist = (options or ChatOptions()).auto_persist

    @property
    def id(self) -> str:
        return self._id

    @property
    def auto_persist(self) -> bool:
        return self._auto_persist

    @property
    def tools(self) -> list[Tool]:
        return self._resources.tools

    @property
    def resources(self) -> Any:
        return self._resources.resources

    @property
    def chat_resources(self) -> ChatResources:
        return self._resources

    @property
    def context(self) -> C:
        return self._context

    @property
    def last_run_id(self) -> str:
        """Id of the last run, empty before the first run."""
        return self._last_run_id

    @property
    def latest_message(self) -> Message | None:
        messages = self.get_messages()
        return messages[-1] if messages else None

    def has_messages(self) -> bool:
        return bool(self.get_messages())

    def get_messages(self) -> list[Message]:
        """Loaded messages."""
        return self._snapshot.messages

    def get_message(self, message_id: str) -> Message | None:
        return next((m for m in self.get_messages() if m.id == message_id), None)

    def query(self, query: QueryOptions | None = None) -> list[Message]:
        """Page through loaded messages. ``offset`` is applied before ``limit``."""
        messages = self.get_messages()
        if query is None:
            return list(messages)
        if query.offset is not None:
            messages = messages[query.offset :]
        if query.limit is not None:
            messages = messages[: query.limit]
        return list(messages)

    # #### Local mutations (no engine) ####

    def add_messages(self, messages: list[Message]) -> None:
        self.update_snapshot({"messages": [*self._snapshot.messages, *messages]})

    def remove_message(self, message_id: str) -> None:
        self.update_snapshot({"messages": [m for m in self.get_messages() if m.id != message_id]})

    def set_snapshot(self, snapshot: ChatSnapshot) -> None:
        self._snapshot = snapshot

    def update_snapshot(self, update: SnapshotUpdate) -> None:
        """Update the snapshot from a partial snapshot or a function.

        A function receives a snapshot with copied lists and returns the new
        snapshot. A partial (mapping or ``ChatSnapshot``) replaces only the
        fields it carries.
        """
        if callable(update):
            working = ChatSnapshot(
                messages=list(self._snapshot.messages),
                tool_matches=list(self._snapshot.tool_matches),
            )
            self._snapshot = update(working)
            return

        if isinstance(update, ChatSnapshot):
            fields = {name: getattr(update, name) for name in update.model_fields_set}
        else:
            fields = {name: value for name, value in update.items() if value is not None}
        current = {"messages": self._snapshot.messages, "tool_matches": self._snapshot.tool_matches}
        self._snapshot = ChatSnapshot.model_validate({**current, **fields})

    def get_snapshot(self) -> ChatSnapshot:
        return self._snapshot

    def assign_id(self, chat_id: str) -> str:
        """Set the id of a chat created without one.

        Raises:
            AipiError: If the chat already has an id
        """
        if self._id:
            raise AipiError("Chat already initialized")
        self._id = chat_id
        return chat_id

    def update_context(self, context: C) -> None:
        self._context = context

    # #### Engine backed mutations ####

    async def push_messages(self, messages: list[Message]) -> None:
        """Send messages to the engine, then add them locally."""
        await self._engine.add_messages(self, messages)
        self.add_messages(messages)
        await self._engine.on_change(self)

    async def delete_message(self, message_id: str) -> None:
        """Delete a message through the engine, then locally."""
        await self._engine.delete_message(self, message_id)
        self.remove_message(message_id)
        await self._engine.on_change(self)

    async def load_messages(self, query: QueryOptions | None = None) -> list[Message]:
        """Load messages from the engine.

        The local snapshot is replaced only on a full load (no query).
        """
        messages = await self._engine.load_messages(self, query)
        if query is None:
            self.update_snapshot({"messages": messages})
        return messages

    async def refresh(self) -> None:
        """Replace the snapshot with the engine's authoritative one."""
        snapshot = await self._engine.refresh(self)
        self.set_snapshot(snapshot)
        await self._engine.on_change(self)

    async def update(self, data: UpdateChatData) -> None:
        """Update through the engine, then deep-merge the resource patch.

        Lists (tools among them) in the patch replace the existing ones.
        """
        await self._engine.update(self, data)
        if data.resources is not None:
            patch = data.resources.model_dump(by_alias=True, exclude_unset=True)
            merged = deep_merge(self._resources.model_dump(by_alias=True), patch)
            self._resources = ChatResources.model_validate(merged)
        await self._engine.on_change(self)

    async def run(self, init: RunInit | None = None, options: Mapping[str, Any] | None = None) -> RunResponse:
        """Run the chat. The engine's snapshot is appended to the chat's."""
        response = await self._engine.run(self, init or RunInit(), options)
        self._snapshot = stack_snapshots(self._snapshot, response.snapshot)
        self._last_run_id = response.run_id
        await self._engine.on_change(self)
        return response

    def serialize(self) -> SerializedChat:
        return SerializedChat(
            chat_id=self._id,
            resources=self._resources.model_copy(deep=True),
            snapshot=self._snapshot.model_copy(deep=True),
        )

    def __repr__(self) -> str:
        return f"<Chat id={self._id} messages={len(self._snapshot.messages)}>"


__all__ = ["Chat", "ChatEngine", "ChatOptions", "stack_snapshots"]
