"""Shared test fixtures for the aipi test suite.

Provides settings isolation, an isolated registry per test and in-memory
fake adapters for the abstract Chats contract.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from aipi.app.registry import AipiRegistry
from aipi.chats.chat import Chat
from aipi.chats.chats import Chats, ChatsConfig
from aipi.core.constants import get_settings
from aipi.core.errors import AipiError
from aipi.models.chat_models import (
    ChatResources,
    ChatSnapshot,
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
    UpdateChatInput,
)
from aipi.persister.memory_persister import MemoryPersister
from aipi.utils.system import create_id

# ============================================================================
# Test Isolation: Settings Cache
# ============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Reload settings for every test so env changes take effect."""
    for name in ("AIPI_DEBUG", "AIPI_LOG_DIR", "AIPI_PRINT_REGISTRY", "AIPI_DEFAULT_PRIORITY"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Fake Adapters
# ============================================================================


class FakeChats(Chats[dict[str, Any]]):
    """In-memory chats adapter.

    ``run_chat`` echoes the run messages followed by one assistant reply.
    Chat ids listed in ``fail_delete`` raise on deletion.
    """

    def __init__(self, config: ChatsConfig | None = None) -> None:
        super().__init__(config)
        self.store: dict[str, LoadChatResult] = {}
        self.fail_delete: set[str] = set()
        self.run_inputs: list[RunChatInput] = []
        self.alter_inputs: list[UpdateChatInput] = []

    def _snapshot(self, chat_id: str) -> ChatSnapshot:
        return self.store[chat_id].snapshot

    def _set_messages(self, chat_id: str, messages: list[Message]) -> None:
        entry = self.store[chat_id]
        self.store[chat_id] = entry.model_copy(update={"snapshot": ChatSnapshot(messages=messages)})

    async def create_chat(self, input: CreateChatInput, options: Any = None) -> CreateChatResult:
        chat_id = create_id()
        snapshot = input.snapshot or ChatSnapshot()
        resources = ChatResources(
            tools=list(input.resources.tools or []) if input.resources else [],
            resources=input.resources.resources if input.resources else None,
        )
        context = {"chat_id": chat_id}
        self.store[chat_id] = LoadChatResult(snapshot=snapshot, resources=resources, context=context)
        return CreateChatResult(chat_id=chat_id, context=context, snapshot=snapshot)

    async def create_chat_context(self, input: CreateChatContextInput, options: Any = None) -> dict[str, Any]:
        return {"chat_id": input.chat_id, "revived": True}

    async def refresh_chat(self, chat: Chat[dict[str, Any]]) -> RefreshChatResult:
        return RefreshChatResult(snapshot=self._snapshot(chat.id))

    async def load_chat(self, chat_id: str) -> LoadChatResult | None:
        return self.store.get(chat_id)

    async def alter_chat(self, chat: Chat[dict[str, Any]], input: UpdateChatInput) -> None:
        self.alter_inputs.append(input)

    async def delete_chat(self, chat_id: str) -> None:
        if chat_id in self.fail_delete:
            raise AipiError(f"cannot delete {chat_id}")
        self.store.pop(chat_id, None)

    async def load_chats(self, query: QueryOptions | None = None, options: Any = None) -> ListChatsResult:
        return ListChatsResult(chat_ids=list(self.store))

    async def run_chat(
        self, chat: Chat[dict[str, Any]], input: RunChatInput, options: Any = None
    ) -> RunChatResult:
        self.run_inputs.append(input)
        messages = list(input.messages or [])
        reply = Message(role="assistant", text_content=f"echo {len(messages)}", id=create_id())
        return RunChatResult(run_id=create_id(), snapshot=ChatSnapshot(messages=[*messages, reply]))

    async def push_messages(self, chat: Chat[dict[str, Any]], messages: list[Message]) -> None:
        self._set_messages(chat.id, [*self._snapshot(chat.id).messages, *messages])

    async def delete_message(self, chat: Chat[dict[str, Any]], message_id: str) -> None:
        self._set_messages(chat.id, [m for m in self._snapshot(chat.id).messages if m.id != message_id])

    async def load_messages(self, chat: Chat[dict[str, Any]], query: QueryOptions | None = None) -> list[Message]:
        messages = list(self._snapshot(chat.id).messages)
        if query is not None and query.limit is not None:
            messages = messages[: query.limit]
        return messages

    async def load_message(self, chat: Chat[dict[str, Any]], message_id: str) -> Message | None:
        return next((m for m in self._snapshot(chat.id).messages if m.id == message_id), None)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def registry() -> AipiRegistry:
    """Fresh, isolated registry."""
    return AipiRegistry()


@pytest.fixture
def memory_persister() -> MemoryPersister:
    return MemoryPersister()


@pytest.fixture
def fake_chats() -> FakeChats:
    return FakeChats()


@pytest.fixture
def persisted_chats(memory_persister: MemoryPersister) -> FakeChats:
    """Fake chats persisting into the in-memory persister."""
    return FakeChats(ChatsConfig(persister=memory_persister))


@pytest.fixture
def persister_dir(tmp_path: Path) -> Path:
    return tmp_path / "persister"


def make_message(text: str, message_id: str | None = None, role: str = "user") -> Message:
    return Message(role=role, text_content=text, id=message_id or create_id())
