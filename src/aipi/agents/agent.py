"""
Agent state.

Mirrors :class:`~aipi.chats.chat.Chat` one level up: an agent owns its
configuration and reaches its chats and provider through an
:class:`AgentEngine` supplied by its ``Agency``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Protocol, TypeVar

from aipi.chats.chat import Chat
from aipi.models.agent_models import AgentConfig, SerializedAgent, UpdateAgentData, apply_config_patch
from aipi.models.chat_models import CreateChatInput, QueryOptions, Tool

C = TypeVar("C")
CC = TypeVar("CC")


class AgentEngine(Protocol):
    async def load_chat(self, agent: Agent[Any, Any], chat_id: str) -> Chat[Any] | None: ...

    async def delete_chat(self, agent: Agent[Any, Any], chat_id: str) -> None: ...

    async def list_chats(self, agent: Agent[Any, Any], query: QueryOptions | None = None) -> list[str]: ...

    async def start_chat(
        self, agent: Agent[Any, Any], input: CreateChatInput, options: Mapping[str, Any] | None = None
    ) -> Chat[Any]: ...

    async def update(self, agent: Agent[Any, Any], data: UpdateAgentData) -> None: ...

    async def refresh(self, agent: Agent[Any, Any]) -> AgentConfig: ...


class Agent(Generic[C, CC]):
    """
    Type Args:
        C: Provider specific agent context
        CC: Context of the agent's chats
    """

    def __init__(self, engine: AgentEngine, agent_id: str, context: C, config: AgentConfig) -> None:
        self._engine = engine
        self._id = agent_id
        self._context = context
        self._config = config

    @property
    def id(self) -> str:
        return self._id

    @property
    def context(self) -> C:
        return self._context

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def tools(self) -> list[Tool]:
        return self._config.tools

    def get_config(self) -> AgentConfig:
        return self._config

    def set_config(self, config: AgentConfig) -> None:
        self._config = config

    def update_context(self, context: C) -> None:
        self._context = context

    def serialize(self) -> SerializedAgent:
        return SerializedAgent(agent_id=self._id, config=self._config.model_copy(deep=True))

    async def load_chat(self, chat_id: str) -> Chat[CC] | None:
        return await self._engine.load_chat(self, chat_id)

    async def delete_chat(self, chat_id: str) -> None:
        await self._engine.delete_chat(self, chat_id)

    async def list_chats(self, query: QueryOptions | None = None) -> list[str]:
        return await self._engine.list_chats(self, query)

    async def start_chat(
        self, input: CreateChatInput | None = None, options: Mapping[str, Any] | None = None
    ) -> Chat[CC]:
        return await self._engine.start_chat(self, input or CreateChatInput(), options)

    async def refresh(self) -> None:
        """Swap the config for the engine's authoritative one. No merging."""
        self.set_config(await self._engine.refresh(self))

    async def update(self, data: UpdateAgentData) -> None:
        """Update through the engine, then apply the config patch locally."""
        await self._engine.update(self, data)
        self._config = apply_config_patch(self._config, data.config)

    def __repr__(self) -> str:
        return f"<Agent id={self._id} name={self._config.name!r}>"


__all__ = ["Agent", "AgentEngine"]
