"""
Agency: agent lifecycle on top of adapter hooks.

Structured like :class:`~aipi.chats.chats.Chats`. Each agent gets its own
``Chats`` instance from :meth:`Agency.chats`; it is mounted through the app
the first time an engine is created for it.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from aipi.agents.agent import Agent
from aipi.app.resource import Resource
from aipi.chats.chat import Chat
from aipi.chats.chats import Chats
from aipi.core.errors import NotFoundError
from aipi.models.agent_models import (
    AgentConfig,
    CreateAgentContextInput,
    CreateAgentInput,
    CreateAgentResult,
    ListAgentsResult,
    LoadAgentResult,
    SerializedAgent,
    UpdateAgentData,
    UpdateAgentInput,
)
from aipi.models.chat_models import CreateChatInput, QueryOptions
from aipi.utils.logger import logger

C = TypeVar("C")
CC = TypeVar("CC")

AnyOptions = Mapping[str, Any]


@dataclass
class AgencyConfig:
    """Base configuration for agencies. Adapters extend it."""


class _AgencyEngine:
    """Engine binding an agent to its agency and its chats."""

    def __init__(self, agency: Agency[Any, Any], chats: Chats[Any]) -> None:
        self._agency = agency
        self.chats = chats

    async def load_chat(self, agent: Agent[Any, Any], chat_id: str) -> Chat[Any] | None:
        return await self.chats.get_chat(chat_id)

    async def delete_chat(self, agent: Agent[Any, Any], chat_id: str) -> None:
        await self.chats.end_chat(chat_id)

    async def list_chats(self, agent: Agent[Any, Any], query: QueryOptions | None = None) -> list[str]:
        return await self.chats.list_chats(query)

    async def start_chat(
        self, agent: Agent[Any, Any], input: CreateChatInput, options: AnyOptions | None = None
    ) -> Chat[Any]:
        return await self.chats.start_chat(input, options)

    async def update(self, agent: Agent[Any, Any], data: UpdateAgentData) -> None:
        await self._agency.alter_agent(agent, UpdateAgentInput(data=data))

    async def refresh(self, agent: Agent[Any, Any]) -> AgentConfig:
        return await self._agency.refresh_agent(agent)


class Agency(Resource, Generic[C, CC]):
    """
    Type Args:
        C: Agent context
        CC: Chat context
    """

    icon: ClassVar[str | None] = "🤖"

    def __init__(self, config: AgencyConfig | None = None) -> None:
        super().__init__()
        self.config = config or AgencyConfig()

    async def _agent_engine(self, agent_id: str) -> _AgencyEngine:
        chats = await self.chats(agent_id)
        if not chats.mounted:
            await self.app.mount(chats)
        return _AgencyEngine(self, chats)

    async def revive(self, serialized: SerializedAgent | Mapping[str, Any]) -> Agent[C, CC]:
        """Rebuild an agent from its serialized form with a fresh context."""
        if not isinstance(serialized, SerializedAgent):
            serialized = SerializedAgent.model_validate(serialized)
        return Agent(
            await self._agent_engine(serialized.agent_id),
            serialized.agent_id,
            await self.create_context(CreateAgentContextInput(agent_id=serialized.agent_id)),
            serialized.config,
        )

    async def get_agent(self, agent_id: str) -> Agent[C, CC] | None:
        """An agent by id, None when it does not exist."""
        data = await self.load_agent(agent_id)
        if data is None:
            return None
        return Agent(await self._agent_engine(agent_id), agent_id, data.context, data.config)

    async def _find_agent(self, agent_id: str) -> Agent[C, CC]:
        agent = await self.get_agent(agent_id)
        if agent is None:
            raise NotFoundError("agent", f"id: {agent_id}")
        return agent

    async def spawn_agent(self, input: CreateAgentInput | None = None, options: AnyOptions | None = None) -> Agent[C, CC]:
        """Create a new agent."""
        result = await self.create_agent(input or CreateAgentInput(), options)
        logger.info("Agent spawned", agent_id=result.agent_id)
        return Agent(await self._agent_engine(result.agent_id), result.agent_id, result.context, result.config)

    async def kill_agent(self, agent_id: str) -> None:
        """Delete an agent.

        Raises:
            NotFoundError: If the agent does not exist
        """
        agent = await self._find_agent(agent_id)
        await self.delete_agent(agent)
        logger.info("Agent killed", agent_id=agent_id)

    async def list_agents(self, query: QueryOptions | None = None) -> list[str]:
        result = await self.load_agents(query)
        return result.agent_ids

    async def update_agent(self, agent_id: str, input: UpdateAgentInput) -> None:
        """
        Raises:
            NotFoundError: If the agent does not exist
        """
        agent = await self._find_agent(agent_id)
        await agent.update(input.data)

    # #### Adapter hooks ####

    @abstractmethod
    async def create_context(self, input: CreateAgentContextInput, options: AnyOptions | None = None) -> C: ...

    @abstractmethod
    async def load_agent(self, agent_id: str) -> LoadAgentResult | None: ...

    @abstractmethod
    async def refresh_agent(self, agent: Agent[C, CC]) -> AgentConfig:
        """Fetch the authoritative config of an agent."""

    @abstractmethod
    async def create_agent(self, input: CreateAgentInput, options: AnyOptions | None = None) -> CreateAgentResult: ...

    @abstractmethod
    async def delete_agent(self, agent: Agent[C, CC]) -> None: ...

    @abstractmethod
    async def load_agents(self, query: QueryOptions | None = None) -> ListAgentsResult: ...

    @abstractmethod
    async def alter_agent(self, agent: Agent[C, CC], input: UpdateAgentInput) -> None: ...

    @abstractmethod
    async def chats(self, agent_id: str) -> Chats[CC]:
        """The chats of an agent."""


__all__ = ["Agency", "AgencyConfig"]
