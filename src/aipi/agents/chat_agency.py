"""
Persister backed agency.

Agents are plain configurations stored in a persister; their chats come from
a user supplied ``Chats`` factory. Unless disabled, each agent's chats are
persisted in the same persister, tagged with the agent id.
"""

from __future__ import annotations

import inspect

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from aipi.agents.agency import Agency, AgencyConfig
from aipi.agents.agent import Agent
from aipi.chats.chats import Chats
from aipi.core.constants import AGENT_KEY_TYPE
from aipi.models.agent_models import (
    AgentConfig,
    CreateAgentContextInput,
    CreateAgentInput,
    CreateAgentResult,
    Instructions,
    ListAgentsResult,
    LoadAgentResult,
    SerializedAgent,
    UpdateAgentInput,
    apply_config_patch,
)
from aipi.models.chat_models import QueryOptions
from aipi.models.persister_models import PersisterObjectKey, PersisterSaveOptions
from aipi.persister.persister import Persister
from aipi.utils.logger import logger
from aipi.utils.system import create_id

CC = TypeVar("CC")

AgentPersister = Persister[Any, Any]
ChatsFactory = Callable[[str], Chats[Any] | Awaitable[Chats[Any]]]


@dataclass
class ChatAgencyConfig(AgencyConfig, Generic[CC]):
    """
    Attributes:
        persister: Stores agents (and their chats when ``persist_chats``)
        chats: Factory returning the ``Chats`` of an agent id
        persist_chats: Persist agent chats in ``persister``
    """

    persister: AgentPersister | None = None
    chats: ChatsFactory | None = None
    persist_chats: bool = True

    def __post_init__(self) -> None:
        if self.persister is None:
            raise ValueError("ChatAgencyConfig requires a persister")
        if self.chats is None:
            raise ValueError("ChatAgencyConfig requires a chats factory")


class ChatAgency(Agency[None, CC]):
    """Agency whose agents live in a persister. Agents have no context."""

    def __init__(self, config: ChatAgencyConfig[CC]) -> None:
        super().__init__(config)
        self.agency_config = config
        self.persister: AgentPersister = config.persister  # type: ignore[assignment]

    @staticmethod
    def persister_tags(agent_id: str) -> list[str]:
        """Tags scoping an agent's chats in the persister."""
        return ["agent", agent_id]

    @staticmethod
    def agent_key(agent_id: str) -> PersisterObjectKey:
        return Persister.key(AGENT_KEY_TYPE, agent_id)

    async def create_context(self, input: CreateAgentContextInput, options: Mapping[str, Any] | None = None) -> None:
        return None

    async def load_agent(self, agent_id: str) -> LoadAgentResult | None:
        stored = await self.persister.load(self.agent_key(agent_id))
        if stored is None:
            return None
        serialized = stored if isinstance(stored, SerializedAgent) else SerializedAgent.model_validate(stored)
        return LoadAgentResult(config=serialized.config, context=None)

    async def refresh_agent(self, agent: Agent[None, CC]) -> AgentConfig:
        """Returns the current config. Override to fetch it from elsewhere."""
        return agent.get_config()

    async def create_agent(self, input: CreateAgentInput, options: Mapping[str, Any] | None = None) -> CreateAgentResult:
        patch = input.config
        config = AgentConfig(
            tools=list(patch.tools or []),
            resources=patch.resources,
            data=patch.data,
            instructions=patch.instructions or Instructions(),
            description=patch.description or "",
            name=patch.name or "",
        )
        agent_id = create_id()
        await self.persister.save(self.agent_key(agent_id), SerializedAgent(agent_id=agent_id, config=config))
        return CreateAgentResult(agent_id=agent_id, config=config, context=None)

    async def delete_agent(self, agent: Agent[None, CC]) -> None:
        await self.persister.delete(self.agent_key(agent.id))

    async def load_agents(self, query: QueryOptions | None = None) -> ListAgentsResult:
        """Ids of the agents stored in the persister."""
        agent_ids: list[str] = []
        for key in await self.persister.keys():
            try:
                key = key if isinstance(key, PersisterObjectKey) else PersisterObjectKey.model_validate(key)
            except ValueError:
                continue
            if key.type == AGENT_KEY_TYPE and not key.tags:
                agent_ids.append(str(key.value))

        agent_ids.sort()
        if query is not None and query.order == "desc":
            agent_ids.reverse()
        if query is not None and query.offset is not None:
            agent_ids = agent_ids[query.offset :]
        if query is not None and query.limit is not None:
            agent_ids = agent_ids[: query.limit]
        return ListAgentsResult(agent_ids=agent_ids)

    async def alter_agent(self, agent: Agent[None, CC], input: UpdateAgentInput) -> None:
        config = apply_config_patch(agent.get_config(), input.data.config)
        await self.persister.save(
            self.agent_key(agent.id),
            SerializedAgent(agent_id=agent.id, config=config),
            PersisterSaveOptions(overwrite=True),
        )

    async def chats(self, agent_id: str) -> Chats[CC]:
        factory = self.agency_config.chats
        assert factory is not None
        produced = factory(agent_id)
        chats: Chats[CC] = await produced if inspect.isawaitable(produced) else produced

        if self.agency_config.persist_chats:
            chats.set_persister(self.persister)
            existing = chats.persister_tags
            chats.add_persister_tags(*(tag for tag in self.persister_tags(agent_id) if tag not in existing))
            logger.debug("Agent chats scoped to persister", agent_id=agent_id)
        return chats


__all__ = ["ChatAgency", "ChatAgencyConfig"]
