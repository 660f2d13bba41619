"""Agent data models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from aipi.models.chat_models import Tool


class Instructions(BaseModel):
    content: str = ""


class AgentConfig(BaseModel):
    """Configuration an agent runs with."""

    tools: list[Tool] = Field(default_factory=list)
    resources: Any = None
    data: Any = None
    instructions: Instructions = Field(default_factory=Instructions)
    description: str = ""
    name: str = ""


class AgentConfigPatch(BaseModel):
    """Partial ``AgentConfig``. Only fields that were set are applied."""

    tools: list[Tool] | None = None
    resources: Any = None
    data: Any = None
    instructions: Instructions | None = None
    description: str | None = None
    name: str | None = None


class UpdateAgentData(BaseModel):
    config: AgentConfigPatch | None = None


class SerializedAgent(BaseModel):
    agent_id: str
    config: AgentConfig = Field(default_factory=AgentConfig)


class CreateAgentInput(BaseModel):
    config: AgentConfigPatch = Field(default_factory=AgentConfigPatch)


class CreateAgentResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    agent_id: str
    config: AgentConfig
    context: Any = None


class LoadAgentResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: AgentConfig
    context: Any = None


class ListAgentsResult(BaseModel):
    agent_ids: list[str] = Field(default_factory=list)


class UpdateAgentInput(BaseModel):
    data: UpdateAgentData = Field(default_factory=UpdateAgentData)


class CreateAgentContextInput(BaseModel):
    agent_id: str


def apply_config_patch(config: AgentConfig, patch: AgentConfigPatch | None) -> AgentConfig:
    """Return ``config`` with the fields set on ``patch`` replaced (shallow)."""
    if patch is None:
        return config
    update = {name: getattr(patch, name) for name in patch.model_fields_set if getattr(patch, name) is not None}
    return config.model_copy(update=update)


__all__ = [
    "AgentConfig",
    "AgentConfigPatch",
    "CreateAgentContextInput",
    "CreateAgentInput",
    "CreateAgentResult",
    "Instructions",
    "ListAgentsResult",
    "LoadAgentResult",
    "SerializedAgent",
    "UpdateAgentData",
    "UpdateAgentInput",
    "apply_config_patch",
]
