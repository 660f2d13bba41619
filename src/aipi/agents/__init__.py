"""Agents, agencies and the persister backed chat agency."""

from .agency import Agency, AgencyConfig
from .agent import Agent, AgentEngine
from .chat_agency import ChatAgency, ChatAgencyConfig

__all__ = ["Agency", "AgencyConfig", "Agent", "AgentEngine", "ChatAgency", "ChatAgencyConfig"]
