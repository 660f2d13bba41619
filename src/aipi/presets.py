"""Registry presets shipped with aipi."""

from __future__ import annotations

from aipi.app.registry import AipiRegistry
from aipi.core.constants import get_settings
from aipi.persister.memory_persister import MemoryPersister


def default_preset(registry: AipiRegistry) -> None:
    """Register fallback resources.

    Uses the preset priority so resources registered by the application
    (default priority) always win.
    """
    registry.use(MemoryPersister(), priority=get_settings().default_resource_priority)


__all__ = ["default_preset"]
