"""
Resource registry (dependency injection container).

Example:
    app = await (
        AipiRegistry()
        .use(OpenAIProvider())
        .use(MemoryPersister(), priority=50)
        .preset(default_preset)
        .bootstrap()
    )

The registry is an ordinary object: construct one per application (or per
test) and pass it around. It is meant to be configured once at startup, before
concurrent request handling begins.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

from aipi.app.app import AipiApp
from aipi.app.resource import Resource
from aipi.core.constants import (
    DEFAULT_REGISTRY_ICON,
    REGISTRY_DUMP_FOOTER,
    REGISTRY_DUMP_HEADER,
    get_settings,
)
from aipi.core.errors import AipiError, ErrorTag, ResourceNotFoundError
from aipi.utils.logger import logger

R = TypeVar("R", bound=Resource)
C = TypeVar("C")

AipiPreset = Callable[["AipiRegistry"], Awaitable[None] | None]


class BootstrapOptions(BaseModel):
    """Options for :meth:`AipiRegistry.bootstrap`.

    Attributes:
        print_registry: Log the registry dump after bootstrap and enable
            dev logging on the app
    """

    model_config = ConfigDict(frozen=True)

    print_registry: bool = False

    @classmethod
    def from_settings(cls) -> BootstrapOptions:
        return cls(print_registry=get_settings().print_registry)


@dataclass
class RegistryEntry:
    resource: Resource
    priority: int
    #: Position in registration order across all buckets
    sequence: int = 0


class AipiRegistry:
    """Registers resources under a priority and resolves them by capability."""

    def __init__(self) -> None:
        self._registry: dict[type[Resource], list[RegistryEntry]] = {}
        self._sequence = itertools.count()
        self.presets: list[AipiPreset] = []

    @classmethod
    def disclose(cls) -> AipiRegistry:
        """Create an empty registry."""
        return cls()

    # ========== Registration ==========

    def use(self, resource: Resource, priority: int | None = None) -> AipiRegistry:
        """Register a resource.

        Several resources may share a capability; later registrations never
        evict earlier ones.

        Args:
            resource: The resource to register
            priority: Higher priorities are resolved first. Defaults to 100,
                preset resources use 50.

        Returns:
            Self for method chaining
        """
        if not isinstance(resource, Resource):
            raise AipiError(f"Not a resource: {resource!r}", tags=[ErrorTag.TYPE_ERROR])

        if priority is None:
            priority = get_settings().default_priority

        key = type(resource).registry_key
        entry = RegistryEntry(resource=resource, priority=priority, sequence=next(self._sequence))
        self._registry.setdefault(key, []).append(entry)
        logger.debug(f"Registered {type(resource).__name__} under {key.__name__} <{priority}>")
        return self

    def use_if(
        self,
        condition: C,
        factory: Callable[[C], Resource | list[Resource]],
        priority: int | None = None,
    ) -> AipiRegistry:
        """Register the resource(s) built by ``factory`` only if ``condition`` is truthy.

        The factory receives the (truthy) condition, so optional configuration
        can be passed straight through::

            registry.use_if(settings.openai_api_key, lambda key: OpenAIProvider(key))
        """
        if condition:
            resources = factory(condition)
            if not isinstance(resources, list):
                resources = [resources]
            for resource in resources:
                self.use(resource, priority)
        return self

    def preset(self, preset: AipiPreset) -> AipiRegistry:
        """Add a preset that runs (in order) at the end of bootstrap."""
        self.presets.append(preset)
        return self

    def clear(self) -> None:
        self._registry.clear()

    # ========== Resolution ==========

    def find_all(self, key: type[R]) -> list[R]:
        """All registered instances of ``key``, highest priority first.

        Every bucket whose capability derives from ``key``'s capability is
        searched (including buckets opened with ``capability=True``), then
        entries are filtered by their actual type, so a query for a subclass
        only returns instances of that subclass. Equal priorities keep
        registration order.
        """
        candidates = [
            entry
            for bucket_key, bucket in self._registry.items()
            if issubclass(bucket_key, key.registry_key)
            for entry in bucket
            if isinstance(entry.resource, key)
        ]
        candidates.sort(key=lambda entry: (-entry.priority, entry.sequence))
        return [entry.resource for entry in candidates]  # type: ignore[misc]

    def find(self, key: type[R]) -> R | None:
        """Highest priority instance of ``key`` or ``None``."""
        found = self.find_all(key)
        return found[0] if found else None

    def require(self, key: type[R]) -> R:
        """Like :meth:`find` but mandatory.

        Raises:
            ResourceNotFoundError: If nothing matches
        """
        resource = self.find(key)
        if resource is None:
            raise ResourceNotFoundError(key)
        return resource

    def entries(self) -> list[RegistryEntry]:
        """All entries in registration order, one per registration."""
        entries = [entry for bucket in self._registry.values() for entry in bucket]
        return sorted(entries, key=lambda entry: entry.sequence)

    # ========== Bootstrap ==========

    async def _mount_pending(self, app: AipiApp, options: BootstrapOptions) -> int:
        pending: dict[int, Resource] = {}
        for entry in self.entries():
            if not entry.resource.mounted:
                pending.setdefault(id(entry.resource), entry.resource)

        # Resources must not rely on each other's on_mount having completed
        await asyncio.gather(*(resource.mount(app, options) for resource in pending.values()))
        return len(pending)

    async def bootstrap(self, options: BootstrapOptions | None = None) -> AipiApp:
        """Mount every registered resource and run the presets.

        Resources registered by presets are mounted once all presets ran.

        Args:
            options: Bootstrap options (defaults from settings)

        Returns:
            The app the resources are mounted on
        """
        if options is None:
            options = BootstrapOptions.from_settings()

        app = AipiApp(self, options)

        mounted = await self._mount_pending(app, options)

        for preset in self.presets:
            result = preset(self)
            if inspect.isawaitable(result):
                await result

        if self.presets:
            mounted += await self._mount_pending(app, options)

        logger.info(f"Bootstrapped registry: {mounted} resources mounted, {len(self.presets)} presets")

        if options.print_registry:
            logger.info(self.print())

        return app

    def print(self) -> str:
        """Human-readable dump of the registry."""
        text = f"{REGISTRY_DUMP_HEADER}\n"

        for key, bucket in self._registry.items():
            icon = key.icon or DEFAULT_REGISTRY_ICON
            text += f"\n{icon} {key.__name__}(s):\n"
            for entry in bucket:
                text += f"   {type(entry.resource).__name__} <{entry.priority}>\n"

        text += f"\n{REGISTRY_DUMP_FOOTER}"
        return text


__all__ = ["AipiPreset", "AipiRegistry", "BootstrapOptions", "RegistryEntry"]
