"""
Application handle emitted by a registry on bootstrap.

Mounted resources reach their collaborators through the app instead of
importing them: ``self.app.require(Persister)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from aipi.app.resource import Covering, Resource
from aipi.core.errors import ResourceNotFoundError
from aipi.utils.logger import logger

if TYPE_CHECKING:
    from aipi.app.registry import AipiRegistry, BootstrapOptions

R = TypeVar("R", bound=Resource)


class AipiApp:
    """Resolution facade over a bootstrapped registry."""

    def __init__(self, registry: AipiRegistry, options: BootstrapOptions) -> None:
        self.registry = registry
        self._options = options
        self.dev_mode: bool = options.print_registry

    async def mount(self, resource: R, options: BootstrapOptions | None = None) -> R:
        """Mount a resource without registering it."""
        await resource.mount(self, options or self._options)
        return resource

    def get(self, key: type[R]) -> R | None:
        """Get the highest priority resource of a capability."""
        return self.registry.find(key)

    def require(self, key: type[R]) -> R:
        """Get a resource or fail.

        Raises:
            ResourceNotFoundError: If no resource matches
        """
        resource = self.registry.find(key)
        if resource is None:
            raise ResourceNotFoundError(key)
        return resource

    def get_all(self, key: type[R]) -> list[R]:
        return self.registry.find_all(key)

    def cover(self, item: Any, key: type[R]) -> R | None:
        """First resource (by priority) of ``key`` whose ``covers(item)`` is true."""
        for candidate in self.get_all(key):
            if isinstance(candidate, Covering) and candidate.covers(item):
                return candidate
        return None

    def cover_all(self, item: Any, key: type[R]) -> list[R]:
        """All resources of ``key`` covering ``item``, highest priority first."""
        return [c for c in self.get_all(key) if isinstance(c, Covering) and c.covers(item)]

    def log(self, message: str, **kwargs: Any) -> None:
        logger.info(message, **kwargs)

    def log_dev(self, message: str, **kwargs: Any) -> None:
        """Log only in dev mode (bootstrapped with ``print_registry``)."""
        if self.dev_mode:
            logger.info(message, **kwargs)


__all__ = ["AipiApp"]
