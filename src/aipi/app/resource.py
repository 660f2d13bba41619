"""
Resource base class.

Every mountable unit of functionality (persisters, chats, agencies, schema
validators, provider adapters...) is a Resource. A resource is constructed
unmounted, mounted exactly once by an :class:`AipiApp`, and can reach the app
(and through it every other registered resource) after that.

Registration keys:
    A direct subclass of Resource is a *capability*: instances of it and of all
    its subclasses share one registry bucket. A deeper subclass can open its own
    bucket by declaring ``capability=True``::

        class Persister(Resource): ...                  # key: Persister
        class MemoryPersister(Persister): ...           # key: Persister
        class FileStorage(Persister, capability=True):  # key: FileStorage
            ...
"""

from __future__ import annotations

import inspect

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from aipi.core.errors import AipiError, NotMountedError
from aipi.utils.system import create_id

if TYPE_CHECKING:
    from aipi.app.app import AipiApp
    from aipi.app.registry import BootstrapOptions

T = TypeVar("T")


class Resource(ABC):
    """Base unit of mountable, app-aware functionality."""

    #: Icon shown for this capability in the registry dump
    icon: ClassVar[str | None] = None

    #: Bucket this resource is registered under
    registry_key: ClassVar[type[Resource]]

    def __init_subclass__(cls, capability: bool = False, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if capability or Resource in cls.__bases__:
            cls.registry_key = cls

    def __init__(self) -> None:
        self.id: str = create_id()
        self._mounted = False
        self._app: AipiApp | None = None

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def app(self) -> AipiApp:
        """Owning app.

        Available after mount or when provided via :meth:`feed_app`. It is
        never available while the resource is being constructed.

        Raises:
            NotMountedError: If the resource has no app yet
        """
        if self._app is None:
            raise NotMountedError(
                "App instance not available. Registered resources can access the app after mount. "
                "Use `Resource.feed_app` to provide the app context manually."
            )
        return self._app

    def feed_app(self, app: AipiApp) -> None:
        """Provide the app context without mounting."""
        self._app = app

    async def mount(self, app: AipiApp, options: BootstrapOptions) -> None:
        """Bind the resource to its app and run :meth:`on_mount`.

        Raises:
            AipiError: If the resource is already mounted
        """
        if self._mounted:
            raise AipiError(f"Resource already mounted: {type(self).__name__}")

        self._mounted = True
        self._app = app

        result = self.on_mount(options)
        if inspect.isawaitable(result):
            await result

    def on_mount(self, options: BootstrapOptions) -> Awaitable[None] | None:
        """Hook run once after mount. Override as a plain or ``async`` method."""
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} mounted={self._mounted}>"


Resource.registry_key = Resource


class Covering(ABC, Generic[T]):
    """Capability interface for resources that handle only some items.

    Used by :meth:`AipiApp.cover` / :meth:`AipiApp.cover_all` to dispatch an
    item (a MIME type, a parameter definition...) to the resources that
    declare they cover it.
    """

    @abstractmethod
    def covers(self, item: T) -> bool:
        """Whether this resource handles ``item``."""


__all__ = ["Covering", "Resource"]
