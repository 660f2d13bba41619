"""Key/value persister contract used for durable state."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Awaitable, Iterable
from typing import Any, ClassVar, Generic, Protocol, TypeVar, runtime_checkable

from aipi.app.resource import Resource
from aipi.core.constants import PERSISTER_TAG_PREFIX
from aipi.models.persister_models import PersisterClearOptions, PersisterObjectKey, PersisterSaveOptions

K = TypeVar("K")
V = TypeVar("V")
P = TypeVar("P", covariant=True)
S_contra = TypeVar("S_contra", contravariant=True)
T_co = TypeVar("T_co", covariant=True)


class Persister(Resource, Generic[K, V]):
    """Abstract key/value store.

    Keys are opaque to the persister. By convention they are built with
    :meth:`Persister.key` so several logical namespaces (chats, agents...)
    can share one physical store.

    Each implementation documents its default overwrite policy. ``clear``
    must refuse to run unless ``force`` is set.
    """

    icon: ClassVar[str | None] = "💾"

    @abstractmethod
    async def save(self, key: K, value: V, options: PersisterSaveOptions | None = None) -> None: ...

    @abstractmethod
    async def load(self, key: K) -> V | None: ...

    @abstractmethod
    async def delete(self, key: K) -> None: ...

    @abstractmethod
    async def clear(self, options: PersisterClearOptions | None = None) -> None: ...

    @abstractmethod
    async def keys(self) -> list[K]: ...

    @abstractmethod
    async def values(self) -> list[V]: ...

    @abstractmethod
    async def entries(self) -> list[tuple[K, V]]: ...

    @abstractmethod
    async def size(self) -> int: ...

    @abstractmethod
    async def has(self, key: K) -> bool: ...

    @staticmethod
    def key(type: str, value: Any, tags: Iterable[str] = ()) -> PersisterObjectKey:
        """Create a structured key.

        Args:
            type: Namespace of the key
            value: Identifier inside the namespace
            tags: Scoping tags (e.g. ``["agent", agent_id]``)
        """
        return PersisterObjectKey(type=type, value=value, tags=tuple(f"{PERSISTER_TAG_PREFIX}{t}" for t in tags))


@runtime_checkable
class Persistable(Protocol[P]):
    """An object that can be serialized for persistence. Pairs with :class:`Reviver`."""

    def serialize(self) -> P: ...


class Reviver(Protocol[S_contra, T_co]):
    """Rebuilds objects from their serialized form. Pairs with :class:`Persistable`."""

    def revive(self, serialized: S_contra) -> Awaitable[T_co]: ...


__all__ = ["Persistable", "Persister", "Reviver"]
