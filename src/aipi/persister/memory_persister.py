"""In-memory persister. Safe within a single event loop only."""

from __future__ import annotations

from typing import Any

from aipi.core.errors import KeyExistsError, NotSupportedError
from aipi.models.persister_models import PersisterClearOptions, PersisterSaveOptions
from aipi.persister.persister import Persister
from aipi.utils.json_utils import stable_hash
from aipi.utils.logger import logger


class MemoryPersister(Persister[Any, Any]):
    """Dict-backed persister addressed by content hash of the key.

    Overwrites existing entries by default; pass ``overwrite=False`` to refuse.
    """

    def __init__(self) -> None:
        super().__init__()
        # hash -> (original key, value)
        self._store: dict[str, tuple[Any, Any]] = {}

    async def save(self, key: Any, value: Any, options: PersisterSaveOptions | None = None) -> None:
        hashed = stable_hash(key)
        if options is not None and options.overwrite is False and hashed in self._store:
            raise KeyExistsError(key)
        self._store[hashed] = (key, value)
        logger.debug(f"MemoryPersister saved {hashed[:12]}")

    async def load(self, key: Any) -> Any | None:
        entry = self._store.get(stable_hash(key))
        return entry[1] if entry else None

    async def delete(self, key: Any) -> None:
        self._store.pop(stable_hash(key), None)

    async def clear(self, options: PersisterClearOptions | None = None) -> None:
        if options is None or not options.force:
            raise NotSupportedError("Clear", "Clearing the memory persister requires the force option.")
        self._store.clear()

    async def keys(self) -> list[Any]:
        return [key for key, _ in self._store.values()]

    async def values(self) -> list[Any]:
        return [value for _, value in self._store.values()]

    async def entries(self) -> list[tuple[Any, Any]]:
        return list(self._store.values())

    async def size(self) -> int:
        return len(self._store)

    async def has(self, key: Any) -> bool:
        return stable_hash(key) in self._store


__all__ = ["MemoryPersister"]
