"""Filesystem persister storing one JSON document per key.

No cross-process locking: concurrent writers to the same key can interleave.
"""

from __future__ import annotations

import json

from pathlib import Path
from typing import Any

import aiofiles

from aipi.core.constants import FS_PERSISTER_SUFFIX, get_settings
from aipi.core.errors import AipiError, KeyExistsError, NotSupportedError
from aipi.models.persister_models import PersisterClearOptions, PersisterSaveOptions
from aipi.persister.persister import Persister
from aipi.utils.json_utils import json_pretty, stable_hash, to_jsonable
from aipi.utils.logger import logger


class FileSystemPersister(Persister[Any, Any]):
    """Stores ``{"key": ..., "value": ...}`` documents under ``base_dir``.

    Values are stored as plain JSON, so pydantic models come back as dicts;
    revivers validate them again. Refuses to overwrite unless
    ``overwrite=True`` is passed.
    """

    def __init__(self, base_dir: str | Path | None = None) -> None:
        """
        Args:
            base_dir: Storage directory (defaults to ``Settings.fs_persister_dir``)
        """
        super().__init__()
        self.base_dir = Path(base_dir or get_settings().fs_persister_dir).resolve()

    def _path(self, key: Any) -> Path:
        return self.base_dir / f"{stable_hash(key)}{FS_PERSISTER_SUFFIX}"

    def _documents(self) -> list[Path]:
        if not self.base_dir.exists():
            return []
        return sorted(self.base_dir.glob(f"*{FS_PERSISTER_SUFFIX}"))

    async def _read(self, path: Path) -> dict[str, Any]:
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
        try:
            document: dict[str, Any] = json.loads(content)
        except json.JSONDecodeError as e:
            raise AipiError(f"Corrupt persister entry: {path.name}", cause=e) from e
        return document

    async def save(self, key: Any, value: Any, options: PersisterSaveOptions | None = None) -> None:
        path = self._path(key)
        overwrite = bool(options and options.overwrite)
        if not overwrite and path.exists():
            raise KeyExistsError(key)

        self.base_dir.mkdir(parents=True, exist_ok=True)
        document = {"key": to_jsonable(key), "value": to_jsonable(value)}
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(json_pretty(document))
        logger.debug(f"FileSystemPersister wrote {path.name}")

    async def load(self, key: Any) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        document = await self._read(path)
        return document.get("value")

    async def delete(self, key: Any) -> None:
        self._path(key).unlink(missing_ok=True)

    async def clear(self, options: PersisterClearOptions | None = None) -> None:
        if options is None or not options.force:
            raise NotSupportedError(
                "Clear",
                "Clearing the file system persister is not supported without the force option.",
            )
        for path in self._documents():
            path.unlink(missing_ok=True)
        logger.info(f"FileSystemPersister cleared {self.base_dir}")

    async def entries(self) -> list[tuple[Any, Any]]:
        result: list[tuple[Any, Any]] = []
        for path in self._documents():
            document = await self._read(path)
            result.append((document.get("key"), document.get("value")))
        return result

    async def keys(self) -> list[Any]:
        return [key for key, _ in await self.entries()]

    async def values(self) -> list[Any]:
        return [value for _, value in await self.entries()]

    async def size(self) -> int:
        return len(self._documents())

    async def has(self, key: Any) -> bool:
        return self._path(key).exists()


__all__ = ["FileSystemPersister"]
