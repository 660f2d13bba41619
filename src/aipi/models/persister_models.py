"""Models shared by persister implementations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PersisterObjectKey(BaseModel):
    """Structured persister key.

    Two keys with equal ``type``, ``value`` and ``tags`` address the same
    stored entry in every persister; keys are compared by content, never by
    identity.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., min_length=1, description="Logical namespace, e.g. 'chat' or 'agent'")
    value: Any = Field(default=None, description="Identifier inside the namespace")
    tags: tuple[str, ...] = Field(default=(), description="Prefixed scoping tags")


class PersisterSaveOptions(BaseModel):
    """Options for ``Persister.save``.

    ``overwrite=None`` means "use the implementation default".
    """

    overwrite: bool | None = None


class PersisterClearOptions(BaseModel):
    """Options for ``Persister.clear``. Persisters refuse to clear without ``force``."""

    force: bool = False


__all__ = ["PersisterClearOptions", "PersisterObjectKey", "PersisterSaveOptions"]
