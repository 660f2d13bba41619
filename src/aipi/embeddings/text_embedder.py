"""Text embedding capability."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from aipi.app.resource import Resource
from aipi.models.embedding_models import TextEmbedInput, Vector


class TextEmbedder(Resource):
    """Turns text into embedding vectors.

    Provider adapters subclass it and are resolved with
    ``app.require(TextEmbedder)``.
    """

    icon: ClassVar[str | None] = "📝"

    @abstractmethod
    async def embed(self, input: TextEmbedInput, options: Mapping[str, Any] | None = None) -> list[Vector]:
        """One vector per input text, in input order."""


__all__ = ["TextEmbedder"]
