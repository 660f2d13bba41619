"""Plain text completion capability."""

from __future__ import annotations

from abc import abstractmethod

from aipi.app.resource import Resource
from aipi.models.embedding_models import CompleteOptions, CompleteResult


class Completer(Resource):
    """Completes a prompt without any chat state."""

    @abstractmethod
    async def complete(self, text: str, options: CompleteOptions | None = None) -> CompleteResult: ...


__all__ = ["Completer"]
