"""Embedding and completion data models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

#: One embedding, as returned by the provider
Vector = list[float]


class TextEmbedInput(BaseModel):
    """Text to embed.

    A single string yields one vector, a list yields one vector per item.
    """

    text: list[str] | str
    params: dict[str, Any] | None = Field(default=None, description="Provider specific parameters")

    @property
    def texts(self) -> list[str]:
        """The input as a list, one entry per expected vector."""
        return [self.text] if isinstance(self.text, str) else list(self.text)


class CompleteOptions(BaseModel):
    choices: int | None = Field(default=None, ge=1, description="Number of completions to generate")


class CompleteResult(BaseModel):
    choices: list[str] = Field(default_factory=list)


__all__ = ["CompleteOptions", "CompleteResult", "TextEmbedInput", "Vector"]
