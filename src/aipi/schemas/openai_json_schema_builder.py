"""Structured output / function schema profile for OpenAI style APIs."""

from __future__ import annotations

from typing import ClassVar

from aipi.schemas.json_schema_builder import JSONSchema
from aipi.schemas.strict_json_schema_builder import StrictJSONSchemaBuilder


class OpenAIJSONSchemaBuilder(StrictJSONSchemaBuilder):
    """Strict profile that tolerates ``title`` and ``format`` during validation.

    ``adjust`` only strips meta keywords and forces the object rules, other
    keywords are kept as they are.
    """

    allowed_keys: ClassVar[frozenset[str]] = StrictJSONSchemaBuilder.allowed_keys | {"title", "format"}
    stripped_keys: ClassVar[tuple[str, ...]] = ("$schema", "$id", "$ref", "$defs", "$comment", "title", "format")
    root_error: ClassVar[str] = "Root schema must be object"

    def adjust_node(self, node: JSONSchema, path: str) -> JSONSchema:
        adjusted = {key: value for key, value in node.items() if key not in self.stripped_keys}
        return self.close_object(adjusted)


__all__ = ["OpenAIJSONSchemaBuilder"]
