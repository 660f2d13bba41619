"""
Builds schemas suitable for function calls.

Strict schemas have the following features:
- The root is an object
- Every sub-schema has exactly one type out of a small allow-list
- All object properties are required
- Objects never allow additional properties

``adjust`` rewrites most non-fitting schemas into this form. Type problems
cannot be fixed automatically and still fail validation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from aipi.core.constants import STRICT_SCHEMA_TYPES
from aipi.schemas.json_schema_builder import JSONSchema, JSONSchemaBuilder, for_each_sub_schema, transform_schema
from aipi.schemas.schema_builder import ValidationResult


class StrictJSONSchemaBuilder(JSONSchemaBuilder):
    allowed_types: ClassVar[frozenset[str]] = STRICT_SCHEMA_TYPES
    allowed_keys: ClassVar[frozenset[str]] = frozenset(
        {"type", "description", "properties", "required", "enum", "items", "additionalProperties"}
    )
    root_error: ClassVar[str] = "Root schema must be 'object'"

    def validate(self, schema: JSONSchema) -> ValidationResult:
        base = super().validate(schema)
        if not base.ok:
            return base

        if schema.get("type") != "object":
            return ValidationResult(errors=[self.root_error])

        errors: list[str] = []

        def check(node: JSONSchema, path: str) -> None:
            where = path or "/"
            node_type = node.get("type")
            if isinstance(node_type, list):
                errors.append(f"Multiple types are not allowed at {where}")
                return
            if node_type not in self.allowed_types:
                errors.append(f"Type not allowed: {node_type} at {where}")
            for key in node:
                if key.startswith("$"):
                    continue
                if key not in self.allowed_keys:
                    errors.append(f"Property not allowed: {key} at {where}")

        for_each_sub_schema(schema, check)
        return ValidationResult(errors=errors)

    def adjust(self, schema: JSONSchema) -> JSONSchema:
        return transform_schema(schema, self.adjust_node)

    def adjust_node(self, node: JSONSchema, path: str) -> JSONSchema:
        """Rewrite a single sub-schema. Children are already adjusted."""
        adjusted = {key: value for key, value in node.items() if key in self.allowed_keys}
        return self.close_object(adjusted)

    @staticmethod
    def close_object(node: JSONSchema) -> JSONSchema:
        """Forbid additional properties and require every property of an object node."""
        if node.get("type") == "object":
            properties: Any = node.get("properties") or {}
            node["additionalProperties"] = False
            node["required"] = list(properties) if isinstance(properties, Mapping) else []
        return node


__all__ = ["StrictJSONSchemaBuilder"]
