"""Pluggable JSON Schema validator capability."""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, ClassVar

from aipi.app.resource import Resource
from aipi.schemas.schema_builder import ValidationResult


class JSONSchemaValidator(Resource):
    """Validates data against a JSON schema.

    Register an implementation in the registry and hand it to a
    :class:`~aipi.schemas.json_schema_builder.JSONSchemaBuilder` to replace
    the default "is a mapping" check.
    """

    icon: ClassVar[str | None] = "🧪"

    @abstractmethod
    def validate(self, schema: Any, data: Any) -> ValidationResult: ...

    def is_valid(self, schema: Any, data: Any) -> bool:
        return self.validate(schema, data).ok

    def get_errors(self, schema: Any, data: Any) -> list[str]:
        return self.validate(schema, data).errors


__all__ = ["JSONSchemaValidator"]
