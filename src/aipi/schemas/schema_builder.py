"""
Generic validate -> adjust -> build pipeline over a schema value.

Subclasses provide ``validate`` (pure) and optionally override ``adjust``
(a structural rewrite that returns a new schema). ``build`` ties them
together and raises :class:`SchemaValidationError` on invalid output.
"""

from __future__ import annotations

import copy as copy_module

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from aipi.core.errors import SchemaValidationError
from aipi.utils.logger import logger

S = TypeVar("S")


@dataclass(frozen=True)
class SchemaBuilderOptions:
    """Construction options for schema builders.

    Attributes:
        copy_schema: Deep copy the schema handed to the constructor
    """

    copy_schema: bool = True


@dataclass(frozen=True)
class BuildSchemaOptions:
    """Options for :meth:`SchemaBuilder.build`. Every step is on by default."""

    copy: bool = True
    adjust: bool = True
    validate: bool = True


@dataclass
class ValidationResult:
    """Errors found in a schema. Empty means valid."""

    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class SchemaBuilder(ABC, Generic[S]):
    """Base class for schema builders."""

    def __init__(self, schema: S, options: SchemaBuilderOptions | None = None) -> None:
        options = options or SchemaBuilderOptions()
        self._schema: S = self.copy(schema) if options.copy_schema else schema

    @abstractmethod
    def validate(self, schema: S) -> ValidationResult:
        """Check ``schema`` without mutating it."""

    def adjust(self, schema: S) -> S:
        """Rewrite ``schema`` into the builder's target form. Identity by default."""
        return schema

    def _prepared(self, adjust: bool) -> S:
        if not adjust:
            return self._schema
        return self.adjust(self.copy(self._schema))

    def is_valid(self, adjust: bool = False) -> bool:
        """
        Args:
            adjust: Validate the adjusted schema instead of the current one
        """
        return self.validate(self._prepared(adjust)).ok

    def get_errors(self, adjust: bool = False) -> list[str]:
        return self.validate(self._prepared(adjust)).errors

    def copy(self, schema: S) -> S:
        """Deep copy a schema. Override for cheaper copies."""
        return copy_module.deepcopy(schema)

    def build(self, options: BuildSchemaOptions | None = None) -> S:
        """Build the schema.

        Copies (unless disabled), adjusts, then validates the adjusted result.

        Raises:
            SchemaValidationError: If validation is enabled and fails
        """
        options = options or BuildSchemaOptions()
        result = self.copy(self._schema) if options.copy else self._schema

        if options.adjust:
            result = self.adjust(result)

        if options.validate:
            errors = self.validate(result).errors
            if errors:
                logger.debug(f"{type(self).__name__} rejected schema", errors=errors)
                raise SchemaValidationError(errors)

        return result

    def get_schema(self) -> S:
        """Current schema, as held by the builder (not copied)."""
        return self._schema

    def schema(self, schema: S, copy: bool = True) -> SchemaBuilder[S]:
        """Replace the current schema."""
        self._schema = self.copy(schema) if copy else schema
        return self

    def mutate(self, mutator: Callable[[S], S]) -> SchemaBuilder[S]:
        """Replace the schema with a copy of ``mutator(schema)``."""
        self._schema = self.copy(mutator(self._schema))
        return self


__all__ = [
    "BuildSchemaOptions",
    "SchemaBuilder",
    "SchemaBuilderOptions",
    "ValidationResult",
]
