"""Schema builders: validate, adjust and build JSON schemas for providers."""

from .json_schema_builder import (
    JSONSchema,
    JSONSchemaBuilder,
    JSONSchemaBuilderOptions,
    for_each_sub_schema,
    is_object_like_schema,
    resolve_obj_path,
    transform_schema,
)
from .json_schema_validator import JSONSchemaValidator
from .openai_json_schema_builder import OpenAIJSONSchemaBuilder
from .schema_builder import BuildSchemaOptions, SchemaBuilder, SchemaBuilderOptions, ValidationResult
from .strict_json_schema_builder import StrictJSONSchemaBuilder

__all__ = [
    "BuildSchemaOptions",
    "JSONSchema",
    "JSONSchemaBuilder",
    "JSONSchemaBuilderOptions",
    "JSONSchemaValidator",
    "OpenAIJSONSchemaBuilder",
    "SchemaBuilder",
    "SchemaBuilderOptions",
    "StrictJSONSchemaBuilder",
    "ValidationResult",
    "for_each_sub_schema",
    "is_object_like_schema",
    "resolve_obj_path",
    "transform_schema",
]
