"""Tests for the strict and OpenAI schema profiles."""

from __future__ import annotations

from typing import Any

import pytest

from aipi.core.errors import SchemaValidationError
from aipi.schemas import BuildSchemaOptions, OpenAIJSONSchemaBuilder, StrictJSONSchemaBuilder

PROFILE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "title": "Profile",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "tags": {"type": "array", "items": {"type": "string"}},
    },
}


class TestStrictValidation:
    """Tests for StrictJSONSchemaBuilder.validate."""

    def test_reports_disallowed_keys_with_paths(self) -> None:
        builder = StrictJSONSchemaBuilder(PROFILE_SCHEMA)
        assert builder.get_errors() == [
            "Property not allowed: minLength at /properties/name",
            "Property not allowed: title at /",
        ]

    def test_root_must_be_object(self) -> None:
        assert StrictJSONSchemaBuilder({"type": "string"}).get_errors() == ["Root schema must be 'object'"]

    def test_multiple_types(self) -> None:
        schema = {"type": "object", "properties": {"x": {"type": ["string", "null"]}}}
        assert StrictJSONSchemaBuilder(schema).get_errors() == ["Multiple types are not allowed at /properties/x"]

    @pytest.mark.parametrize(
        ("child", "message"),
        [
            ({"type": "null"}, "Type not allowed: null at /properties/x"),
            ({}, "Type not allowed: None at /properties/x"),
        ],
    )
    def test_type_allow_list(self, child: dict[str, Any], message: str) -> None:
        schema = {"type": "object", "properties": {"x": child}}
        assert StrictJSONSchemaBuilder(schema).get_errors() == [message]

    def test_untyped_array_items_fail(self) -> None:
        schema = {"type": "object", "properties": {"tags": {"type": "array", "items": {}}}}
        builder = StrictJSONSchemaBuilder(schema)
        assert builder.get_errors(adjust=True) == ["Type not allowed: None at /properties/tags/items"]
        with pytest.raises(SchemaValidationError):
            builder.build()

    def test_dollar_keys_are_ignored(self) -> None:
        schema = {"type": "object", "$schema": "https://json-schema.org/draft/2020-12/schema"}
        assert StrictJSONSchemaBuilder(schema).get_errors() == []

    def test_is_valid_after_adjust(self) -> None:
        builder = StrictJSONSchemaBuilder(PROFILE_SCHEMA)
        assert builder.is_valid() is False
        assert builder.is_valid(adjust=True) is True
        # Checking the adjusted form leaves the builder's schema untouched
        assert builder.get_schema() == PROFILE_SCHEMA


class TestStrictBuild:
    """Tests for adjust and build."""

    def test_build_adjusts_into_strict_form(self) -> None:
        built = StrictJSONSchemaBuilder(PROFILE_SCHEMA).build()
        assert built == {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
            "additionalProperties": False,
            "required": ["name", "tags"],
        }

    def test_nested_objects_are_closed(self) -> None:
        schema = {
            "type": "object",
            "properties": {"inner": {"type": "object", "properties": {"a": {"type": "string"}}}},
        }
        built = StrictJSONSchemaBuilder(schema).build()
        assert built["properties"]["inner"]["additionalProperties"] is False
        assert built["properties"]["inner"]["required"] == ["a"]

    def test_empty_object(self) -> None:
        built = StrictJSONSchemaBuilder({"type": "object"}).build()
        assert built == {"type": "object", "additionalProperties": False, "required": []}

    def test_unfixable_types_raise(self) -> None:
        schema = {"type": "object", "properties": {"x": {"type": ["string", "null"]}}}
        with pytest.raises(SchemaValidationError) as exc_info:
            StrictJSONSchemaBuilder(schema).build()
        assert exc_info.value.errors == ["Multiple types are not allowed at /properties/x"]

    def test_build_without_adjust_validates_raw_schema(self) -> None:
        builder = StrictJSONSchemaBuilder(PROFILE_SCHEMA)
        with pytest.raises(SchemaValidationError):
            builder.build(BuildSchemaOptions(adjust=False))
        assert builder.build(BuildSchemaOptions(adjust=False, validate=False)) == PROFILE_SCHEMA

    def test_adjust_is_pure(self) -> None:
        builder = StrictJSONSchemaBuilder(PROFILE_SCHEMA)
        source = builder.get_schema()
        builder.adjust(source)
        assert source == PROFILE_SCHEMA


class TestOpenAIProfile:
    """Tests for OpenAIJSONSchemaBuilder."""

    def test_title_and_format_are_tolerated(self) -> None:
        schema = {
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "type": "object",
            "title": "Event",
            "properties": {"when": {"type": "string", "format": "date-time", "title": "When"}},
        }
        builder = OpenAIJSONSchemaBuilder(schema)
        assert builder.get_errors() == []

        assert builder.build() == {
            "type": "object",
            "properties": {"when": {"type": "string"}},
            "additionalProperties": False,
            "required": ["when"],
        }

    def test_root_error(self) -> None:
        assert OpenAIJSONSchemaBuilder({"type": "array"}).get_errors() == ["Root schema must be object"]

    def test_other_keywords_still_fail(self) -> None:
        schema = {"type": "object", "properties": {"n": {"type": "string", "minLength": 1}}}
        with pytest.raises(SchemaValidationError) as exc_info:
            OpenAIJSONSchemaBuilder(schema).build()
        assert exc_info.value.errors == ["Property not allowed: minLength at /properties/n"]
