"""Tests for chat and agent data models."""

from __future__ import annotations

import pytest

from pydantic import ValidationError

from aipi.models.agent_models import AgentConfig, AgentConfigPatch, Instructions, apply_config_patch
from aipi.models.chat_models import (
    ClearChatsResult,
    Format,
    Message,
    QueryOptions,
    RunChatInput,
    Tool,
    ToolMatch,
)


class TestTool:
    """Tests for Tool."""

    def test_schema_alias(self) -> None:
        schema = {"type": "object"}
        tool = Tool(name="search", schema=schema)

        assert tool.schema_ == schema
        assert tool.type == "function"
        assert tool.model_dump(by_alias=True)["schema"] == schema

    def test_populate_by_field_name(self) -> None:
        assert Tool(name="search", schema_={"type": "object"}).schema_ == {"type": "object"}

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            Tool(name="")

    def test_format_alias(self) -> None:
        assert Format.model_validate({"type": "json", "schema": {"type": "object"}}).schema_ == {"type": "object"}


class TestToolMatch:
    def test_parse_error_dumps_as_repr(self) -> None:
        match = ToolMatch(tool="t", raw_params="{", parse_error=ValueError("bad"))
        assert match.model_dump()["parse_error"] == "ValueError('bad')"

    def test_plain_parse_error_passes_through(self) -> None:
        assert ToolMatch(tool="t", parse_error="bad").model_dump()["parse_error"] == "bad"


class TestMessage:
    def test_custom_roles(self) -> None:
        assert Message(role="developer").role == "developer"


class TestQueryAndRunOptions:
    """Tests for option validation."""

    @pytest.mark.parametrize("field", ["limit", "offset"])
    def test_negative_paging_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            QueryOptions(**{field: -1})

    def test_choices_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            RunChatInput(choices=0)

    def test_clear_result_ok(self) -> None:
        assert ClearChatsResult(deleted=["a"]).ok
        assert not ClearChatsResult(failed={"b": "boom"}).ok


class TestApplyConfigPatch:
    """Tests for apply_config_patch."""

    def test_only_set_fields_replace(self) -> None:
        config = AgentConfig(name="old", description="kept", tools=[Tool(name="a")])
        patched = apply_config_patch(config, AgentConfigPatch(name="new", instructions=Instructions(content="hi")))

        assert patched.name == "new"
        assert patched.description == "kept"
        assert [t.name for t in patched.tools] == ["a"]
        assert patched.instructions.content == "hi"
        assert config.name == "old"

    def test_explicit_none_is_ignored(self) -> None:
        config = AgentConfig(name="keep")
        assert apply_config_patch(config, AgentConfigPatch(name=None)).name == "keep"

    def test_no_patch(self) -> None:
        config = AgentConfig()
        assert apply_config_patch(config, None) is config
