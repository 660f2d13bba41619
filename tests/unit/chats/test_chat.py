"""Tests for Chat state and engine delegation."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from aipi.chats.chat import Chat, ChatOptions, stack_snapshots
from aipi.core.errors import AipiError
from aipi.models.chat_models import (
    ChatResources,
    ChatResourcesPatch,
    ChatSnapshot,
    QueryOptions,
    RunInit,
    RunResponse,
    Tool,
    ToolMatch,
    UpdateChatData,
)

from conftest import make_message


def make_engine() -> Mock:
    engine = Mock()
    engine.add_messages = AsyncMock()
    engine.delete_message = AsyncMock()
    engine.load_messages = AsyncMock(return_value=[])
    engine.refresh = AsyncMock(return_value=ChatSnapshot())
    engine.run = AsyncMock()
    engine.update = AsyncMock()
    engine.on_change = AsyncMock()
    return engine


def make_chat(
    engine: Mock | None = None,
    messages: int = 0,
    resources: ChatResources | None = None,
    chat_id: str = "c1",
) -> Chat[dict[str, Any]]:
    snapshot = ChatSnapshot(messages=[make_message(f"msg {i}", f"m{i}") for i in range(messages)])
    return Chat(engine or make_engine(), chat_id, resources or ChatResources(), snapshot, {"thread": "t1"})


class TestStackSnapshots:
    """Tests for stack_snapshots."""

    def test_appends_in_order(self) -> None:
        a = ChatSnapshot(messages=[make_message("one", "m1")], tool_matches=[ToolMatch(tool="t1")])
        b = ChatSnapshot(
            messages=[make_message("two", "m2"), make_message("three", "m3")],
            tool_matches=[ToolMatch(tool="t2")],
        )
        stacked = stack_snapshots(a, b)

        assert [m.id for m in stacked.messages] == ["m1", "m2", "m3"]
        assert [t.tool for t in stacked.tool_matches] == ["t1", "t2"]
        assert len(a.messages) == 1

    def test_no_deduplication(self) -> None:
        message = make_message("same", "m1")
        stacked = Chat.stack_snapshots(ChatSnapshot(messages=[message]), ChatSnapshot(messages=[message]))
        assert len(stacked.messages) == 2


class TestChatReads:
    """Tests for read-only accessors."""

    def test_basic_accessors(self) -> None:
        tool = Tool(name="search")
        chat = make_chat(messages=2, resources=ChatResources(tools=[tool], resources={"k": 1}))

        assert chat.id == "c1"
        assert chat.tools == [tool]
        assert chat.resources == {"k": 1}
        assert chat.context == {"thread": "t1"}
        assert chat.last_run_id == ""
        assert chat.auto_persist is True
        assert chat.has_messages()
        assert chat.latest_message is not None
        assert chat.latest_message.id == "m1"

    def test_empty_chat(self) -> None:
        chat = make_chat()
        assert not chat.has_messages()
        assert chat.latest_message is None

    def test_get_message(self) -> None:
        chat = make_chat(messages=3)
        message = chat.get_message("m2")
        assert message is not None
        assert message.text_content == "msg 2"
        assert chat.get_message("nope") is None

    def test_query_offset_then_limit(self) -> None:
        chat = make_chat(messages=5)
        assert [m.id for m in chat.query(QueryOptions(offset=1, limit=2))] == ["m1", "m2"]
        assert [m.id for m in chat.query(QueryOptions(limit=2))] == ["m0", "m1"]
        assert len(chat.query()) == 5

    def test_options(self) -> None:
        chat = Chat(make_engine(), "c1", ChatResources(), ChatSnapshot(), None, ChatOptions(auto_persist=False))
        assert chat.auto_persist is False


class TestChatLocalMutations:
    """Tests for mutations that do not reach the engine."""

    def test_assign_id_once(self) -> None:
        chat = make_chat(chat_id="")
        assert chat.assign_id("new") == "new"
        assert chat.id == "new"

        with pytest.raises(AipiError, match="Chat already initialized"):
            chat.assign_id("other")

    def test_add_and_remove_messages(self) -> None:
        engine = make_engine()
        chat = make_chat(engine, messages=1)
        chat.add_messages([make_message("added", "m9")])
        chat.remove_message("m0")

        assert [m.id for m in chat.get_messages()] == ["m9"]
        engine.on_change.assert_not_awaited()

    def test_update_snapshot_partial_mapping(self) -> None:
        chat = make_chat(messages=2)
        chat.update_snapshot({"tool_matches": [ToolMatch(tool="t")]})

        assert len(chat.get_messages()) == 2
        assert [t.tool for t in chat.get_snapshot().tool_matches] == ["t"]

    def test_update_snapshot_partial_model(self) -> None:
        chat = make_chat(messages=2)
        chat.update_snapshot(ChatSnapshot(tool_matches=[ToolMatch(tool="t")]))
        assert len(chat.get_messages()) == 2

    def test_update_snapshot_function_gets_copies(self) -> None:
        chat = make_chat(messages=1)
        before = chat.get_messages()

        def append(snapshot: ChatSnapshot) -> ChatSnapshot:
            snapshot.messages.append(make_message("new", "m5"))
            return snapshot

        chat.update_snapshot(append)

        assert len(before) == 1
        assert [m.id for m in chat.get_messages()] == ["m0", "m5"]

    def test_update_context(self) -> None:
        chat = make_chat()
        chat.update_context({"thread": "t2"})
        assert chat.context == {"thread": "t2"}


class TestChatEngineMutations:
    """Tests for engine backed mutations."""

    @pytest.mark.asyncio
    async def test_push_messages(self) -> None:
        engine = make_engine()
        chat = make_chat(engine)
        message = make_message("hello", "m1")

        await chat.push_messages([message])

        engine.add_messages.assert_awaited_once_with(chat, [message])
        engine.on_change.assert_awaited_once_with(chat)
        assert chat.get_messages() == [message]

    @pytest.mark.asyncio
    async def test_engine_failure_leaves_chat_untouched(self) -> None:
        engine = make_engine()
        engine.add_messages.side_effect = AipiError("provider down")
        chat = make_chat(engine)

        with pytest.raises(AipiError, match="provider down"):
            await chat.push_messages([make_message("hello")])

        assert chat.get_messages() == []
        engine.on_change.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_message(self) -> None:
        engine = make_engine()
        chat = make_chat(engine, messages=2)

        await chat.delete_message("m0")

        engine.delete_message.assert_awaited_once_with(chat, "m0")
        assert [m.id for m in chat.get_messages()] == ["m1"]
        engine.on_change.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_load_messages_full_load_replaces(self) -> None:
        engine = make_engine()
        loaded = [make_message("remote", "r1")]
        engine.load_messages.return_value = loaded
        chat = make_chat(engine, messages=2)

        assert await chat.load_messages() == loaded
        assert chat.get_messages() == loaded

    @pytest.mark.asyncio
    async def test_load_messages_with_query_keeps_snapshot(self) -> None:
        engine = make_engine()
        engine.load_messages.return_value = [make_message("remote", "r1")]
        chat = make_chat(engine, messages=2)
        query = QueryOptions(limit=1)

        await chat.load_messages(query)

        engine.load_messages.assert_awaited_once_with(chat, query)
        assert [m.id for m in chat.get_messages()] == ["m0", "m1"]

    @pytest.mark.asyncio
    async def test_refresh_swaps_snapshot(self) -> None:
        engine = make_engine()
        fresh = ChatSnapshot(messages=[make_message("fresh", "f1")])
        engine.refresh.return_value = fresh
        chat = make_chat(engine, messages=3)

        await chat.refresh()

        assert chat.get_snapshot() == fresh
        engine.on_change.assert_awaited_once_with(chat)

    @pytest.mark.asyncio
    async def test_update_merges_resources(self) -> None:
        engine = make_engine()
        resources = ChatResources(
            tools=[Tool(name="a"), Tool(name="b")],
            resources={"db": {"host": "h", "port": 1}, "keep": True},
        )
        chat = make_chat(engine, resources=resources)
        data = UpdateChatData(
            resources=ChatResourcesPatch(tools=[Tool(name="c")], resources={"db": {"port": 2}})
        )

        await chat.update(data)

        engine.update.assert_awaited_once_with(chat, data)
        assert [t.name for t in chat.tools] == ["c"]
        assert chat.resources == {"db": {"host": "h", "port": 2}, "keep": True}
        engine.on_change.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_without_tools_keeps_them(self) -> None:
        schema = {"type": "object", "properties": {"q": {"type": "string"}}}
        chat = make_chat(resources=ChatResources(tools=[Tool(name="search", schema=schema)]))

        await chat.update(UpdateChatData(resources=ChatResourcesPatch(resources={"k": 1})))

        assert chat.tools[0].schema_ == schema
        assert chat.resources == {"k": 1}

    @pytest.mark.asyncio
    async def test_run_appends_delta(self) -> None:
        engine = make_engine()
        reply = make_message("answer", "r1", role="assistant")
        engine.run.return_value = RunResponse(run_id="run-1", snapshot=ChatSnapshot(messages=[reply]))
        chat = make_chat(engine, messages=1)

        response = await chat.run()

        engine.run.assert_awaited_once_with(chat, RunInit(), None)
        assert response.run_id == "run-1"
        assert chat.last_run_id == "run-1"
        assert [m.id for m in chat.get_messages()] == ["m0", "r1"]
        engine.on_change.assert_awaited_once_with(chat)


class TestChatSerialize:
    """Tests for serialize."""

    def test_serialize_is_a_copy(self) -> None:
        chat = make_chat(messages=1, resources=ChatResources(resources={"k": [1]}))
        serialized = chat.serialize()

        serialized.snapshot.messages.append(make_message("extra"))
        serialized.resources.resources["k"].append(2)

        assert serialized.chat_id == "c1"
        assert len(chat.get_messages()) == 1
        assert chat.resources == {"k": [1]}

    def test_repr(self) -> None:
        assert repr(make_chat(messages=2)) == "<Chat id=c1 messages=2>"
