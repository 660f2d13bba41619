"""Chat state, chat lifecycle and tool call parsing."""

from .chat import Chat, ChatEngine, ChatOptions, stack_snapshots
from .chats import ChatPersister, Chats, ChatsConfig, merge_tools
from .completer import Completer
from .tool_matches import parse_tool_calls, parse_tool_match

__all__ = [
    "Chat",
    "ChatEngine",
    "ChatOptions",
    "ChatPersister",
    "Chats",
    "ChatsConfig",
    "Completer",
    "merge_tools",
    "parse_tool_calls",
    "parse_tool_match",
    "stack_snapshots",
]
