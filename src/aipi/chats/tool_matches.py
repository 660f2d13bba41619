"""Tool call parsing.

Turns the tool calls a model response requests into :class:`ToolMatch`
objects. Malformed argument payloads never raise here: the match carries
the parse error and the raw payload instead, and the caller decides.
"""

from __future__ import annotations

import json

from collections.abc import Iterable, Mapping
from typing import Any

from aipi.models.chat_models import ToolMatch
from aipi.utils.logger import logger


def parse_tool_match(tool: str, arguments: Any, index: int | None = None, ref: str | None = None) -> ToolMatch:
    """Parse one tool call.

    Args:
        tool: Name of the called tool
        arguments: JSON string, already decoded mapping, or None/empty for no params
        index: Position of the call in the response
        ref: Provider reference of the call (e.g. a tool call id)

    Returns:
        ToolMatch with ``params`` set, or with ``parse_error`` and
        ``raw_params`` set when the payload is not valid JSON
    """
    if arguments is None or arguments in ("", b""):
        return ToolMatch(tool=tool, params={}, index=index, ref=ref)

    if not isinstance(arguments, (str, bytes, bytearray)):
        params = dict(arguments) if isinstance(arguments, Mapping) else arguments
        return ToolMatch(tool=tool, params=params, index=index, ref=ref)

    try:
        params = json.loads(arguments)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Could not parse arguments of tool call '{tool}'", tool=tool, ref=ref, error=str(e))
        return ToolMatch(tool=tool, params=None, raw_params=arguments, parse_error=e, index=index, ref=ref)

    return ToolMatch(tool=tool, params=params, index=index, ref=ref)


def parse_tool_calls(calls: Iterable[Mapping[str, Any]]) -> list[ToolMatch]:
    """Parse function-style tool calls.

    Accepts ``{"id", "function": {"name", "arguments"}}`` entries as well as
    flat ``{"id", "name", "arguments"}`` entries. Entries without a name are skipped.
    """
    matches: list[ToolMatch] = []
    for index, call in enumerate(calls):
        function = call.get("function")
        source = function if isinstance(function, Mapping) else call
        name = source.get("name")
        if not name:
            logger.warning("Skipping tool call without a name", index=index)
            continue
        matches.append(parse_tool_match(name, source.get("arguments"), index=index, ref=call.get("id")))
    return matches


__all__ = ["parse_tool_calls", "parse_tool_match"]
