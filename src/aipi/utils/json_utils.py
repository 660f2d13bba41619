"""Centralized JSON serialization utilities.

Pre-created partial functions for common JSON serialization patterns, plus
the canonical form used to content-address persister keys.
"""

from __future__ import annotations

import hashlib
import json

from collections.abc import Callable
from functools import partial
from typing import Any

from pydantic_core import to_jsonable_python

# Compact JSON serialization (no spaces) with fallback to str for non-serializable types.
# Example: json_compact({"key": "value"}) -> '{"key":"value"}'
json_compact: Callable[..., str] = partial(json.dumps, separators=(",", ":"), default=str)

# Pretty-printed JSON with 2-space indentation.
# Use for human-readable output files.
json_pretty: Callable[..., str] = partial(json.dumps, indent=2, default=str)


def to_jsonable(obj: Any) -> Any:
    """Convert pydantic models, dataclasses and containers into plain JSON data.

    Unknown objects fall back to ``str`` instead of raising.
    """
    return to_jsonable_python(obj, fallback=str)


def canonical_json(obj: Any) -> str:
    """Serialize to a canonical JSON string.

    Mapping keys are sorted and separators are compact so two structurally
    equal values always serialize to the same text.

    Example:
        >>> canonical_json({"b": 1, "a": [1, 2]})
        '{"a":[1,2],"b":1}'
    """
    return json_compact(to_jsonable(obj), sort_keys=True, ensure_ascii=False)


def stable_hash(obj: Any) -> str:
    """Content hash of a value, independent of object identity and key order."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


__all__ = [
    "canonical_json",
    "json_compact",
    "json_pretty",
    "stable_hash",
    "to_jsonable",
]
