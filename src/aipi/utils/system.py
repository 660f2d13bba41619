"""Small helpers shared across aipi."""

from __future__ import annotations

import secrets

from collections.abc import Mapping
from typing import Any

from aipi.core.constants import ID_ALPHABET, get_settings


def create_id(length: int | None = None) -> str:
    """Generate a random alphanumeric id.

    Args:
        length: Id length (defaults to ``Settings.id_length``)
    """
    if length is None:
        length = get_settings().id_length
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def deep_merge(base: Any, patch: Any) -> Any:
    """Merge ``patch`` into ``base`` and return a new value. ``patch`` wins.

    Mappings merge recursively. Lists and scalars in ``patch`` replace the
    value in ``base`` wholesale. Keys whose patch value is ``None`` are skipped.
    Neither argument is mutated.
    """
    if not isinstance(patch, Mapping):
        return base if patch is None else patch

    result: dict[str, Any] = dict(base) if isinstance(base, Mapping) else {}
    for key, value in patch.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            result[key] = deep_merge(result.get(key), value)
        else:
            result[key] = value
    return result


__all__ = ["create_id", "deep_merge"]
