"""Shared utilities: logging, JSON helpers, ids and merging."""

from .json_utils import canonical_json, json_compact, json_pretty, stable_hash, to_jsonable
from .logger import AipiLogger, logger, setup_logging
from .system import create_id, deep_merge

__all__ = [
    "AipiLogger",
    "canonical_json",
    "create_id",
    "deep_merge",
    "json_compact",
    "json_pretty",
    "logger",
    "setup_logging",
    "stable_hash",
    "to_jsonable",
]
