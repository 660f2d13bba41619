"""Persister contract and built-in implementations."""

from .fs_persister import FileSystemPersister
from .memory_persister import MemoryPersister
from .persister import Persistable, Persister, Reviver

__all__ = [
    "FileSystemPersister",
    "MemoryPersister",
    "Persistable",
    "Persister",
    "Reviver",
]
