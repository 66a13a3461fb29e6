"""Storage modules for note entries."""

from .base import Stater
from .sqlite_store import SQLiteStore
from .memory_store import MemoryStore

__all__ = ["Stater", "SQLiteStore", "MemoryStore"]
