"""State store backends for the ebook registry."""

from ebook_registry.storage.base import StateStore
from ebook_registry.storage.memory import MemoryStore
from ebook_registry.storage.sqlite import SqliteStore, create_schema, get_connection

__all__ = [
    "MemoryStore",
    "SqliteStore",
    "StateStore",
    "create_schema",
    "get_connection",
]
