"""Storage backends for persisting agentkit state."""

from agentkit.adapters.stores import JsonFileStore, KeyValueStore, MemoryStore, SqliteStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SqliteStore",
]
