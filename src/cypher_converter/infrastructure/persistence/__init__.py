"""Persistence adapters — key-value stores for history and preferences."""

from cypher_converter.infrastructure.persistence.file_store import FileKeyValueStore
from cypher_converter.infrastructure.persistence.memory_store import MemoryKeyValueStore

__all__ = ["FileKeyValueStore", "MemoryKeyValueStore"]
