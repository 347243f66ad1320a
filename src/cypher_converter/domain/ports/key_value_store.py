"""Port: Key-value byte store used for history and preferences."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStorePort(ABC):
    """Abstract interface for a small persistent key-value store."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the stored bytes for *key*, or ``None`` if absent."""

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Persist *value* under *key*, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*. Missing keys are ignored."""
