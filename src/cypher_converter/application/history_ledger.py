"""History ledger — persisted, most-recent-first log of conversion attempts.

Each entry starts ``pending`` and moves exactly once to ``completed`` or
``failed``. Entries are never deleted individually; ``clear`` empties the
whole ledger.

Persistence is write-through: every mutation serializes the full sequence
to the key-value store before the in-memory state changes, under a lock
that serializes concurrent read-modify-write cycles.
"""

from __future__ import annotations

import json
import logging
import threading

from pydantic import TypeAdapter, ValidationError

from cypher_converter.domain.errors import EntryNotFoundError, InvalidTransitionError
from cypher_converter.domain.models.enums import ConversionStatus
from cypher_converter.domain.models.history import (
    UNKNOWN_FILE_NAME,
    HistoryEntry,
    new_entry_id,
)
from cypher_converter.domain.ports.key_value_store import KeyValueStorePort

logger = logging.getLogger(__name__)

HISTORY_KEY = "cypher-history"

_ENTRIES_ADAPTER = TypeAdapter(list[HistoryEntry])


def _parse_snapshot(raw: str | bytes) -> list[HistoryEntry]:
    return _ENTRIES_ADAPTER.validate_json(raw)


def _check_result_fields(entry: HistoryEntry) -> None:
    """Only completed entries carry a result, and they always do."""
    if entry.status == ConversionStatus.COMPLETED:
        if entry.result is None:
            raise ValueError(f"Completed entry {entry.id!r} has no result")
    elif entry.result is not None or entry.is_binary is not None:
        raise ValueError(f"{entry.status.value.capitalize()} entry {entry.id!r} carries a result")


def _dump_snapshot(entries: list[HistoryEntry], indent: int | None = None) -> str:
    data = [entry.to_json_dict() for entry in entries]
    return json.dumps(data, indent=indent, ensure_ascii=False)


class HistoryLedger:
    """Owner of the persisted history sequence.

    Call :meth:`load` once at startup; every other operation keeps the store
    in sync with memory.
    """

    def __init__(self, store: KeyValueStorePort, key: str = HISTORY_KEY) -> None:
        self._store = store
        self._key = key
        self._entries: list[HistoryEntry] = []
        self._lock = threading.RLock()

    # -- Lifecycle -----------------------------------------------------------

    def load(self) -> list[HistoryEntry]:
        """Read the persisted sequence; unreadable data starts an empty ledger."""
        with self._lock:
            raw = self._store.get(self._key)
            if raw is None:
                self._entries = []
            else:
                try:
                    self._entries = _parse_snapshot(raw)
                except ValidationError as exc:
                    logger.warning("Discarding unreadable history (%s): %s", self._key, exc)
                    self._entries = []
            return list(self._entries)

    # -- Queries -------------------------------------------------------------

    @property
    def entries(self) -> list[HistoryEntry]:
        """Snapshot of the sequence, most recent first."""
        with self._lock:
            return list(self._entries)

    def get(self, entry_id: str) -> HistoryEntry:
        """Return the entry addressed by *entry_id* (raises ``EntryNotFoundError``)."""
        with self._lock:
            return self._entries[self._index_of(entry_id)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # -- Mutations -----------------------------------------------------------

    def append(self, entry: HistoryEntry) -> HistoryEntry:
        """Insert *entry* at the head of the sequence.

        Raises:
            InvalidTransitionError: *entry* is not pending.
            ValueError: an entry with the same id already exists.
        """
        if entry.status != ConversionStatus.PENDING:
            raise InvalidTransitionError(
                f"New entries must be pending, got {entry.status.value!r}"
            )
        with self._lock:
            if any(existing.id == entry.id for existing in self._entries):
                raise ValueError(f"Duplicate history entry id {entry.id!r}")
            self._commit([entry, *self._entries])
        logger.info(
            "History entry %s created (%s -> %s)",
            entry.id,
            entry.source_format,
            entry.target_format,
        )
        return entry

    def begin(
        self,
        source_format: str,
        target_format: str,
        file_name: str | None = None,
    ) -> HistoryEntry:
        """Create and append a fresh pending entry for a new attempt."""
        with self._lock:
            entry_id = new_entry_id()
            while any(existing.id == entry_id for existing in self._entries):
                entry_id = new_entry_id()
            entry = HistoryEntry(
                id=entry_id,
                file_name=file_name or UNKNOWN_FILE_NAME,
                source_format=source_format,
                target_format=target_format,
            )
            return self.append(entry)

    def update(
        self,
        entry_id: str,
        status: ConversionStatus,
        result: str | None = None,
        is_binary: bool | None = None,
    ) -> HistoryEntry:
        """Move a pending entry to its terminal *status*.

        ``completed`` requires ``result``; ``is_binary`` defaults to
        ``False``. ``failed`` accepts neither.

        Raises:
            EntryNotFoundError: *entry_id* is not in the ledger.
            InvalidTransitionError: the entry is not pending, or *status*
                is not terminal.
            ValueError: the result fields do not match *status*.
        """
        status = ConversionStatus(status)
        with self._lock:
            index = self._index_of(entry_id)
            current = self._entries[index]

            if current.status != ConversionStatus.PENDING:
                raise InvalidTransitionError(
                    f"Entry {entry_id!r} is already {current.status.value}"
                )
            if not status.is_terminal:
                raise InvalidTransitionError(f"Entry {entry_id!r} can only leave pending")

            if status == ConversionStatus.COMPLETED:
                if result is None:
                    raise ValueError("Completed entries need a result")
                changes = {"status": status, "result": result, "is_binary": bool(is_binary)}
            else:
                if result is not None or is_binary is not None:
                    raise ValueError("Failed entries carry no result")
                changes = {"status": status}

            updated = current.model_copy(update=changes)
            entries = list(self._entries)
            entries[index] = updated
            self._commit(entries)

        logger.info("History entry %s -> %s", entry_id, status.value)
        return updated

    def clear(self) -> None:
        """Empty the ledger and drop the persisted sequence. Irreversible."""
        with self._lock:
            self._store.delete(self._key)
            self._entries = []
        logger.info("History cleared")

    # -- Archival ------------------------------------------------------------

    def export(self) -> str:
        """Serialize the full ordered sequence as indented JSON."""
        with self._lock:
            return _dump_snapshot(self._entries, indent=2)

    def restore(self, snapshot: str | bytes) -> list[HistoryEntry]:
        """Replace the sequence with an exported *snapshot* and persist it.

        Raises:
            pydantic.ValidationError: *snapshot* is not a valid export.
            ValueError: ids repeat, or an entry's result does not match
                its status.
        """
        entries = _parse_snapshot(snapshot)
        ids = [entry.id for entry in entries]
        if len(set(ids)) != len(ids):
            raise ValueError("Snapshot contains duplicate entry ids")
        for entry in entries:
            _check_result_fields(entry)
        with self._lock:
            self._commit(entries)
            return list(self._entries)

    # -- Internals -----------------------------------------------------------

    def _index_of(self, entry_id: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        raise EntryNotFoundError(entry_id)

    def _commit(self, entries: list[HistoryEntry]) -> None:
        """Persist *entries*, then make them the in-memory state."""
        self._store.put(self._key, _dump_snapshot(entries).encode("utf-8"))
        self._entries = entries
