"""Use Case: Manage History.

Listing, archival and bulk clearing of the conversion history.
"""

from __future__ import annotations

from pathlib import Path

from cypher_converter.application.history_ledger import HistoryLedger
from cypher_converter.domain.models.enums import ConversionStatus
from cypher_converter.domain.models.history import HistoryEntry

ARCHIVE_FILE_NAME = "cypher_history_archive.json"


class ManageHistoryUseCase:
    """Read and archive the history ledger."""

    def __init__(self, ledger: HistoryLedger) -> None:
        self._ledger = ledger

    def list_entries(
        self,
        status: ConversionStatus | None = None,
        limit: int | None = None,
    ) -> list[HistoryEntry]:
        """Most recent first, optionally filtered by *status*."""
        entries = self._ledger.entries
        if status is not None:
            entries = [entry for entry in entries if entry.status == status]
        return entries[:limit] if limit is not None else entries

    def get(self, entry_id: str) -> HistoryEntry:
        return self._ledger.get(entry_id)

    def export_to(self, destination: Path) -> Path:
        """Write the JSON archive; a directory gets ``cypher_history_archive.json``."""
        destination = Path(destination)
        if destination.is_dir():
            destination = destination / ARCHIVE_FILE_NAME
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(self._ledger.export(), encoding="utf-8")
        return destination

    def import_from(self, source: Path) -> list[HistoryEntry]:
        """Replace the history with an archive written by :meth:`export_to`."""
        return self._ledger.restore(Path(source).read_bytes())

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        removed = len(self._ledger)
        self._ledger.clear()
        return removed
