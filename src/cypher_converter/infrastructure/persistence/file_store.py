"""File-backed key-value store — one file per key.

Implements ``KeyValueStorePort``. Values are written atomically
(temp file, then rename) to the platform user-data directory via
``platformdirs``.
"""

from __future__ import annotations

import re
import tempfile
import threading
from pathlib import Path

import platformdirs

from cypher_converter.domain.ports.key_value_store import KeyValueStorePort

_APP_NAME = "cypher_converter"
_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStore(KeyValueStorePort):
    """Concrete implementation of :class:`KeyValueStorePort`.

    Parameters
    ----------
    data_dir : Path | None
        Override the default data directory (useful for testing).
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data_dir = Path(data_dir) if data_dir else Path(platformdirs.user_data_dir(_APP_NAME))
        self._lock = threading.Lock()

    # -- Public API ----------------------------------------------------------

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def put(self, key: str, value: bytes) -> None:
        """Persist *value* atomically (write to temp, then rename)."""
        path = self._path_for(key)
        with self._lock:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(dir=self._data_dir, suffix=".tmp")
            try:
                with open(tmp_fd, "wb") as fh:
                    fh.write(value)
                Path(tmp_path).replace(path)
            except Exception:
                Path(tmp_path).unlink(missing_ok=True)
                raise

    def delete(self, key: str) -> None:
        with self._lock:
            self._path_for(key).unlink(missing_ok=True)

    @property
    def data_dir(self) -> Path:
        """Directory holding one file per key."""
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self._data_dir / f"{key}.json"
