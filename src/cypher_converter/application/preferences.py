"""Preferences — the persisted theme flag."""

from __future__ import annotations

import logging
import threading

from cypher_converter.domain.models.enums import Theme
from cypher_converter.domain.ports.key_value_store import KeyValueStorePort

logger = logging.getLogger(__name__)

THEME_KEY = "cypher-theme"
DEFAULT_THEME = Theme.DARK


class Preferences:
    """Owner of the theme preference; writes through on every change."""

    def __init__(self, store: KeyValueStorePort, key: str = THEME_KEY) -> None:
        self._store = store
        self._key = key
        self._theme = DEFAULT_THEME
        self._lock = threading.Lock()

    def load(self) -> Theme:
        """Read the stored theme; missing or unknown values mean the default."""
        raw = self._store.get(self._key)
        with self._lock:
            self._theme = DEFAULT_THEME
            if raw is not None:
                value = raw.decode("utf-8", errors="replace").strip()
                try:
                    self._theme = Theme(value)
                except ValueError:
                    logger.warning("Unknown stored theme %r, using %s", value, DEFAULT_THEME.value)
            return self._theme

    @property
    def theme(self) -> Theme:
        return self._theme

    def set_theme(self, theme: Theme | str) -> Theme:
        theme = Theme(theme)
        with self._lock:
            self._store.put(self._key, theme.value.encode("utf-8"))
            self._theme = theme
        return theme

    def toggle(self) -> Theme:
        """Switch between dark and light."""
        with self._lock:
            current = self._theme
        return self.set_theme(Theme.LIGHT if current == Theme.DARK else Theme.DARK)
