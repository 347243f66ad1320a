"""Settings manager — ``settings.json`` in the platform config directory.

The file is kept through a :class:`FileKeyValueStore` rooted at the config
directory, so it shares the store's atomic writes. An unreadable or invalid
file never stops the converter: defaults are used and a warning is logged.
"""

from __future__ import annotations

import logging
from pathlib import Path

import platformdirs
from pydantic import ValidationError

from cypher_converter.domain.models.settings import ConverterSettings
from cypher_converter.infrastructure.persistence.file_store import FileKeyValueStore

logger = logging.getLogger(__name__)

_APP_NAME = "cypher_converter"
_SETTINGS_KEY = "settings"


class SettingsManager:
    """Read, write and reset :class:`ConverterSettings`.

    Parameters
    ----------
    config_dir : Path | None
        Override the platform config directory.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        directory = Path(config_dir) if config_dir else Path(platformdirs.user_config_dir(_APP_NAME))
        self._files = FileKeyValueStore(directory)

    @property
    def settings_path(self) -> Path:
        return self._files.data_dir / f"{_SETTINGS_KEY}.json"

    def load(self) -> ConverterSettings:
        try:
            raw = self._files.get(_SETTINGS_KEY)
        except OSError as exc:
            logger.warning("Cannot read %s, using defaults: %s", self.settings_path, exc)
            return ConverterSettings()

        if raw is None:
            logger.debug("No settings file at %s, using defaults", self.settings_path)
            return ConverterSettings()
        try:
            return ConverterSettings.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Ignoring invalid settings in %s (%d errors), using defaults",
                self.settings_path,
                exc.error_count(),
            )
            return ConverterSettings()

    def save(self, settings: ConverterSettings) -> Path:
        """Write *settings* as indented JSON and return the file path."""
        self._files.put(_SETTINGS_KEY, settings.model_dump_json(indent=2).encode("utf-8"))
        logger.info("Settings saved to %s", self.settings_path)
        return self.settings_path

    def reset_to_defaults(self) -> ConverterSettings:
        """Overwrite the settings file with factory defaults and return them."""
        defaults = ConverterSettings()
        previous = self.load()
        self._files.put(_SETTINGS_KEY, defaults.model_dump_json(indent=2).encode("utf-8"))
        if previous == defaults:
            logger.info("Settings at %s already matched the defaults", self.settings_path)
        else:
            logger.info("Settings at %s reset to defaults", self.settings_path)
        return defaults
