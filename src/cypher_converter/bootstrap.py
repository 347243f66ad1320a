"""Composition Root — Dependency Injection Container.

This module is the ONLY place where concrete infrastructure classes are
imported and wired together.  All other layers refer to ports (interfaces).
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

from cypher_converter.application.history_ledger import HistoryLedger
from cypher_converter.application.preferences import Preferences
from cypher_converter.application.router import ConversionRouter
from cypher_converter.application.use_cases.manage_history import ManageHistoryUseCase
from cypher_converter.application.use_cases.run_conversion import RunConversionUseCase
from cypher_converter.domain.models.settings import ConverterSettings
from cypher_converter.domain.ports.key_value_store import KeyValueStorePort
from cypher_converter.domain.ports.text_service import TextConversionPort
from cypher_converter.infrastructure.ai.gemini_client import GeminiClient
from cypher_converter.infrastructure.ai.text_service import GeminiTextService
from cypher_converter.infrastructure.config.settings_manager import SettingsManager
from cypher_converter.infrastructure.encoders.docx_encoder import DocxEncoder
from cypher_converter.infrastructure.encoders.image_encoder import PillowImageEncoder
from cypher_converter.infrastructure.encoders.pdf_encoder import PdfEncoder
from cypher_converter.infrastructure.encoders.xlsx_encoder import XlsxEncoder
from cypher_converter.infrastructure.persistence.file_store import FileKeyValueStore


class _DeferredTextService(TextConversionPort):
    """Builds the real text service on first use."""

    def __init__(self, factory: Callable[[], TextConversionPort]) -> None:
        self._factory = factory

    def convert(self, content: str, source_format: str, target_format: str) -> str:
        return self._factory().convert(content, source_format, target_format)

    def detect(self, sample: str) -> str:
        return self._factory().detect(sample)


class Container:
    """Simple dependency injection container.

    Wires all infrastructure implementations to domain ports
    and provides pre-configured use cases. The Gemini client is created on
    first use, so history and preference commands work without an API key.

    Usage::

        container = Container()
        result = container.run_conversion().execute(request)
    """

    def __init__(
        self,
        settings: ConverterSettings | None = None,
        *,
        store: KeyValueStorePort | None = None,
        text_service: TextConversionPort | None = None,
        config_dir: Path | None = None,
        data_dir: Path | None = None,
    ) -> None:
        # -- Infrastructure singletons ---------------------------------------
        self._settings_manager = SettingsManager(config_dir)
        self._settings = settings or self._settings_manager.load()

        self._store = store or FileKeyValueStore(data_dir or self._settings.storage.data_dir)
        self._text_service = text_service
        self._text_service_lock = threading.Lock()

        output = self._settings.output
        self._document_encoders = [
            PdfEncoder(font_size=output.font_size),
            DocxEncoder(font_size=output.font_size),
            XlsxEncoder(sheet_title=output.sheet_title),
        ]
        self._image_encoder = PillowImageEncoder()

        # -- Persisted state, loaded once at startup -------------------------
        self._ledger = HistoryLedger(self._store)
        self._ledger.load()
        self._preferences = Preferences(self._store)
        self._preferences.load()

        self._run_conversion: RunConversionUseCase | None = None

    # -- Accessors -----------------------------------------------------------

    @property
    def settings(self) -> ConverterSettings:
        return self._settings

    @property
    def settings_manager(self) -> SettingsManager:
        return self._settings_manager

    @property
    def store(self) -> KeyValueStorePort:
        return self._store

    @property
    def ledger(self) -> HistoryLedger:
        return self._ledger

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    @property
    def text_service(self) -> TextConversionPort:
        """The remote text service (raises ``ConfigurationError`` without a key)."""
        with self._text_service_lock:
            if self._text_service is None:
                engine = self._settings.engine
                client = GeminiClient(model=engine.model, max_retries=engine.max_retries)
                self._text_service = GeminiTextService(
                    client,
                    conversion_temperature=engine.conversion_temperature,
                    detection_temperature=engine.detection_temperature,
                )
            return self._text_service

    # -- Use Case factories --------------------------------------------------

    def router(self) -> ConversionRouter:
        """Router whose text service is only built when a text path runs."""
        return ConversionRouter(
            text_service=_DeferredTextService(lambda: self.text_service),
            document_encoders=self._document_encoders,
            image_encoder=self._image_encoder,
        )

    def run_conversion(self) -> RunConversionUseCase:
        """Create (once) the use case that orchestrates conversions."""
        if self._run_conversion is None:
            self._run_conversion = RunConversionUseCase(
                router=self.router(),
                ledger=self._ledger,
                detector=_DeferredTextService(lambda: self.text_service),
                detection_sample_chars=self._settings.engine.detection_sample_chars,
                file_prefix=self._settings.output.file_prefix,
                max_workers=self._settings.output.max_workers,
            )
        return self._run_conversion

    def manage_history(self) -> ManageHistoryUseCase:
        return ManageHistoryUseCase(ledger=self._ledger)
