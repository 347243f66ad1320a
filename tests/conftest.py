"""Shared fixtures — fake text service, in-memory stores and sample images."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from cypher_converter.application.history_ledger import HistoryLedger
from cypher_converter.application.router import ConversionRouter
from cypher_converter.application.use_cases.run_conversion import RunConversionUseCase
from cypher_converter.domain.errors import RemoteConversionError
from cypher_converter.domain.ports.text_service import TextConversionPort
from cypher_converter.infrastructure.encoders import (
    DocxEncoder,
    PdfEncoder,
    PillowImageEncoder,
    XlsxEncoder,
)
from cypher_converter.infrastructure.persistence import MemoryKeyValueStore


class FakeTextService(TextConversionPort):
    """Records calls; echoes content unless a reply is set for the target."""

    def __init__(
        self,
        replies: dict[str, str] | None = None,
        detected: str = "json",
        fail: bool = False,
        fail_detect: bool = False,
    ) -> None:
        self.replies = replies or {}
        self.detected = detected
        self.fail = fail
        self.fail_detect = fail_detect
        self.calls: list[tuple[str, str, str]] = []
        self.detect_calls: list[str] = []

    def convert(self, content: str, source_format: str, target_format: str) -> str:
        self.calls.append((content, source_format, target_format))
        if self.fail:
            raise RemoteConversionError("503 service unavailable")
        return self.replies.get(target_format, content)

    def detect(self, sample: str) -> str:
        self.detect_calls.append(sample)
        if self.fail_detect:
            raise RemoteConversionError("detection down")
        return self.detected


def make_png(size: tuple[int, int] = (4, 3), color=(255, 0, 0, 128)) -> bytes:
    """Small RGBA PNG for image-path tests."""
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def ledger(store: MemoryKeyValueStore) -> HistoryLedger:
    ledger = HistoryLedger(store)
    ledger.load()
    return ledger


@pytest.fixture()
def fake_service() -> FakeTextService:
    return FakeTextService()


@pytest.fixture()
def router(fake_service: FakeTextService) -> ConversionRouter:
    return ConversionRouter(
        text_service=fake_service,
        document_encoders=[PdfEncoder(), DocxEncoder(), XlsxEncoder()],
        image_encoder=PillowImageEncoder(),
    )


@pytest.fixture()
def use_case(router, ledger, fake_service):
    uc = RunConversionUseCase(router=router, ledger=ledger, detector=fake_service)
    yield uc
    uc.shutdown()


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png()
