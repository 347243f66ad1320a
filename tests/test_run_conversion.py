"""Tests for the Run Conversion use case — orchestration and history bookkeeping."""

from __future__ import annotations

import pytest

from cypher_converter.application.error_messages import (
    ANOMALY_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    IMAGE_LOAD_MESSAGE,
    user_message_for,
)
from cypher_converter.application.history_ledger import HistoryLedger
from cypher_converter.application.use_cases.run_conversion import RunConversionUseCase
from cypher_converter.domain.errors import (
    ConfigurationError,
    ConversionFailedError,
    RemoteConversionError,
)
from cypher_converter.domain.models.conversion import ConversionRequest, ConversionResult
from cypher_converter.domain.models.enums import ContentKind, ConversionStatus
from cypher_converter.infrastructure.persistence import MemoryKeyValueStore


def _request(source="csv", target="pdf", payload="a,b\n1,2", name="data.csv"):
    return ConversionRequest(
        source_format=source, target_format=target, payload=payload, file_name=name
    )


class TestExecute:
    def test_csv_to_pdf(self, use_case, ledger):
        result = use_case.execute(_request())

        entry = ledger.get(result.entry_id)
        assert result.is_binary
        assert result.content.startswith("data:application/pdf;base64,")
        assert result.result.suggested_file_name == f"cypher-converted-{entry.timestamp}.pdf"
        assert entry.status == ConversionStatus.COMPLETED
        assert entry.result == result.content
        assert entry.is_binary is True
        assert entry.file_name == "data.csv"
        assert entry.source_format == "csv"

    def test_text_result(self, use_case, fake_service, ledger):
        fake_service.replies["yaml"] = "a: 1"
        result = use_case.execute(_request("json", "yaml", '{"a": 1}', "a.json"))
        assert result.content == "a: 1"
        assert not result.is_binary
        assert ledger.get(result.entry_id).is_binary is False

    def test_service_failure_is_recorded(self, use_case, fake_service, ledger):
        fake_service.fail = True
        with pytest.raises(ConversionFailedError) as exc_info:
            use_case.execute(_request("json", "yaml", "{}"))

        err = exc_info.value
        assert str(err) == ANOMALY_MESSAGE
        assert isinstance(err.__cause__, RemoteConversionError)
        entry = ledger.get(err.entry_id)
        assert entry.status == ConversionStatus.FAILED
        assert entry.result is None

    def test_unknown_target_is_recorded(self, use_case, ledger):
        with pytest.raises(ConversionFailedError) as exc_info:
            use_case.execute(_request("json", "cobol", "{}"))
        assert str(exc_info.value) == "Unknown target format."
        assert ledger.get(exc_info.value.entry_id).status == ConversionStatus.FAILED

    def test_bad_image(self, use_case, fake_service):
        request = ConversionRequest(
            source_format="png",
            target_format="jpeg",
            payload=b"garbage",
            content_kind=ContentKind.IMAGE,
        )
        with pytest.raises(ConversionFailedError, match=IMAGE_LOAD_MESSAGE):
            use_case.execute(request)
        assert fake_service.calls == []

    def test_one_terminal_entry_per_call(self, use_case, fake_service, ledger):
        use_case.execute(_request("json", "yaml", "{}"))
        fake_service.fail = True
        with pytest.raises(ConversionFailedError):
            use_case.execute(_request("json", "yaml", "{}"))

        entries = ledger.entries
        assert len(entries) == 2
        assert all(e.status.is_terminal for e in entries)

    def test_entry_pending_while_converting(self, use_case, fake_service, ledger):
        seen = []

        def convert(content, source, target):
            seen.append(ledger.entries[0].status)
            return "ok"

        fake_service.convert = convert
        use_case.execute(_request("json", "yaml", "{}"))
        assert seen == [ConversionStatus.PENDING]
        assert ledger.entries[0].status == ConversionStatus.COMPLETED


class _CompletedWriteFails(MemoryKeyValueStore):
    """Store that refuses any snapshot recording a completed entry."""

    def put(self, key: str, value: bytes) -> None:
        if b'"completed"' in value:
            raise OSError("disk full")
        super().put(key, value)


class _AllWritesFailAfterBegin(MemoryKeyValueStore):
    """Store that accepts the first write only."""

    def put(self, key: str, value: bytes) -> None:
        if self.get(key) is not None:
            raise OSError("read-only filesystem")
        super().put(key, value)


class TestLedgerWriteFailures:
    def _use_case(self, router, store, fake_service):
        ledger = HistoryLedger(store)
        return RunConversionUseCase(router=router, ledger=ledger, detector=fake_service), ledger

    def test_completed_write_failure_records_failed(self, router, fake_service):
        use_case, ledger = self._use_case(router, _CompletedWriteFails(), fake_service)

        with pytest.raises(ConversionFailedError) as exc_info:
            use_case.execute(_request("json", "yaml", "{}"))

        assert str(exc_info.value) == GENERIC_FAILURE_MESSAGE
        assert isinstance(exc_info.value.__cause__, OSError)
        assert [e.status for e in ledger.entries] == [ConversionStatus.FAILED]

    def test_failed_write_failure_keeps_user_message(self, router, fake_service):
        fake_service.fail = True
        use_case, _ledger = self._use_case(router, _AllWritesFailAfterBegin(), fake_service)

        with pytest.raises(ConversionFailedError) as exc_info:
            use_case.execute(_request("json", "yaml", "{}"))

        assert str(exc_info.value) == ANOMALY_MESSAGE
        assert isinstance(exc_info.value.__cause__, RemoteConversionError)


class TestDetection:
    def test_auto_source_is_detected(self, use_case, fake_service, ledger):
        fake_service.detected = "JSON"
        result = use_case.execute(_request("auto", "yaml", '{"a": 1}'))

        assert result.source_format == "json"
        assert fake_service.calls[0][1] == "json"
        assert ledger.get(result.entry_id).source_format == "Detected"

    def test_sample_is_truncated(self, use_case, fake_service):
        use_case.execute(_request("auto", "yaml", "x" * 2000))
        assert len(fake_service.detect_calls[0]) == 500

    def test_failure_falls_back_to_txt(self, use_case, fake_service):
        fake_service.fail_detect = True
        assert use_case.detect("???") == "txt"

    def test_unknown_reply_falls_back_to_txt(self, use_case, fake_service):
        fake_service.detected = "cobol"
        assert use_case.detect("IDENTIFICATION DIVISION.") == "txt"

    def test_aliases_are_resolved(self, use_case, fake_service):
        fake_service.detected = "yml"
        assert use_case.detect("a: 1") == "yaml"

    def test_explicit_source_skips_detection(self, use_case, fake_service):
        use_case.execute(_request("csv", "json"))
        assert fake_service.detect_calls == []


class TestConcurrency:
    def test_submit_returns_future(self, use_case):
        future = use_case.submit(_request("json", "yaml", "{}"))
        assert isinstance(future.result(timeout=10), ConversionResult)

    def test_run_many_keeps_order(self, use_case, ledger):
        bad_image = ConversionRequest(
            source_format="png",
            target_format="png",
            payload=b"nope",
            content_kind=ContentKind.IMAGE,
        )
        outcomes = use_case.run_many(
            [_request("json", "yaml", "{}"), bad_image, _request("csv", "xlsx")]
        )

        assert isinstance(outcomes[0], ConversionResult)
        assert isinstance(outcomes[1], ConversionFailedError)
        assert outcomes[2].target_format == "xlsx"
        assert len(ledger) == 3
        assert all(e.status.is_terminal for e in ledger.entries)


class TestUserMessages:
    def test_known_errors(self):
        assert user_message_for(RemoteConversionError("x")) == ANOMALY_MESSAGE
        assert "GEMINI_API_KEY" in user_message_for(ConfigurationError("x"))

    def test_unexpected_errors_get_generic_message(self):
        assert user_message_for(RuntimeError("stack trace")) == GENERIC_FAILURE_MESSAGE
