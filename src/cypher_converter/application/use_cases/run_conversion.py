"""Use Case: Run Conversion.

Owns one end-to-end attempt: a pending history entry is created first,
the source format is resolved when it was left on ``auto``, the router
executes the request, the outcome is normalized, and the entry is moved to
``completed`` or ``failed`` before the call returns.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable

from cypher_converter.application.error_messages import user_message_for
from cypher_converter.application.history_ledger import HistoryLedger
from cypher_converter.application.normalizer import DEFAULT_FILE_PREFIX, normalize
from cypher_converter.application.router import ConversionRouter
from cypher_converter.domain.errors import ConversionFailedError
from cypher_converter.domain.models.conversion import ConversionRequest, ConversionResult
from cypher_converter.domain.models.enums import ConversionStatus
from cypher_converter.domain.models.formats import CATALOG, FALLBACK_TEXT_FORMAT, FormatCatalog
from cypher_converter.domain.models.history import DETECTED_SOURCE
from cypher_converter.domain.ports.text_service import TextConversionPort

logger = logging.getLogger(__name__)


class RunConversionUseCase:
    """Orchestrate conversion attempts and their history bookkeeping.

    Every call to :meth:`execute` creates exactly one history entry and leaves
    it in a terminal status.
    """

    def __init__(
        self,
        router: ConversionRouter,
        ledger: HistoryLedger,
        detector: TextConversionPort,
        *,
        catalog: FormatCatalog = CATALOG,
        detection_sample_chars: int = 500,
        file_prefix: str = DEFAULT_FILE_PREFIX,
        max_workers: int = 4,
    ) -> None:
        self._router = router
        self._ledger = ledger
        self._detector = detector
        self._catalog = catalog
        self._sample_chars = detection_sample_chars
        self._file_prefix = file_prefix
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None

    # -- Single attempt ------------------------------------------------------

    def execute(self, request: ConversionRequest) -> ConversionResult:
        """Run *request* to completion.

        Returns:
            The normalized result together with its history entry id.

        Raises:
            ConversionFailedError: The attempt failed; the entry is recorded
                as ``failed`` and the original error is chained.
        """
        entry = self._ledger.begin(
            source_format=DETECTED_SOURCE if request.needs_detection else request.source_format,
            target_format=request.target_format,
            file_name=request.file_name,
        )

        try:
            resolved = self._resolve_source(request)
            outcome = self._router.convert(resolved)
            result = normalize(
                outcome,
                resolved.target_format,
                entry.timestamp,
                prefix=self._file_prefix,
                catalog=self._catalog,
            )
            self._ledger.update(
                entry.id,
                ConversionStatus.COMPLETED,
                result=result.content,
                is_binary=result.is_binary,
            )
        except Exception as exc:
            logger.warning("Conversion %s failed: %s", entry.id, exc)
            self._record_failure(entry.id)
            raise ConversionFailedError(user_message_for(exc), entry_id=entry.id) from exc

        return ConversionResult(
            entry_id=entry.id,
            source_format=resolved.source_format,
            target_format=resolved.target_format,
            result=result,
        )

    def _record_failure(self, entry_id: str) -> None:
        """Mark *entry_id* failed; a ledger error here must not hide the original one."""
        try:
            self._ledger.update(entry_id, ConversionStatus.FAILED)
        except Exception as exc:
            logger.error("Could not record failure of entry %s: %s", entry_id, exc)

    def detect(self, content: str) -> str:
        """Resolve a source format for *content*; never raises."""
        try:
            reply = self._detector.detect(content[: self._sample_chars])
        except Exception as exc:
            logger.warning("Format detection failed, assuming %s: %s", FALLBACK_TEXT_FORMAT, exc)
            return FALLBACK_TEXT_FORMAT

        resolved = self._catalog.resolve(reply)
        if resolved is None:
            logger.warning(
                "Detected format %r is not supported, assuming %s", reply, FALLBACK_TEXT_FORMAT
            )
            return FALLBACK_TEXT_FORMAT
        return resolved

    def _resolve_source(self, request: ConversionRequest) -> ConversionRequest:
        if not request.needs_detection or not isinstance(request.payload, str):
            return request
        return request.with_source(self.detect(request.payload))

    # -- Concurrent attempts -------------------------------------------------

    def submit(self, request: ConversionRequest) -> Future:
        """Start *request* on the worker pool and return its future.

        Dropping the future does not cancel an attempt that already started.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="cypher-convert"
            )
        return self._executor.submit(self.execute, request)

    def run_many(
        self, requests: Iterable[ConversionRequest]
    ) -> list[ConversionResult | ConversionFailedError]:
        """Run *requests* concurrently; results and failures keep request order."""
        futures = [self.submit(request) for request in requests]
        outcomes: list[ConversionResult | ConversionFailedError] = []
        for future in futures:
            try:
                outcomes.append(future.result())
            except ConversionFailedError as exc:
                outcomes.append(exc)
        return outcomes

    def shutdown(self) -> None:
        """Wait for in-flight attempts and release the worker pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
