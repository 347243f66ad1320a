"""Conversion router — picks and executes the path for a request.

Three paths exist:

* image content is re-encoded locally and never reaches the text service;
* pdf/docx/xlsx targets go through the text service into markdown, then a
  local encoder;
* every other target is a direct text-service conversion.

The router is stateless and never touches the history ledger.
"""

from __future__ import annotations

import logging
from typing import Iterable

from cypher_converter.domain.errors import UnsupportedConversionError
from cypher_converter.domain.models.conversion import (
    BinaryOutcome,
    ConversionOutcome,
    ConversionRequest,
    TextOutcome,
    encode_data_uri,
)
from cypher_converter.domain.models.enums import ContentKind, FormatKind
from cypher_converter.domain.models.formats import (
    CATALOG,
    INTERMEDIATE_FORMAT,
    FormatCatalog,
)
from cypher_converter.domain.ports.document_encoder import DocumentEncoderPort
from cypher_converter.domain.ports.image_encoder import ImageEncoderPort
from cypher_converter.domain.ports.text_service import TextConversionPort

logger = logging.getLogger(__name__)


def intermediate_target(target_format: str, catalog: FormatCatalog = CATALOG) -> str:
    """Format requested from the text service for *target_format*."""
    if catalog.is_binary_document(target_format):
        return INTERMEDIATE_FORMAT
    return target_format


class ConversionRouter:
    """Route a :class:`ConversionRequest` to the right conversion path."""

    def __init__(
        self,
        text_service: TextConversionPort,
        document_encoders: Iterable[DocumentEncoderPort],
        image_encoder: ImageEncoderPort,
        catalog: FormatCatalog = CATALOG,
    ) -> None:
        self._text_service = text_service
        self._encoders = {encoder.target_format: encoder for encoder in document_encoders}
        self._image_encoder = image_encoder
        self._catalog = catalog

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        """Execute *request* and return its outcome.

        Raises:
            UnknownFormatError: Target is not in the catalog.
            ImageDecodeError: Image source bytes cannot be decoded.
            RemoteConversionError: The text service failed.
            DocumentEncodingError: A local document encoder failed.
            UnsupportedConversionError: No path exists for the request.
            ValueError: The source format was never resolved.
        """
        target = self._catalog.get(request.target_format)

        if request.content_kind == ContentKind.IMAGE:
            return self._convert_image(request)

        if request.needs_detection:
            raise ValueError("source format must be resolved before routing")

        intermediate = intermediate_target(target.id, self._catalog)
        logger.debug(
            "Routing %s -> %s via text service (intermediate %s)",
            request.source_format,
            target.id,
            intermediate,
        )
        text = self._text_service.convert(request.payload, request.source_format, intermediate)

        if not self._catalog.is_binary_document(target.id):
            return TextOutcome(text=text)

        encoder = self._encoders.get(target.id)
        if encoder is None:
            raise UnsupportedConversionError(f"No local encoder registered for {target.id!r}")
        data = encoder.encode(text)
        return BinaryOutcome(data_uri=encode_data_uri(data, encoder.mime_type))

    def _convert_image(self, request: ConversionRequest) -> BinaryOutcome:
        target = self._catalog.get(request.target_format)
        if target.kind != FormatKind.IMAGE:
            raise UnsupportedConversionError(
                f"Image sources can only be converted to image formats, not {target.id!r}"
            )
        logger.debug("Re-encoding image %s -> %s locally", request.source_format, target.id)
        data = self._image_encoder.reencode(request.payload, target.id)
        return BinaryOutcome(data_uri=encode_data_uri(data, target.mime_type))
