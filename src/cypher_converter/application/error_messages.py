"""User-facing messages for failed conversion attempts.

Belongs to the Application layer — maps internal exceptions to the fixed
messages shown to users, so raw service errors never leak into the UI.
"""

from __future__ import annotations

from cypher_converter.domain.errors import (
    ConfigurationError,
    DocumentEncodingError,
    ImageDecodeError,
    RemoteConversionError,
    SourceReadError,
    UnknownFormatError,
    UnsupportedConversionError,
)

ANOMALY_MESSAGE = "The Cypher Engine encountered an anomaly during transformation."
IMAGE_LOAD_MESSAGE = "Failed to load image."
GENERIC_FAILURE_MESSAGE = "Transformation failed."

# Checked in order; the first matching class wins
_MESSAGES: tuple[tuple[type[BaseException], str], ...] = (
    (RemoteConversionError, ANOMALY_MESSAGE),
    (ConfigurationError, "The conversion engine is not configured. Set GEMINI_API_KEY."),
    (ImageDecodeError, IMAGE_LOAD_MESSAGE),
    (DocumentEncodingError, "The converted content could not be encoded as a document."),
    (UnsupportedConversionError, "This conversion is not supported."),
    (UnknownFormatError, "Unknown target format."),
    (SourceReadError, "The source file could not be read."),
)


def user_message_for(exc: BaseException) -> str:
    """Return the fixed user-facing message for *exc*."""
    for error_type, message in _MESSAGES:
        if isinstance(exc, error_type):
            return message
    return GENERIC_FAILURE_MESSAGE
