"""Domain errors — custom exceptions for Cypher Converter.

These exceptions are raised by domain services and caught by application
or presentation layers. They carry no infrastructure dependencies.
"""


class CypherError(Exception):
    """Base exception for all Cypher Converter errors."""


class UnknownFormatError(CypherError, LookupError):
    """Raised when a format id is not part of the catalog."""

    def __init__(self, format_id: str) -> None:
        super().__init__(f"Unknown format: {format_id!r}")
        self.format_id = format_id


class ImageDecodeError(CypherError):
    """Raised when source image bytes cannot be decoded."""


class RemoteConversionError(CypherError):
    """Raised when the text service is unreachable or returns no usable text."""


class DocumentEncodingError(CypherError):
    """Raised when a local binary document encoder fails."""


class SourceReadError(CypherError):
    """Raised when an input file cannot be read into a conversion request."""


class UnsupportedConversionError(CypherError):
    """Raised when no conversion path exists for a request."""


class EntryNotFoundError(CypherError, KeyError):
    """Raised when a history entry id is not in the ledger."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"No history entry with id {entry_id!r}")
        self.entry_id = entry_id

    def __str__(self) -> str:
        return self.args[0]


class InvalidTransitionError(CypherError):
    """Raised when a history entry status change is not allowed."""


class ConfigurationError(CypherError):
    """Raised when configuration is invalid or missing."""


class ConversionFailedError(CypherError):
    """User-facing failure of a conversion attempt.

    ``entry_id`` addresses the ledger entry that recorded the failure.
    """

    def __init__(self, message: str, entry_id: str | None = None) -> None:
        super().__init__(message)
        self.entry_id = entry_id
