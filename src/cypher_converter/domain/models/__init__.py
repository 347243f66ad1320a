"""Domain models — public API."""

from cypher_converter.domain.models.conversion import (
    BinaryOutcome,
    ConversionOutcome,
    ConversionRequest,
    ConversionResult,
    NormalizedResult,
    TextOutcome,
)
from cypher_converter.domain.models.enums import (
    ContentKind,
    ConversionStatus,
    FormatKind,
    Theme,
)
from cypher_converter.domain.models.formats import (
    AUTO,
    CATALOG,
    FormatCatalog,
    FormatDescriptor,
)
from cypher_converter.domain.models.history import HistoryEntry

__all__ = [
    # Conversion
    "BinaryOutcome",
    "ConversionOutcome",
    "ConversionRequest",
    "ConversionResult",
    "NormalizedResult",
    "TextOutcome",
    # Enums
    "ContentKind",
    "ConversionStatus",
    "FormatKind",
    "Theme",
    # Formats
    "AUTO",
    "CATALOG",
    "FormatCatalog",
    "FormatDescriptor",
    # History
    "HistoryEntry",
]
