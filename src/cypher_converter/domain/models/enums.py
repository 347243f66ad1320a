"""Enumerations for Cypher Converter."""

from enum import Enum


class FormatKind(str, Enum):
    """Coarse category used to pick a conversion path."""

    TEXT = "text"
    CODE = "code"
    DATA = "data"
    DOCUMENT = "document"
    IMAGE = "image"


class ContentKind(str, Enum):
    """Kind of the payload's originating file."""

    TEXT = "text"
    IMAGE = "image"


class ConversionStatus(str, Enum):
    """Lifecycle status of a history entry."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ConversionStatus.PENDING


class Theme(str, Enum):
    """UI theme preference."""

    LIGHT = "light"
    DARK = "dark"
