"""History entry model — one persisted record per conversion attempt.

Entries serialize with camelCase keys so an exported archive reads the same
as the stored history sequence.
"""

from __future__ import annotations

import secrets
import string
import time

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cypher_converter.domain.models.enums import ConversionStatus

# Sentinel file name when the source has none
UNKNOWN_FILE_NAME = "Unknown"

# Source format recorded when the request asked for detection
DETECTED_SOURCE = "Detected"

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 9


def new_entry_id() -> str:
    """Return a fresh opaque base-36 identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class HistoryEntry(BaseModel):
    """A single conversion attempt and its terminal outcome."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(default_factory=new_entry_id, min_length=1)
    timestamp: int = Field(default_factory=now_ms)
    file_name: str = UNKNOWN_FILE_NAME
    source_format: str
    target_format: str
    status: ConversionStatus = ConversionStatus.PENDING
    result: str | None = None
    is_binary: bool | None = None

    def to_json_dict(self) -> dict:
        """JSON-safe dict with camelCase keys; unset optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
