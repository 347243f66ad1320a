"""Conversion request and outcome models.

An outcome is a tagged variant: either inline text or a binary payload
encoded as a data URI. ``is_binary`` is derived from the variant rather
than stored next to a dual-meaning string.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cypher_converter.domain.models.enums import ContentKind
from cypher_converter.domain.models.formats import AUTO

# data:<type>/<subtype>[;param=value]*;base64,
DATA_URI_PATTERN = re.compile(
    r"^data:[\w.+-]+/[\w.+-]+(?:;[\w.+-]+=[\w.+-]+)*;base64,",
    re.IGNORECASE,
)


def is_data_uri(text: str) -> bool:
    """Return True if *text* starts with a base64 data-URI prefix."""
    return bool(DATA_URI_PATTERN.match(text))


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Encode *data* as a base64 data URI of *mime_type*."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into its media type and raw bytes.

    Raises:
        ValueError: If *uri* is not a base64 data URI.
    """
    match = DATA_URI_PATTERN.match(uri)
    if not match:
        raise ValueError("not a base64 data URI")
    mime_type = uri[len("data:") :].split(";", 1)[0]
    try:
        data = base64.b64decode(uri[match.end() :], validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc
    return mime_type, data


class ConversionRequest(BaseModel):
    """A single conversion to execute. Never persisted."""

    model_config = ConfigDict(frozen=True)

    source_format: str = AUTO
    target_format: str
    payload: Union[str, bytes]
    content_kind: ContentKind = ContentKind.TEXT
    file_name: str | None = None

    @field_validator("source_format", "target_format")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("format id must not be empty")
        return value

    @model_validator(mode="after")
    def _check_payload_kind(self) -> "ConversionRequest":
        if self.content_kind == ContentKind.IMAGE and not isinstance(self.payload, bytes):
            raise ValueError("image requests need a bytes payload")
        if self.content_kind == ContentKind.TEXT and not isinstance(self.payload, str):
            raise ValueError("text requests need a str payload")
        return self

    @property
    def needs_detection(self) -> bool:
        return self.source_format == AUTO

    def with_source(self, source_format: str) -> "ConversionRequest":
        """Return a copy with the source format resolved."""
        return self.model_copy(update={"source_format": source_format})


class TextOutcome(BaseModel):
    """Literal text result."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str

    @field_validator("text")
    @classmethod
    def _not_data_uri(cls, value: str) -> str:
        if is_data_uri(value):
            raise ValueError("text outcome must not be a data URI")
        return value

    @property
    def content(self) -> str:
        return self.text

    @property
    def is_binary(self) -> bool:
        return False


class BinaryOutcome(BaseModel):
    """Binary result carried as a data URI."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    data_uri: str

    @field_validator("data_uri")
    @classmethod
    def _is_data_uri(cls, value: str) -> str:
        if not is_data_uri(value):
            raise ValueError("binary outcome must be a base64 data URI")
        return value

    @property
    def content(self) -> str:
        return self.data_uri

    @property
    def is_binary(self) -> bool:
        return True


ConversionOutcome = Annotated[Union[TextOutcome, BinaryOutcome], Field(discriminator="kind")]


class NormalizedResult(BaseModel):
    """Canonical result shape handed to callers and the history ledger."""

    model_config = ConfigDict(frozen=True)

    content: str
    is_binary: bool
    suggested_file_name: str

    @model_validator(mode="after")
    def _check_shape(self) -> "NormalizedResult":
        if is_data_uri(self.content) != self.is_binary:
            raise ValueError("is_binary must be True exactly when content is a data URI")
        return self


class ConversionResult(BaseModel):
    """Outcome of one orchestrated attempt."""

    model_config = ConfigDict(frozen=True)

    entry_id: str
    source_format: str
    target_format: str
    result: NormalizedResult

    @property
    def content(self) -> str:
        return self.result.content

    @property
    def is_binary(self) -> bool:
        return self.result.is_binary
