"""Result normalizer — one canonical shape for every conversion outcome.

``normalize`` is pure: the same outcome, target and creation time always
produce the same result, and normalizing a ``NormalizedResult`` again
returns an equal value.
"""

from __future__ import annotations

from typing import Union

from cypher_converter.domain.models.conversion import (
    BinaryOutcome,
    NormalizedResult,
    TextOutcome,
    encode_data_uri,
    is_data_uri,
)
from cypher_converter.domain.models.formats import CATALOG, FormatCatalog
from cypher_converter.domain.models.history import now_ms

DEFAULT_FILE_PREFIX = "cypher-converted"

Normalizable = Union[TextOutcome, BinaryOutcome, NormalizedResult, bytes, str]


def suggested_file_name(
    target_format: str,
    created_at: int,
    *,
    prefix: str = DEFAULT_FILE_PREFIX,
    catalog: FormatCatalog = CATALOG,
) -> str:
    """``<prefix>-<created_at>.<extension>`` for a catalog target."""
    extension = catalog.get(target_format).extension
    return f"{prefix}-{created_at}.{extension}"


def normalize(
    outcome: Normalizable,
    target_format: str,
    created_at: int | None = None,
    *,
    prefix: str = DEFAULT_FILE_PREFIX,
    catalog: FormatCatalog = CATALOG,
) -> NormalizedResult:
    """Shape *outcome* into a :class:`NormalizedResult`.

    Parameters
    ----------
    outcome:
        A tagged outcome, an earlier normalized result, raw ``bytes``
        (encoded with the target's media type) or a raw ``str`` (a data URI
        is binary, anything else is text).
    target_format:
        Catalog id; decides the file extension and the media type of raw
        bytes. Raises ``UnknownFormatError`` when not in the catalog.
    created_at:
        Epoch milliseconds for the suggested file name. Defaults to now,
        which is the only impure input.
    """
    descriptor = catalog.get(target_format)
    created_at = now_ms() if created_at is None else created_at

    if isinstance(outcome, NormalizedResult):
        content, is_binary = outcome.content, outcome.is_binary
    elif isinstance(outcome, (TextOutcome, BinaryOutcome)):
        content, is_binary = outcome.content, outcome.is_binary
    elif isinstance(outcome, (bytes, bytearray)):
        content, is_binary = encode_data_uri(bytes(outcome), descriptor.mime_type), True
    elif isinstance(outcome, str):
        content, is_binary = outcome, is_data_uri(outcome)
    else:
        raise TypeError(f"Cannot normalize outcome of type {type(outcome).__name__}")

    return NormalizedResult(
        content=content,
        is_binary=is_binary,
        suggested_file_name=suggested_file_name(
            descriptor.id, created_at, prefix=prefix, catalog=catalog
        ),
    )
