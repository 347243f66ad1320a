"""Result writer — saves a normalized result to disk."""

from __future__ import annotations

from pathlib import Path

from cypher_converter.domain.models.conversion import NormalizedResult, decode_data_uri


def write_result(result: NormalizedResult, destination: Path) -> Path:
    """Write *result* to *destination* and return the written path.

    Text results are written as UTF-8; binary results are decoded from their
    data URI. An existing directory destination receives the suggested
    file name.
    """
    destination = Path(destination)
    if destination.is_dir():
        destination = destination / result.suggested_file_name
    destination.parent.mkdir(parents=True, exist_ok=True)

    if result.is_binary:
        _mime, data = decode_data_uri(result.content)
        destination.write_bytes(data)
    else:
        destination.write_text(result.content, encoding="utf-8")
    return destination
