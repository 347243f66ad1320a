"""Spreadsheet (.xlsx) encoder — comma-delimited rows written with openpyxl.

The intermediate text is re-parsed as comma-delimited rows. When a line
cannot be parsed or the rows disagree on their field count, the whole text
is written into a single cell instead of raising.
"""

from __future__ import annotations

import csv
import io
import logging

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from cypher_converter.domain.errors import DocumentEncodingError
from cypher_converter.domain.ports.document_encoder import DocumentEncoderPort

logger = logging.getLogger(__name__)

# Excel caps a single cell at 32,767 characters
_MAX_CELL_CHARS = 32_767


def _clean_cell(value: str) -> str:
    cleaned = ILLEGAL_CHARACTERS_RE.sub("", value)
    if len(cleaned) > _MAX_CELL_CHARS:
        logger.warning(
            "Cell of %d characters truncated to the %d Excel allows",
            len(cleaned),
            _MAX_CELL_CHARS,
        )
        return cleaned[:_MAX_CELL_CHARS]
    return cleaned


def parse_rows(text: str) -> list[list[str]]:
    """Split *text* into comma-delimited rows.

    Returns ``[[text]]`` when the text does not split into a consistent
    table.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return [[text]]

    try:
        rows = list(csv.reader(lines, strict=True, skipinitialspace=True))
    except csv.Error as exc:
        logger.warning("Spreadsheet rows could not be parsed, using a single cell: %s", exc)
        return [[text]]

    widths = {len(row) for row in rows}
    if len(widths) != 1:
        logger.warning(
            "Spreadsheet rows have inconsistent widths %s, using a single cell",
            sorted(widths),
        )
        return [[text]]
    return rows


class XlsxEncoder(DocumentEncoderPort):
    """Write comma-delimited text to a single-sheet workbook."""

    target_format = "xlsx"
    mime_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def __init__(self, sheet_title: str = "ConvertedData") -> None:
        self._sheet_title = sheet_title

    def encode(self, text: str) -> bytes:
        rows = parse_rows(text)
        try:
            wb = Workbook(write_only=True)
            ws = wb.create_sheet(title=self._sheet_title)
            for row in rows:
                ws.append([_clean_cell(cell) for cell in row])

            buffer = io.BytesIO()
            wb.save(buffer)
            return buffer.getvalue()
        except Exception as exc:
            raise DocumentEncodingError(f"XLSX encoding failed: {exc}") from exc
