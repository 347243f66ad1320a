"""Source reader — turns a file on disk into a ``ConversionRequest``.

Images are carried as raw bytes for local re-encoding. PDF, Word and Excel
sources are read to text locally so the text service receives real content.
Everything else is read as UTF-8 text.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

import pdfplumber
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from openpyxl import load_workbook

from cypher_converter.domain.errors import SourceReadError
from cypher_converter.domain.models.conversion import ConversionRequest
from cypher_converter.domain.models.enums import ContentKind
from cypher_converter.domain.models.formats import AUTO, CATALOG

logger = logging.getLogger(__name__)

_IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tif", ".tiff"}


def is_image_file(path: Path) -> bool:
    """True if *path* looks like a raster image (by media type or suffix)."""
    mime, _ = mimetypes.guess_type(path.name)
    if mime and mime.startswith("image/") and mime != "image/svg+xml":
        return True
    return path.suffix.lower() in _IMAGE_SUFFIXES


def image_subtype(path: Path) -> str:
    """Image source format from the media subtype, ``jpg`` folded to ``jpeg``."""
    mime, _ = mimetypes.guess_type(path.name)
    subtype = mime.split("/", 1)[1] if mime and mime.startswith("image/") else ""
    subtype = subtype or path.suffix.lower().lstrip(".") or "image"
    return CATALOG.resolve(subtype) or subtype


def read_source(path: Path, source_format: str = AUTO) -> ConversionRequest:
    """Build a request for converting *path*; the target is filled in later.

    Raises:
        FileNotFoundError: If *path* does not exist.
        SourceReadError: If a PDF/DOCX/XLSX source cannot be opened.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Source file not found: {path}")

    suffix = path.suffix.lower()
    if is_image_file(path):
        return _request(path, image_subtype(path), path.read_bytes(), ContentKind.IMAGE)
    if suffix == ".pdf":
        return _request(path, "pdf", _read_pdf_text(path), ContentKind.TEXT)
    if suffix == ".docx":
        return _request(path, "docx", _read_docx_text(path), ContentKind.TEXT)
    if suffix == ".xlsx":
        return _request(path, "xlsx", _read_xlsx_text(path), ContentKind.TEXT)

    text = path.read_bytes().decode("utf-8", errors="replace")
    return _request(path, source_format, text, ContentKind.TEXT)


def _request(
    path: Path, source_format: str, payload: str | bytes, kind: ContentKind
) -> ConversionRequest:
    # Target is a placeholder until the caller picks one
    return ConversionRequest(
        source_format=source_format,
        target_format="txt",
        payload=payload,
        content_kind=kind,
        file_name=path.name,
    )


def _read_pdf_text(path: Path) -> str:
    try:
        pdf = pdfplumber.open(str(path))
    except Exception as exc:
        raise SourceReadError(f"Could not open PDF {path.name}: {exc}") from exc

    try:
        pages = [page.extract_text() or "" for page in pdf.pages]
    finally:
        pdf.close()

    logger.debug("Extracted %d page(s) of text from %s", len(pages), path.name)
    return "\n\n".join(pages)


def _read_docx_text(path: Path) -> str:
    try:
        doc = Document(str(path))
    except (PackageNotFoundError, ValueError, KeyError) as exc:
        raise SourceReadError(f"Could not open Word document {path.name}: {exc}") from exc
    return "\n".join(para.text for para in doc.paragraphs)


def _read_xlsx_text(path: Path) -> str:
    try:
        wb = load_workbook(str(path), read_only=True, data_only=True)
    except Exception as exc:
        raise SourceReadError(f"Could not open workbook {path.name}: {exc}") from exc

    try:
        lines = []
        for row in wb.active.iter_rows(values_only=True):
            lines.append(",".join("" if value is None else str(value) for value in row))
    finally:
        wb.close()
    return "\n".join(lines)
