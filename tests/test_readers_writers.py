"""Tests for reading source files and writing normalized results."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from docx import Document
from fpdf import FPDF
from openpyxl import Workbook
from PIL import Image

from cypher_converter.application.normalizer import normalize
from cypher_converter.domain.errors import SourceReadError
from cypher_converter.domain.models.conversion import BinaryOutcome, TextOutcome, encode_data_uri
from cypher_converter.domain.models.enums import ContentKind
from cypher_converter.infrastructure.readers.source_reader import (
    image_subtype,
    is_image_file,
    read_source,
)
from cypher_converter.infrastructure.writers.result_writer import write_result


class TestReadSource:
    def test_text_file_defaults_to_auto(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text('{"a": 1}', encoding="utf-8")

        request = read_source(path)
        assert request.source_format == "auto"
        assert request.payload == '{"a": 1}'
        assert request.content_kind == ContentKind.TEXT
        assert request.file_name == "data.json"

    def test_declared_source_format(self, tmp_path: Path):
        path = tmp_path / "notes"
        path.write_text("# hi", encoding="utf-8")
        assert read_source(path, "markdown").source_format == "markdown"

    def test_invalid_utf8_is_replaced(self, tmp_path: Path):
        path = tmp_path / "bad.txt"
        path.write_bytes(b"ok \xff end")
        assert read_source(path).payload == "ok � end"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_source(tmp_path / "nope.txt")

    def test_png(self, tmp_path: Path, png_bytes: bytes):
        path = tmp_path / "pic.png"
        path.write_bytes(png_bytes)

        request = read_source(path)
        assert request.content_kind == ContentKind.IMAGE
        assert request.source_format == "png"
        assert request.payload == png_bytes

    def test_image_helpers(self):
        assert is_image_file(Path("photo.JPG"))
        assert not is_image_file(Path("diagram.svg"))
        assert image_subtype(Path("photo.jpg")) == "jpeg"
        assert image_subtype(Path("x.webp")) == "webp"

    def test_docx_text(self, tmp_path: Path):
        doc = Document()
        doc.add_paragraph("first")
        doc.add_paragraph("second")
        path = tmp_path / "report.docx"
        doc.save(str(path))

        request = read_source(path)
        assert request.source_format == "docx"
        assert request.payload == "first\nsecond"

    def test_xlsx_text(self, tmp_path: Path):
        wb = Workbook()
        wb.active.append(["name", "qty"])
        wb.active.append(["apple", 3])
        path = tmp_path / "sheet.xlsx"
        wb.save(str(path))

        request = read_source(path)
        assert request.source_format == "xlsx"
        assert request.payload == "name,qty\napple,3"

    def test_pdf_text(self, tmp_path: Path):
        pdf = FPDF()
        pdf.add_page()
        pdf.set_font("Helvetica", size=12)
        pdf.cell(0, 10, "Hello PDF")
        path = tmp_path / "doc.pdf"
        pdf.output(str(path))

        request = read_source(path)
        assert request.source_format == "pdf"
        assert "Hello PDF" in request.payload

    def test_corrupt_docx(self, tmp_path: Path):
        path = tmp_path / "broken.docx"
        path.write_bytes(b"not a zip file")
        with pytest.raises(SourceReadError):
            read_source(path)


class TestWriteResult:
    def test_text_to_file(self, tmp_path: Path):
        result = normalize(TextOutcome(text="a: 1\n"), "yaml", 1)
        written = write_result(result, tmp_path / "out" / "data.yaml")
        assert written.read_text(encoding="utf-8") == "a: 1\n"

    def test_binary_to_directory(self, tmp_path: Path):
        buffer = io.BytesIO()
        Image.new("RGB", (2, 2)).save(buffer, format="PNG")
        raw = buffer.getvalue()
        result = normalize(BinaryOutcome(data_uri=encode_data_uri(raw, "image/png")), "png", 42)

        written = write_result(result, tmp_path)
        assert written.name == "cypher-converted-42.png"
        assert written.read_bytes() == raw
