"""Word (.docx) encoder — one paragraph per line using python-docx."""

from __future__ import annotations

import io
import re

from docx import Document
from docx.shared import Pt

from cypher_converter.domain.errors import DocumentEncodingError
from cypher_converter.domain.ports.document_encoder import DocumentEncoderPort

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
# XML 1.0 forbids most control characters; python-docx raises on them
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


class DocxEncoder(DocumentEncoderPort):
    """Assemble a Word document with one paragraph per line of text.

    Markdown heading lines become Word headings of the same level.
    """

    target_format = "docx"
    mime_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    def __init__(self, font_size: int = 11) -> None:
        self._font_size = font_size

    def encode(self, text: str) -> bytes:
        try:
            document = Document()
            document.styles["Normal"].font.size = Pt(self._font_size)

            for line in text.split("\n"):
                line = _CONTROL_CHARS_RE.sub("", line.rstrip("\r"))
                match = _HEADING_RE.match(line)
                if match:
                    level = min(len(match.group(1)), 4)
                    document.add_heading(match.group(2), level=level)
                else:
                    document.add_paragraph(line)

            buffer = io.BytesIO()
            document.save(buffer)
            return buffer.getvalue()
        except Exception as exc:
            raise DocumentEncodingError(f"DOCX encoding failed: {exc}") from exc
