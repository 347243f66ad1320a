"""PDF encoder — paginated text writer using fpdf2."""

from __future__ import annotations

import re

from fpdf import FPDF

from cypher_converter.domain.errors import DocumentEncodingError
from cypher_converter.domain.ports.document_encoder import DocumentEncoderPort

_MARGIN_MM = 10.0
_PT_TO_MM = 0.3528
_LINE_SPACING = 1.4
_FONT = "Helvetica"
_MONO_FONT = "Courier"

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_HEADING_SCALE = {1: 1.6, 2: 1.35, 3: 1.2}


class PdfEncoder(DocumentEncoderPort):
    """Lay intermediate markdown out as a paginated A4 PDF.

    Headings (``#`` lines) are set in bold and fenced code blocks in a
    monospaced font; every other line is wrapped body text.
    """

    target_format = "pdf"
    mime_type = "application/pdf"

    def __init__(self, font_size: int = 11) -> None:
        self._font_size = font_size
        self._line_h = font_size * _LINE_SPACING * _PT_TO_MM

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, text: str) -> bytes:
        try:
            pdf = FPDF(orientation="P", unit="mm", format="A4")
            pdf.set_margins(_MARGIN_MM, _MARGIN_MM, _MARGIN_MM)
            pdf.set_auto_page_break(auto=True, margin=_MARGIN_MM)
            pdf.add_page()
            self._write_lines(pdf, text)
            return bytes(pdf.output())
        except Exception as exc:
            raise DocumentEncodingError(f"PDF encoding failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _write_lines(self, pdf: FPDF, text: str) -> None:
        in_code = False
        for line in text.splitlines():
            if line.strip().startswith("```"):
                in_code = not in_code
                continue

            if not line.strip():
                pdf.ln(self._line_h)
                continue

            if in_code:
                pdf.set_font(_MONO_FONT, "", self._font_size - 1)
                pdf.multi_cell(0, self._line_h, self._sanitize(line), new_x="LMARGIN", new_y="NEXT")
                continue

            match = _HEADING_RE.match(line)
            if match:
                level = len(match.group(1))
                size = self._font_size * _HEADING_SCALE.get(level, 1.0)
                pdf.set_font(_FONT, "B", size)
                pdf.multi_cell(
                    0,
                    size * _LINE_SPACING * _PT_TO_MM,
                    self._sanitize(match.group(2)),
                    new_x="LMARGIN",
                    new_y="NEXT",
                )
                continue

            pdf.set_font(_FONT, "", self._font_size)
            pdf.multi_cell(0, self._line_h, self._sanitize(line), new_x="LMARGIN", new_y="NEXT")

    @staticmethod
    def _sanitize(text: str) -> str:
        """Replace characters not supported by standard PDF fonts (Latin-1)."""
        replacements = {
            "\u2013": "-",  # en-dash
            "\u2014": "--",  # em-dash
            "\u2018": "'",  # left single quote
            "\u2019": "'",  # right single quote
            "\u201c": '"',  # left double quote
            "\u201d": '"',  # right double quote
            "\u2026": "...",  # ellipsis
            "\t": "    ",
        }
        for char, repl in replacements.items():
            text = text.replace(char, repl)

        # Fallback: encode to latin-1, replace errors with '?'
        return text.encode("latin-1", "replace").decode("latin-1")
