"""Local encoders — binary documents and raster images."""

from cypher_converter.infrastructure.encoders.docx_encoder import DocxEncoder
from cypher_converter.infrastructure.encoders.image_encoder import PillowImageEncoder
from cypher_converter.infrastructure.encoders.pdf_encoder import PdfEncoder
from cypher_converter.infrastructure.encoders.xlsx_encoder import XlsxEncoder

__all__ = ["DocxEncoder", "PdfEncoder", "PillowImageEncoder", "XlsxEncoder"]
