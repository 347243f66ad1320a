"""Format catalog — the fixed set of supported formats.

The catalog is process-wide constant state. Formats are addressed by their
``id`` from requests and history entries; the catalog keeps no
back-references.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from cypher_converter.domain.errors import UnknownFormatError
from cypher_converter.domain.models.enums import FormatKind

# Sentinel for "resolve the source format before executing"
AUTO = "auto"

# Generic textual format used when detection cannot decide
FALLBACK_TEXT_FORMAT = "txt"

# Textual representation fed to the local binary encoders
INTERMEDIATE_FORMAT = "markdown"


class FormatDescriptor(BaseModel):
    """One supported format."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    kind: FormatKind
    extension: str
    mime_type: str


_XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _fmt(
    format_id: str, label: str, kind: FormatKind, extension: str, mime_type: str
) -> FormatDescriptor:
    return FormatDescriptor(
        id=format_id, label=label, kind=kind, extension=extension, mime_type=mime_type
    )


_FORMATS: tuple[FormatDescriptor, ...] = (
    _fmt("json", "JSON", FormatKind.DATA, "json", "application/json"),
    _fmt("yaml", "YAML", FormatKind.DATA, "yaml", "application/yaml"),
    _fmt("xml", "XML", FormatKind.DATA, "xml", "application/xml"),
    _fmt("csv", "CSV", FormatKind.DATA, "csv", "text/csv"),
    _fmt("xlsx", "Excel (XLSX)", FormatKind.DOCUMENT, "xlsx", _XLSX_MIME),
    _fmt("pdf", "PDF Document", FormatKind.DOCUMENT, "pdf", "application/pdf"),
    _fmt("docx", "Word (DOCX)", FormatKind.DOCUMENT, "docx", _DOCX_MIME),
    _fmt("markdown", "Markdown", FormatKind.TEXT, "md", "text/markdown"),
    _fmt("html", "HTML", FormatKind.TEXT, "html", "text/html"),
    _fmt("txt", "Plain Text", FormatKind.TEXT, "txt", "text/plain"),
    _fmt("python", "Python", FormatKind.CODE, "py", "text/x-python"),
    _fmt("javascript", "JavaScript", FormatKind.CODE, "js", "text/javascript"),
    _fmt("typescript", "TypeScript", FormatKind.CODE, "ts", "text/x-typescript"),
    _fmt("rust", "Rust", FormatKind.CODE, "rs", "text/x-rust"),
    _fmt("png", "PNG", FormatKind.IMAGE, "png", "image/png"),
    _fmt("jpeg", "JPEG", FormatKind.IMAGE, "jpeg", "image/jpeg"),
    _fmt("webp", "WebP", FormatKind.IMAGE, "webp", "image/webp"),
)

# Common names for catalog ids (detection replies, file suffixes)
FORMAT_ALIASES = {
    "yml": "yaml",
    "md": "markdown",
    "htm": "html",
    "text": "txt",
    "plaintext": "txt",
    "plain": "txt",
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "rs": "rust",
    "jpg": "jpeg",
    "excel": "xlsx",
    "word": "docx",
}

# Targets produced by local encoders from the intermediate markdown
BINARY_DOCUMENT_FORMATS = frozenset({"pdf", "docx", "xlsx"})


class FormatCatalog:
    """Read-only lookup over the fixed format catalog."""

    def __init__(self, formats: tuple[FormatDescriptor, ...] = _FORMATS) -> None:
        self._formats = formats
        self._by_id = {fmt.id: fmt for fmt in formats}
        if len(self._by_id) != len(formats):
            raise ValueError("Format ids must be unique")

    def list(self) -> tuple[FormatDescriptor, ...]:
        """Return every format in stable catalog order."""
        return self._formats

    def ids(self) -> list[str]:
        return [fmt.id for fmt in self._formats]

    def contains(self, format_id: str) -> bool:
        return format_id in self._by_id

    def get(self, format_id: str) -> FormatDescriptor:
        """Return the descriptor for *format_id*.

        Raises:
            UnknownFormatError: If *format_id* is not in the catalog.
        """
        try:
            return self._by_id[format_id]
        except KeyError:
            raise UnknownFormatError(format_id) from None

    def kind_of(self, format_id: str) -> FormatKind:
        """Return the kind of *format_id* (raises ``UnknownFormatError``)."""
        return self.get(format_id).kind

    def resolve(self, name: str) -> str | None:
        """Map a loose format name to a catalog id, or None if it has no match."""
        key = name.strip().lower().lstrip(".")
        key = FORMAT_ALIASES.get(key, key)
        return key if key in self._by_id else None

    def by_kind(self, kind: FormatKind) -> list[FormatDescriptor]:
        return [fmt for fmt in self._formats if fmt.kind == kind]

    @staticmethod
    def is_binary_document(format_id: str) -> bool:
        """True for targets encoded locally from intermediate markdown."""
        return format_id in BINARY_DOCUMENT_FORMATS


# Module-level catalog shared by the whole process
CATALOG = FormatCatalog()
