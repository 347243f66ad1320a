"""Port: Document encoder — renders intermediate text as a binary document.

Infrastructure adapters (pdf, docx, xlsx) implement this interface.
"""

from abc import ABC, abstractmethod


class DocumentEncoderPort(ABC):
    """Contract for turning text into a binary document payload."""

    #: Catalog id of the produced format.
    target_format: str
    #: Media type of the produced bytes.
    mime_type: str

    @abstractmethod
    def encode(self, text: str) -> bytes:
        """Return the encoded document bytes."""
        ...
