"""Port: Text conversion service — remote generative conversion and detection."""

from abc import ABC, abstractmethod


class TextConversionPort(ABC):
    """Contract for the best-effort remote text converter."""

    @abstractmethod
    def convert(self, content: str, source_format: str, target_format: str) -> str:
        """Return *content* rewritten as *target_format*.

        Raises ``RemoteConversionError`` when the service fails or returns
        no usable text.
        """
        ...

    @abstractmethod
    def detect(self, sample: str) -> str:
        """Return the format id of *sample*, falling back to ``txt``. Never raises."""
        ...
