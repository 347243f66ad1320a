"""Port: Image encoder — local raster re-encoding."""

from abc import ABC, abstractmethod


class ImageEncoderPort(ABC):
    """Contract for decoding an image and re-encoding it in another format."""

    @abstractmethod
    def reencode(self, data: bytes, target_format: str) -> bytes:
        """Return *data* re-encoded as *target_format*.

        Raises ``ImageDecodeError`` if *data* is not a decodable image.
        """
        ...
