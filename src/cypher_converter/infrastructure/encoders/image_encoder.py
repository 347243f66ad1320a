"""Image encoder — local raster decode, redraw and encode using Pillow."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from cypher_converter.domain.errors import ImageDecodeError, UnsupportedConversionError
from cypher_converter.domain.ports.image_encoder import ImageEncoderPort

# Catalog id -> Pillow format name
_PIL_FORMATS = {
    "png": "PNG",
    "jpeg": "JPEG",
    "webp": "WEBP",
}


class PillowImageEncoder(ImageEncoderPort):
    """Re-encode raster images between PNG, JPEG and WebP.

    The decoded image is drawn onto a fresh canvas of the same size before
    encoding, so metadata and animation frames are dropped. JPEG has no
    alpha channel; transparent pixels are flattened onto white.
    """

    def __init__(self, jpeg_quality: int = 92) -> None:
        self._jpeg_quality = jpeg_quality

    def reencode(self, data: bytes, target_format: str) -> bytes:
        pil_format = _PIL_FORMATS.get(target_format)
        if pil_format is None:
            raise UnsupportedConversionError(
                f"Images can only be converted to {', '.join(_PIL_FORMATS)}, not {target_format!r}"
            )

        image = self._decode(data)
        canvas = self._redraw(image, keep_alpha=pil_format != "JPEG")

        buffer = io.BytesIO()
        if pil_format == "JPEG":
            canvas.save(buffer, format=pil_format, quality=self._jpeg_quality)
        else:
            canvas.save(buffer, format=pil_format)
        return buffer.getvalue()

    @staticmethod
    def _decode(data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageDecodeError(f"Failed to load image: {exc}") from exc
        return image

    @staticmethod
    def _redraw(image: Image.Image, *, keep_alpha: bool) -> Image.Image:
        has_alpha = image.mode in ("RGBA", "LA") or (
            image.mode == "P" and "transparency" in image.info
        )
        rgba = image.convert("RGBA")
        if keep_alpha and has_alpha:
            canvas = Image.new("RGBA", rgba.size, (0, 0, 0, 0))
            canvas.alpha_composite(rgba)
            return canvas

        canvas = Image.new("RGB", rgba.size, (255, 255, 255))
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        return canvas
