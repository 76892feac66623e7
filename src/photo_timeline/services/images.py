"""Thumbnail and placeholder generation for uploaded photos."""

import base64
import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageFilter, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

_PLACEHOLDER_SIZE = 16
_THUMBNAIL_QUALITY = 85


@dataclass(frozen=True)
class ProcessedImage:
    """Derived artifacts for an uploaded original."""

    thumbnail: bytes
    thumbhash: str
    width: int
    height: int


@dataclass
class ImageProcessor:
    """Builds JPEG thumbnails and tiny blurred placeholders with Pillow."""

    max_width: int = 400

    def process(self, data: bytes) -> ProcessedImage:
        """Return a thumbnail, placeholder and dimensions for ``data``.

        Payloads Pillow cannot decode are kept as their own thumbnail.
        """
        try:
            with Image.open(io.BytesIO(data)) as opened:
                image = ImageOps.exif_transpose(opened)
                image.load()
        except (UnidentifiedImageError, OSError):
            logger.warning(
                "Could not decode image, storing original as thumbnail",
                extra={"size": len(data)},
            )
            return ProcessedImage(thumbnail=data, thumbhash="", width=0, height=0)

        width, height = image.size
        rgb = image.convert("RGB")
        return ProcessedImage(
            thumbnail=self._thumbnail(rgb),
            thumbhash=_placeholder(rgb),
            width=width,
            height=height,
        )

    def _thumbnail(self, image: Image.Image) -> bytes:
        thumb = image.copy()
        if thumb.width > self.max_width:
            ratio = self.max_width / thumb.width
            thumb = thumb.resize(
                (self.max_width, max(1, round(thumb.height * ratio))),
                Image.Resampling.LANCZOS,
            )
        buffer = io.BytesIO()
        thumb.save(buffer, format="JPEG", quality=_THUMBNAIL_QUALITY, optimize=True)
        return buffer.getvalue()


def _placeholder(image: Image.Image) -> str:
    """Encode a tiny blurred rendition as a PNG data URL."""
    tiny = image.copy()
    tiny.thumbnail((_PLACEHOLDER_SIZE, _PLACEHOLDER_SIZE))
    tiny = tiny.filter(ImageFilter.GaussianBlur(radius=1))
    buffer = io.BytesIO()
    tiny.save(buffer, format="PNG", optimize=True)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
