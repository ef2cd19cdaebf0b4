import io
from dataclasses import dataclass
from typing import Optional

import structlog
from PIL import Image, ImageOps

from asset_uploader.errors import TransformFailed

logger = structlog.get_logger()


@dataclass(frozen=True)
class ImageFormat:
    name: str  # Pillow format name
    extension: str
    supports_alpha: bool = False


JPEG = ImageFormat("JPEG", ".jpg")
PNG = ImageFormat("PNG", ".png", supports_alpha=True)
GIF = ImageFormat("GIF", ".gif", supports_alpha=True)
WEBP = ImageFormat("WEBP", ".webp", supports_alpha=True)
TIFF = ImageFormat("TIFF", ".tiff", supports_alpha=True)
BMP = ImageFormat("BMP", ".bmp")

FALLBACK_FORMAT = JPEG

MAGIC_BYTES = [
    (b"\xff\xd8\xff", JPEG),
    (b"\x89PNG\r\n\x1a\n", PNG),
    (b"GIF87a", GIF),
    (b"GIF89a", GIF),
    (b"II*\x00", TIFF),
    (b"MM\x00*", TIFF),
    (b"BM", BMP),
]


@dataclass
class TransformedImage:
    data: bytes
    format: ImageFormat


def detect_format(buffer: bytes) -> Optional[ImageFormat]:
    """Identify an image format from its leading magic bytes."""
    # WebP is a RIFF container with a WEBP form type at offset 8
    if buffer[:4] == b"RIFF" and buffer[8:12] == b"WEBP":
        return WEBP
    for magic, image_format in MAGIC_BYTES:
        if buffer.startswith(magic):
            return image_format
    return None


def _entropy_trim(image: Image.Image, dimension: int) -> Image.Image:
    """
    Crop an image down to ``dimension`` x ``dimension``.

    Slices are trimmed from whichever edge carries less entropy, so the
    window settles on the most detailed region of the image.
    """
    left, top, right, bottom = 0, 0, image.width, image.height
    step = max(1, dimension // 8)

    while right - left > dimension:
        width = min(step, right - left - dimension)
        start = image.crop((left, top, left + width, bottom)).entropy()
        end = image.crop((right - width, top, right, bottom)).entropy()
        if start < end:
            left += width
        else:
            right -= width

    while bottom - top > dimension:
        height = min(step, bottom - top - dimension)
        start = image.crop((left, top, right, top + height)).entropy()
        end = image.crop((left, bottom - height, right, bottom)).entropy()
        if start < end:
            top += height
        else:
            bottom -= height

    return image.crop((left, top, right, bottom))


def _cover(image: Image.Image, dimension: int) -> Image.Image:
    """Scale so that both sides cover ``dimension``, then crop the excess."""
    scale = max(dimension / image.width, dimension / image.height)
    size = (
        max(dimension, round(image.width * scale)),
        max(dimension, round(image.height * scale)),
    )
    resized = image.resize(size, Image.Resampling.LANCZOS)
    return _entropy_trim(resized, dimension)


def resize_square(buffer: bytes, dimension: int) -> TransformedImage:
    """
    Resize an image to a ``dimension`` x ``dimension`` square.

    The output keeps the detected input format, or JPEG when the format
    cannot be detected.

    Raises:
        TransformFailed: If the image cannot be decoded or re-encoded
    """
    if dimension <= 0:
        raise TransformFailed(f"Invalid image dimension: {dimension}")

    image_format = detect_format(buffer) or FALLBACK_FORMAT

    try:
        with Image.open(io.BytesIO(buffer)) as source:
            source.load()
            image = ImageOps.exif_transpose(source)

            has_alpha = image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info
            if has_alpha and image_format.supports_alpha:
                image = image.convert("RGBA")
            elif image.mode not in ("RGB", "L"):
                image = image.convert("RGB")

            result = _cover(image, dimension)

            output = io.BytesIO()
            result.save(output, format=image_format.name)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(
            "Failed to transform image",
            error=str(e),
            format=image_format.name,
            dimension=dimension
        )
        raise TransformFailed(f"Failed to transform image: {e}") from e

    logger.info(
        "Resized image",
        format=image_format.name,
        dimension=dimension,
        size=output.tell()
    )
    return TransformedImage(data=output.getvalue(), format=image_format)
