"""Image re-encoding for uploads."""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

from huddle.core.settings import settings

logger = logging.getLogger(__name__)


def compress_image(data: bytes, max_width: int | None = None, quality: float | None = None) -> bytes:
    """Scale an image down to ``max_width`` and re-encode it as JPEG.

    ``quality`` is a 0-1 fraction, mapped onto Pillow's 1-95 JPEG scale.
    Raises ``ValueError`` if the bytes are not a decodable image.
    """
    max_width = max_width or settings.image_max_width
    quality = quality if quality is not None else settings.image_quality

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            width, height = img.size
            if width > max_width:
                height = max(1, round(height * max_width / width))
                width = max_width
                img = img.resize((width, height), Image.Resampling.LANCZOS)
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")

            out = io.BytesIO()
            img.save(out, format="JPEG", quality=max(1, min(95, int(quality * 100))))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ValueError(f"Failed to load image: {exc}") from exc
    return out.getvalue()


def prepare_upload(data: bytes, content_type: str | None = None) -> tuple[bytes, str]:
    """Return the bytes and content type to send upstream.

    Payloads above ``IMAGE_MAX_BYTES`` are re-encoded; if that fails the
    original bytes are used.
    """
    content_type = content_type or "image/jpeg"
    if len(data) <= settings.image_max_bytes:
        return data, content_type
    try:
        return compress_image(data), "image/jpeg"
    except ValueError as exc:
        logger.warning("Image compression failed, using original: %s", exc)
        return data, content_type


def upload_filename(filename: str, content_type: str) -> str:
    """Give ``filename`` a ``.jpg`` extension when the payload is JPEG."""
    if content_type != "image/jpeg":
        return filename
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        return f"{filename}.jpg"
    if ext.lower() in ("jpg", "jpeg"):
        return filename
    return f"{stem}.jpg"
