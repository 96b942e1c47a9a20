"""
Image Loader — Decodes screenshot payloads (raw bytes or base64 data URLs)
into RGB Pillow images ready for layout.
"""

import base64
import io
import logging

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:"


def _payload_bytes(payload: bytes | str) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if payload.startswith(DATA_URL_PREFIX):
        header, _, encoded = payload.partition(",")
        if not header.endswith(";base64"):
            raise ValueError(f"Unsupported data URL encoding: {header[:40]}")
        return base64.b64decode(encoded, validate=True)
    raise ValueError("Screenshot payload must be bytes or a data URL")


def decode_image(payload: bytes | str) -> PILImage.Image:
    raw = _payload_bytes(payload)
    with PILImage.open(io.BytesIO(raw)) as img:
        img.load()
        return img.convert("RGB")


def load_images(payloads: list[bytes | str]) -> list[PILImage.Image]:
    """Decode payloads in order; undecodable ones are skipped with a warning."""
    images = []
    for i, payload in enumerate(payloads):
        try:
            images.append(decode_image(payload))
        except (ValueError, UnidentifiedImageError, OSError) as e:
            logger.warning(f"  Skipping screenshot {i + 1}: {e}")
    logger.debug(f"  Decoded {len(images)}/{len(payloads)} screenshots")
    return images
