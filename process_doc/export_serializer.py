"""
Export Serializer — Turns composited pages or raw text into a named artifact.
"""

import io
import logging
import re

from .errors import MissingTitleError
from .models import ExportArtifact, ExportFormat, Page, PageGeometry

logger = logging.getLogger(__name__)

FILENAME_UNSAFE = re.compile(r"[^a-z0-9]")


def require_title(title: str | None) -> str:
    if not title or not title.strip():
        raise MissingTitleError()
    return title


def make_filename(title: str | None, fmt: ExportFormat) -> str:
    title = require_title(title)
    return f"{FILENAME_UNSAFE.sub('_', title.lower())}.{fmt.extension}"


def flat_text(title: str, body: str) -> str:
    """Title, a dash rule as long as the title, then the body verbatim."""
    return f"{title}\n\n{'-' * len(title)}\n\n{body}"


def serialize_text(title: str, body: str) -> ExportArtifact:
    filename = make_filename(title, ExportFormat.FLAT_TEXT)
    data = flat_text(title, body or "").encode("utf-8")
    logger.info(f"Serialized flat text: {filename} ({len(data)} bytes)")
    return ExportArtifact(filename=filename, data=data, media_type=ExportFormat.FLAT_TEXT.media_type)


def serialize_pdf(title: str, pages: list[Page], geometry: PageGeometry) -> ExportArtifact:
    """
    Embed each page image at full page size. The PDF resolution is chosen so
    that a page of ``geometry.width`` pixels measures exactly the page width.
    """
    filename = make_filename(title, ExportFormat.PAGINATED_DOCUMENT)
    if not pages:
        raise ValueError("Cannot serialize a document without pages")
    ordered = sorted(pages, key=lambda p: p.index)
    images = [p.image if p.image.mode == "RGB" else p.image.convert("RGB") for p in ordered]
    buffer = io.BytesIO()
    images[0].save(buffer, format="PDF", save_all=True, append_images=images[1:],
                   resolution=geometry.resolution, title=title)
    data = buffer.getvalue()
    logger.info(f"Serialized PDF: {filename} ({len(pages)} pages, {len(data)} bytes)")
    return ExportArtifact(filename=filename, data=data,
                          media_type=ExportFormat.PAGINATED_DOCUMENT.media_type)
