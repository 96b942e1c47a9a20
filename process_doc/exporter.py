"""
Exporter — Runs one export of a process document end to end.

Holds the single in-flight export job. A second request while one is
running is rejected. Any failure while building the layout surface or
compositing pages is reported once as ``RenderFailureError``; the source
document is never modified.
"""

import logging
import time
from typing import Optional

from .block_parser import parse_blocks
from .errors import ExportError, ExportInProgressError, RenderFailureError
from .export_serializer import require_title, serialize_pdf, serialize_text
from .image_loader import load_images
from .layout_renderer import render_layout
from .models import (
    ExportArtifact,
    ExportFormat,
    ExportJob,
    Page,
    PageGeometry,
    ProcessDocument,
    Typography,
)
from .page_compositor import compose_pages
from .raster_backend import PillowBackend, RasterBackend

logger = logging.getLogger(__name__)


def render_pages(document: ProcessDocument, backend: RasterBackend,
                 geometry: PageGeometry, typography: Optional[Typography] = None) -> list[Page]:
    """Parse, lay out and paginate ``document``."""
    blocks = parse_blocks(document.body or "")
    images = load_images(document.screenshots)
    layout = render_layout(document.title, blocks, images, backend, geometry, typography)
    return compose_pages(layout, geometry.page_height, backend)


class DocumentExporter:
    def __init__(self, backend: Optional[RasterBackend] = None,
                 geometry: Optional[PageGeometry] = None,
                 typography: Optional[Typography] = None):
        self.backend = backend or PillowBackend()
        self.geometry = geometry or PageGeometry()
        self.typography = typography or Typography()
        self.job: Optional[ExportJob] = None

    @property
    def in_progress(self) -> bool:
        return self.job is not None and self.job.in_progress

    def export(self, document: ProcessDocument, fmt: ExportFormat) -> ExportArtifact:
        require_title(document.title)
        if self.in_progress:
            raise ExportInProgressError(
                f"A {self.job.format.extension.upper()} export is already running")

        self.job = ExportJob(format=fmt, in_progress=True)
        start = time.time()
        try:
            if fmt is ExportFormat.FLAT_TEXT:
                artifact = self._export_text(document)
            else:
                artifact = self._export_pdf(document)
        finally:
            self.job.in_progress = False
        logger.info(f"Exported {artifact.filename} in {time.time() - start:.1f}s")
        return artifact

    def _export_text(self, document: ProcessDocument) -> ExportArtifact:
        try:
            return serialize_text(document.title, document.body)
        except UnicodeError as e:
            logger.error(f"Cannot encode text export for {document.title!r}: {e}")
            raise ExportError(f"Text cannot be encoded as UTF-8: {e}") from e

    def _export_pdf(self, document: ProcessDocument) -> ExportArtifact:
        try:
            pages = render_pages(document, self.backend, self.geometry, self.typography)
            return serialize_pdf(document.title, pages, self.geometry)
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Failed to generate PDF for '{document.title}': {e}")
            raise RenderFailureError(f"Failed to generate PDF: {e}") from e
