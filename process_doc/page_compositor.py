"""
Page Compositor — Cuts the continuous layout into fixed-size pages.

The layout is rasterized once onto an off-screen surface. Page ``i`` is
that same surface composited at vertical offset ``-i * P`` onto a blank
``W x P`` canvas, so content on a page boundary is never laid out twice
and cannot shift between pages.
"""

import logging
import math

from .models import Page, RenderedLayout
from .raster_backend import RasterBackend

logger = logging.getLogger(__name__)


def page_count(total_height: int, page_height: int) -> int:
    """Pages needed for ``total_height``; at least one."""
    if page_height <= 0:
        raise ValueError(f"Page height must be positive, got {page_height}")
    return max(1, math.ceil(total_height / page_height))


def page_window(index: int, total_height: int, page_height: int) -> tuple[int, int]:
    """Visible ``[top, bottom)`` slice of the layout for 0-based page ``index``."""
    top = index * page_height
    return top, min(top + page_height, total_height)


def compose_pages(layout: RenderedLayout, page_height: int, backend: RasterBackend) -> list[Page]:
    n_pages = page_count(layout.height, page_height)
    logger.info(f"Compositing {n_pages} page(s) of {layout.width}x{page_height}px "
                f"from layout height {layout.height}px")
    pages: list[Page] = []
    with backend.offscreen_surface(layout) as surface:
        for i in range(n_pages):
            top, bottom = page_window(i, layout.height, page_height)
            image = backend.composite(surface, layout.width, page_height, top)
            pages.append(Page(index=i + 1, image=image))
            logger.debug(f"  Page {i + 1}/{n_pages}: rows {top}-{bottom}")
    return pages
