"""
pytest configuration and shared fixtures

Usage:
    def test_something(small_geometry, recording_backend):
        layout = render_layout("Title", [], [], recording_backend, small_geometry)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import pytest
from PIL import Image

from process_doc.models import PageGeometry, RenderedLayout, TextStyle
from process_doc.raster_backend import PillowBackend


# ============================================================================
# Backends
# ============================================================================

class RecordingBackend:
    """
    Deterministic backend: every character is half its font size wide.
    Records rasterize/composite calls and whether the surface was released.
    """

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.measure_calls = 0
        self.rasterize_calls = 0
        self.composite_offsets: list[int] = []
        self.surfaces_open = 0
        self.surfaces_released = 0
        self.on_rasterize = None

    def measure(self, text: str, style: TextStyle) -> float:
        self.measure_calls += 1
        return len(text) * style.size_px * 0.5

    @contextmanager
    def offscreen_surface(self, layout: RenderedLayout) -> Iterator[Image.Image]:
        self.rasterize_calls += 1
        if self.on_rasterize is not None:
            self.on_rasterize()
        if self.fail_on == "rasterize":
            raise RuntimeError("surface allocation failed")
        surface = Image.new("RGB", (layout.width, max(1, layout.height)), (255, 255, 255))
        self.surfaces_open += 1
        try:
            yield surface
        finally:
            self.surfaces_released += 1
            surface.close()

    def composite(self, surface, width: int, height: int, offset_y: int) -> Image.Image:
        self.composite_offsets.append(offset_y)
        if self.fail_on == "composite":
            raise RuntimeError("compositing failed")
        return Image.new("RGB", (width, height), (255, 255, 255))


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture(scope="session")
def pillow_backend() -> PillowBackend:
    """Real Pillow backend (font lookup is cached for the session)."""
    return PillowBackend()


# ============================================================================
# Geometry
# ============================================================================

@pytest.fixture
def geometry() -> PageGeometry:
    """Default A4 geometry at 2x supersampling."""
    return PageGeometry()


@pytest.fixture
def small_geometry() -> PageGeometry:
    """A4 proportions at one tenth size, to keep rasterization fast."""
    return PageGeometry(page_width_mm=21.0, page_height_mm=29.7, margin_mm=2.0)


# ============================================================================
# Sample content
# ============================================================================

@pytest.fixture
def sample_body() -> str:
    return (
        "## Preparation\n"
        "Make sure the **VPN** is connected.\n"
        "1. Open the admin console\n"
        "2. Select **Users**\n"
        "3. Click **Add user**\n"
        "\n"
        "## Verification\n"
        "Check the audit log for the new entry."
    )


@pytest.fixture
def screenshot_png() -> bytes:
    import io

    img = Image.new("RGB", (400, 200), (30, 120, 200))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
