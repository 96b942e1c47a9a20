"""
Raster Backend — The measuring and drawing capability behind the layout
renderer and page compositor.

The renderer only measures text through a backend; the compositor asks
the backend for an off-screen surface of the finished layout and for
fixed-size page canvases cut from it. ``PillowBackend`` implements this
with Pillow.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Protocol

from PIL import Image, ImageDraw, ImageFont

from .models import ImagePlacement, RenderedLayout, RuleBox, TextRun, TextStyle

logger = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)
TEXT_COLOR = (0, 0, 0)

FONT_SEARCH_DIRS = [
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("C:/Windows/Fonts"),
]
REGULAR_FONT_NAMES = ["DejaVuSans.ttf", "LiberationSans-Regular.ttf", "Arial.ttf", "arial.ttf"]
BOLD_FONT_NAMES = ["DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf"]


class RasterBackend(Protocol):
    def measure(self, text: str, style: TextStyle) -> float:
        ...

    def offscreen_surface(self, layout: RenderedLayout) -> Any:
        """Context manager yielding the rasterized layout; released on exit."""
        ...

    def composite(self, surface: Any, width: int, height: int, offset_y: int) -> Any:
        ...


def find_font_file(names: list[str], search_dirs: Optional[list[Path]] = None) -> Optional[Path]:
    for directory in search_dirs or FONT_SEARCH_DIRS:
        if not directory.exists():
            continue
        for name in names:
            direct = directory / name
            if direct.is_file():
                return direct
            candidate = next(directory.rglob(name), None)
            if candidate is not None:
                return candidate
    return None


class PillowBackend:
    """Text measurement and rasterization using Pillow."""

    def __init__(self, regular_font: Optional[Path] = None, bold_font: Optional[Path] = None):
        self.regular_font = regular_font or find_font_file(REGULAR_FONT_NAMES)
        self.bold_font = bold_font or find_font_file(BOLD_FONT_NAMES)
        self._fonts: dict[TextStyle, ImageFont.ImageFont | ImageFont.FreeTypeFont] = {}
        self._measure_draw = ImageDraw.Draw(Image.new("RGB", (1, 1), BACKGROUND))
        logger.debug(f"Fonts: regular={self.regular_font}, bold={self.bold_font}")

    def _font(self, style: TextStyle):
        font = self._fonts.get(style)
        if font is not None:
            return font
        path = self.bold_font if style.bold else self.regular_font
        if path is None and style.bold:
            path = self.regular_font
        if path is not None:
            try:
                font = ImageFont.truetype(str(path), style.size_px)
            except OSError as e:
                logger.warning(f"Cannot load font {path}: {e}; using Pillow default")
        if font is None:
            font = ImageFont.load_default(size=style.size_px)
        self._fonts[style] = font
        return font

    def _stroke(self, style: TextStyle) -> int:
        # Without a bold face, embolden by stroking the regular glyphs.
        if style.bold and self.bold_font is None:
            return max(1, style.size_px // 24)
        return 0

    def measure(self, text: str, style: TextStyle) -> float:
        if not text:
            return 0.0
        font = self._font(style)
        stroke = self._stroke(style)
        if stroke:
            bbox = self._measure_draw.textbbox((0, 0), text, font=font, stroke_width=stroke)
            return float(bbox[2] - bbox[0])
        return float(self._measure_draw.textlength(text, font=font))

    def new_surface(self, layout: RenderedLayout) -> Image.Image:
        return Image.new("RGB", (layout.width, max(1, layout.height)), BACKGROUND)

    def rasterize(self, layout: RenderedLayout, surface: Image.Image) -> Image.Image:
        """Draw every layout item onto ``surface``."""
        draw = ImageDraw.Draw(surface)
        for item in layout.items:
            if isinstance(item, TextRun):
                draw.text((item.x, item.y), item.text, font=self._font(item.style),
                          fill=TEXT_COLOR, stroke_width=self._stroke(item.style),
                          stroke_fill=TEXT_COLOR)
            elif isinstance(item, ImagePlacement):
                image = item.image.convert("RGB")
                if image.size != (item.width, item.height):
                    image = image.resize((item.width, item.height), Image.LANCZOS)
                surface.paste(image, (item.x, item.y))
            elif isinstance(item, RuleBox):
                draw.rectangle((item.x, item.y, item.x + item.width - 1, item.y + item.height - 1),
                               outline=item.color)
            else:
                raise TypeError(f"Unsupported layout item: {type(item).__name__}")
        logger.debug(f"Rasterized layout {surface.width}x{surface.height} "
                     f"({len(layout.items)} items)")
        return surface

    @contextmanager
    def offscreen_surface(self, layout: RenderedLayout) -> Iterator[Image.Image]:
        surface = self.new_surface(layout)
        try:
            self.rasterize(layout, surface)
            yield surface
        finally:
            surface.close()
            logger.debug("Released off-screen surface")

    def composite(self, surface: Image.Image, width: int, height: int, offset_y: int) -> Image.Image:
        """
        Draw the whole surface onto a fresh ``width`` x ``height`` canvas,
        shifted up by ``offset_y``. Anything outside the canvas is clipped.
        """
        canvas = Image.new("RGB", (width, height), BACKGROUND)
        canvas.paste(surface, (0, -offset_y))
        return canvas
