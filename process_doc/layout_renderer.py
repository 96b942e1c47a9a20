"""
Layout Renderer — Lays out the title, parsed blocks and screenshots as one
continuous, fixed-width surface.

The result is a display list (``RenderedLayout``). Its height is whatever
the content needs; page boundaries are applied later by the compositor.
Text is only measured here, through the raster backend; nothing is drawn.
"""

import logging
import re
from typing import Iterable, Optional

from PIL import Image

from .block_parser import group_runs
from .inline_styler import style_spans
from .models import (
    Blank,
    Block,
    Emphasized,
    Heading,
    ImagePlacement,
    ListItem,
    PageGeometry,
    Paragraph,
    RenderedLayout,
    RuleBox,
    Span,
    TextRun,
    TextStyle,
    Typography,
)
from .raster_backend import RasterBackend

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\S+|\s+")

Piece = tuple[str, TextStyle]


class LayoutRenderer:
    def __init__(self, backend: RasterBackend, geometry: Optional[PageGeometry] = None,
                 typography: Optional[Typography] = None):
        self.backend = backend
        self.geometry = geometry or PageGeometry()
        self.typography = typography or Typography()
        self._items: list = []
        self._y = 0

    # -- text ---------------------------------------------------------------

    def _line_height(self, style: TextStyle) -> int:
        return max(1, round(style.size_px * self.typography.line_height))

    def _split_long_token(self, token: str, style: TextStyle, max_width: int) -> list[str]:
        chunks: list[str] = []
        current = ""
        for ch in token:
            if current and self.backend.measure(current + ch, style) > max_width:
                chunks.append(current)
                current = ch
            else:
                current += ch
        if current:
            chunks.append(current)
        return chunks

    def wrap_spans(self, spans: list[Span], size_px: int, max_width: int,
                   bold: bool = False) -> list[list[Piece]]:
        """
        Greedily break styled spans into lines no wider than ``max_width``.
        Breaks happen at whitespace; a word wider than a whole line is
        broken by character.
        """
        lines: list[list[Piece]] = [[]]
        line_width = 0.0
        for span in spans:
            style = TextStyle(size_px, bold or isinstance(span, Emphasized))
            for token in TOKEN_PATTERN.findall(span.text):
                width = self.backend.measure(token, style)
                if token.isspace():
                    if lines[-1]:
                        lines[-1].append((token, style))
                        line_width += width
                    continue
                if lines[-1] and line_width + width > max_width:
                    _strip_trailing_space(lines[-1])
                    lines.append([])
                    line_width = 0.0
                if width > max_width:
                    chunks = self._split_long_token(token, style, max_width)
                    for chunk in chunks[:-1]:
                        lines[-1].append((chunk, style))
                        lines.append([])
                    token = chunks[-1]
                    width = self.backend.measure(token, style)
                lines[-1].append((token, style))
                line_width += width
        _strip_trailing_space(lines[-1])
        return lines

    def _place_lines(self, lines: list[list[Piece]], x: int, line_height: int) -> None:
        for line in lines:
            for text, style, offset in _merge_pieces(line, self.backend):
                text_y = self._y + (line_height - style.size_px) // 2
                self._items.append(TextRun(x=round(x + offset), y=text_y, text=text, style=style))
            self._y += line_height

    def _place_text(self, text: str, points: float, bold: bool = False,
                    indent: int = 0) -> None:
        size_px = self.geometry.pt_to_px(points)
        max_width = self.geometry.content_width - indent
        lines = self.wrap_spans(style_spans(text), size_px, max_width, bold=bold)
        self._place_lines(lines, self.geometry.margin + indent,
                          self._line_height(TextStyle(size_px, bold)))

    def _space(self, css_px: float) -> None:
        self._y += self.geometry.css_to_px(css_px)

    # -- blocks -------------------------------------------------------------

    def _render_list(self, run: list[ListItem]) -> None:
        typo = self.typography
        style = TextStyle(self.geometry.pt_to_px(typo.body_pt))
        indent = round(max(self.backend.measure(f"{n}. ", style) for n in range(1, len(run) + 1)))
        line_height = self._line_height(style)
        # Numbering comes from position in the run, never from source digits.
        for number, item in enumerate(run, start=1):
            marker_y = self._y + (line_height - style.size_px) // 2
            self._items.append(TextRun(x=self.geometry.margin, y=marker_y,
                                       text=f"{number}.", style=style))
            self._place_text(item.text, typo.body_pt, indent=indent)
            self._space(typo.list_item_space_after)

    def _render_block(self, block: Block | list[ListItem]) -> None:
        typo = self.typography
        if isinstance(block, list):
            self._render_list(block)
        elif isinstance(block, Heading):
            self._space(typo.heading_space_before)
            self._place_text(block.text, typo.heading_pt, bold=True)
            self._space(typo.heading_space_after)
        elif isinstance(block, Paragraph):
            self._place_text(block.text, typo.body_pt)
            self._space(typo.paragraph_space_after)
        elif isinstance(block, Blank):
            pass
        elif isinstance(block, ListItem):
            self._render_list([block])
        else:
            raise TypeError(f"Unknown block type: {type(block).__name__}")

    def _render_images(self, images: list[Image.Image]) -> None:
        typo = self.typography
        self._space(typo.caption_space_before)
        self._place_text(typo.screenshots_caption, typo.caption_pt, bold=True)
        self._space(typo.caption_space_after)
        target_width = self.geometry.content_width
        for i, image in enumerate(images):
            if i > 0:
                self._space(typo.image_gap)
            height = max(1, round(image.height * target_width / image.width))
            self._items.append(ImagePlacement(x=self.geometry.margin, y=self._y,
                                              width=target_width, height=height, image=image))
            self._items.append(RuleBox(x=self.geometry.margin, y=self._y,
                                       width=target_width, height=height))
            logger.debug(f"  Placed image {i + 1} ({image.width}x{image.height} -> "
                         f"{target_width}x{height}) at y={self._y}")
            self._y += height

    def render(self, title: str, blocks: Iterable[Block],
               images: Optional[list[Image.Image]] = None) -> RenderedLayout:
        images = [img for img in (images or []) if img.width > 0 and img.height > 0]
        self._items = []
        self._y = self.geometry.margin

        self._place_text(title, self.typography.title_pt, bold=True)
        self._space(self.typography.title_space_after)
        for block in group_runs(blocks):
            self._render_block(block)
        if images:
            self._render_images(images)

        height = self._y + self.geometry.margin
        layout = RenderedLayout(width=self.geometry.width, height=height, items=self._items)
        self._items = []
        logger.info(f"Layout: {layout.width}x{layout.height}px, "
                    f"{len(layout.text_runs)} text runs, {len(layout.images)} images")
        return layout


def _strip_trailing_space(line: list[Piece]) -> None:
    while line and line[-1][0].isspace():
        line.pop()


def _merge_pieces(line: list[Piece], backend: RasterBackend) -> list[tuple[str, TextStyle, float]]:
    """Join adjacent pieces of the same style; returns (text, style, x offset)."""
    merged: list[tuple[str, TextStyle, float]] = []
    offset = 0.0
    for text, style in line:
        if merged and merged[-1][1] == style:
            prev_text, _, prev_offset = merged[-1]
            merged[-1] = (prev_text + text, style, prev_offset)
        else:
            merged.append((text, style, offset))
        offset += backend.measure(text, style)
    return merged


def render_layout(title: str, blocks: Iterable[Block], images: Optional[list[Image.Image]],
                  backend: RasterBackend, geometry: Optional[PageGeometry] = None,
                  typography: Optional[Typography] = None) -> RenderedLayout:
    return LayoutRenderer(backend, geometry, typography).render(title, blocks, images)
