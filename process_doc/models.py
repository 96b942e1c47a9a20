"""
Data models used across the process document export pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from PIL import Image

MM_PER_INCH = 25.4


@dataclass(frozen=True)
class Heading:
    """A second-level heading line (``## `` marker stripped)."""
    text: str


@dataclass(frozen=True)
class ListItem:
    """A numbered step. ``position`` is 1-based within its run."""
    text: str
    position: int


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class Blank:
    pass


Block = Union[Heading, ListItem, Paragraph, Blank]


@dataclass(frozen=True)
class Plain:
    text: str


@dataclass(frozen=True)
class Emphasized:
    text: str


Span = Union[Plain, Emphasized]


@dataclass(frozen=True)
class TextStyle:
    size_px: int
    bold: bool = False


@dataclass
class TextRun:
    """A single-line run of text placed on the layout surface."""
    x: int
    y: int
    text: str
    style: TextStyle


@dataclass
class ImagePlacement:
    x: int
    y: int
    width: int
    height: int
    image: Image.Image


@dataclass
class RuleBox:
    """An unfilled rectangle outline, used for screenshot borders."""
    x: int
    y: int
    width: int
    height: int
    color: tuple[int, int, int] = (221, 221, 221)


LayoutItem = Union[TextRun, ImagePlacement, RuleBox]


@dataclass
class RenderedLayout:
    """One continuous surface description with no page boundaries."""
    width: int
    height: int
    items: list[LayoutItem] = field(default_factory=list)

    @property
    def text_runs(self) -> list[TextRun]:
        return [item for item in self.items if isinstance(item, TextRun)]

    @property
    def images(self) -> list[ImagePlacement]:
        return [item for item in self.items if isinstance(item, ImagePlacement)]


@dataclass
class Page:
    index: int
    image: Image.Image


class ExportFormat(Enum):
    PAGINATED_DOCUMENT = "pdf"
    FLAT_TEXT = "txt"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def media_type(self) -> str:
        return "application/pdf" if self is ExportFormat.PAGINATED_DOCUMENT else "text/plain"


@dataclass
class ExportJob:
    format: ExportFormat
    in_progress: bool = False


@dataclass
class ProcessDocument:
    """Title, generated body text and attached screenshots of one process."""
    title: str
    body: str = ""
    screenshots: list[Union[bytes, str]] = field(default_factory=list)


@dataclass
class ExportArtifact:
    filename: str
    data: bytes
    media_type: str


@dataclass(frozen=True)
class PageGeometry:
    """
    Fixed page geometry. All derived values are raster pixels at
    ``scale`` times the 96 px/inch reference resolution.
    """
    page_width_mm: float = 210.0
    page_height_mm: float = 297.0
    margin_mm: float = 20.0
    px_per_inch: float = 96.0
    scale: int = 2

    def __post_init__(self):
        if self.scale < 1:
            raise ValueError(f"Scale must be at least 1, got {self.scale}")
        if self.margin_mm < 0 or 2 * self.margin_mm >= self.page_width_mm:
            raise ValueError(f"Margins of {self.margin_mm}mm leave no content width "
                             f"on a {self.page_width_mm}mm page")

    def mm_to_px(self, mm: float) -> int:
        return round(mm / MM_PER_INCH * self.px_per_inch * self.scale)

    def css_to_px(self, css_px: float) -> int:
        return round(css_px * self.scale)

    def pt_to_px(self, points: float) -> int:
        return round(points * self.px_per_inch / 72.0 * self.scale)

    @property
    def width(self) -> int:
        return self.mm_to_px(self.page_width_mm)

    @property
    def page_height(self) -> int:
        return round(self.width * self.page_height_mm / self.page_width_mm)

    @property
    def margin(self) -> int:
        return self.mm_to_px(self.margin_mm)

    @property
    def content_width(self) -> int:
        return self.width - 2 * self.margin

    @property
    def resolution(self) -> float:
        """Dots per inch that maps ``width`` pixels onto ``page_width_mm``."""
        return self.width / (self.page_width_mm / MM_PER_INCH)


@dataclass(frozen=True)
class Typography:
    """Print typography. Sizes in points, spacings in CSS pixels."""
    title_pt: float = 22.0
    heading_pt: float = 18.0
    caption_pt: float = 14.0
    body_pt: float = 12.0
    line_height: float = 1.6
    title_space_after: float = 16.0
    heading_space_before: float = 16.0
    heading_space_after: float = 12.0
    caption_space_before: float = 24.0
    caption_space_after: float = 12.0
    paragraph_space_after: float = 8.0
    list_item_space_after: float = 8.0
    image_gap: float = 16.0
    screenshots_caption: str = "Associated Screenshots"
