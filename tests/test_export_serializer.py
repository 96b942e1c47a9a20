"""
Export serializer unit tests
"""

import pytest
from PIL import Image

from process_doc.errors import MissingTitleError
from process_doc.export_serializer import flat_text, make_filename, serialize_pdf, serialize_text
from process_doc.models import ExportFormat, Page


class TestFlatText:

    def test_layout_of_flat_text(self):
        artifact = serialize_text("Setup Guide", "## Step 1\n1. Open app")
        assert artifact.data.decode("utf-8") == "Setup Guide\n\n-----------\n\n## Step 1\n1. Open app"
        assert artifact.filename == "setup_guide.txt"
        assert artifact.media_type == "text/plain"

    def test_body_is_not_stripped_of_markers(self):
        body = "**bold** and *star*\n\n   indented  \n"
        assert flat_text("T", body).endswith(body)

    def test_rule_matches_title_length(self):
        text = flat_text("Über Straße", "")
        assert text.split("\n")[2] == "-" * len("Über Straße")

    def test_encoded_as_utf8(self):
        artifact = serialize_text("Café", "naïve")
        assert artifact.data == "Café\n\n----\n\nnaïve".encode("utf-8")


class TestFilename:

    @pytest.mark.parametrize("title,fmt,expected", [
        ("Setup Guide", ExportFormat.FLAT_TEXT, "setup_guide.txt"),
        ("Setup Guide", ExportFormat.PAGINATED_DOCUMENT, "setup_guide.pdf"),
        ("VPN: Step-by-Step (v2)!", ExportFormat.PAGINATED_DOCUMENT, "vpn__step_by_step__v2__.pdf"),
        ("Café 2024", ExportFormat.FLAT_TEXT, "caf__2024.txt"),
        ("ABC", ExportFormat.FLAT_TEXT, "abc.txt"),
    ])
    def test_unsafe_characters_replaced(self, title, fmt, expected):
        assert make_filename(title, fmt) == expected

    @pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
    def test_missing_title_rejected(self, title):
        with pytest.raises(MissingTitleError) as exc_info:
            make_filename(title, ExportFormat.FLAT_TEXT)
        assert exc_info.value.kind == "MissingTitle"


class TestPdf:

    def _pages(self, geometry, count):
        return [Page(index=i + 1, image=Image.new("RGB", (geometry.width, geometry.page_height), "white"))
                for i in range(count)]

    def test_one_pdf_page_per_page(self, small_geometry):
        artifact = serialize_pdf("Setup Guide", self._pages(small_geometry, 3), small_geometry)
        assert artifact.filename == "setup_guide.pdf"
        assert artifact.media_type == "application/pdf"
        assert artifact.data.startswith(b"%PDF")
        assert b"/Count 3" in artifact.data

    def test_resolution_maps_width_to_a4(self, geometry):
        width_pt = geometry.width * 72 / geometry.resolution
        height_pt = geometry.page_height * 72 / geometry.resolution
        assert width_pt == pytest.approx(210 / 25.4 * 72)
        assert height_pt == pytest.approx(297 / 25.4 * 72, abs=0.5)

    def test_pages_without_images_rejected(self, small_geometry):
        with pytest.raises(ValueError):
            serialize_pdf("Title", [], small_geometry)

    def test_missing_title_rejected_before_encoding(self, small_geometry):
        with pytest.raises(MissingTitleError):
            serialize_pdf(" ", self._pages(small_geometry, 1), small_geometry)
