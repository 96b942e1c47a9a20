"""
Block parser unit tests
"""

import pytest

from process_doc.block_parser import group_runs, iter_blocks, parse_blocks
from process_doc.inline_styler import style_spans, visible_text
from process_doc.models import Blank, Heading, ListItem, Paragraph


class TestParseBlocks:

    def test_heading_marker_is_stripped(self):
        assert parse_blocks("## Step 1") == [Heading("Step 1")]

    def test_heading_needs_marker_and_space(self):
        assert parse_blocks("##Step") == [Paragraph("##Step")]
        assert parse_blocks("# Title") == [Paragraph("# Title")]

    def test_numbered_lines_form_one_run(self):
        blocks = parse_blocks("1. Open app\n2. Log in\n3. Click save\n\nDone.")
        assert blocks == [
            ListItem("Open app", 1),
            ListItem("Log in", 2),
            ListItem("Click save", 3),
            Blank(),
            Paragraph("Done."),
        ]

    def test_run_excludes_following_paragraph(self):
        grouped = list(group_runs(parse_blocks("1. a\n2. b\n3. c\n\nAfter")))
        assert grouped[0] == [ListItem("a", 1), ListItem("b", 2), ListItem("c", 3)]
        assert grouped[1:] == [Blank(), Paragraph("After")]

    def test_source_numbers_are_discarded(self):
        blocks = parse_blocks("7. first\n3. second\n42.third")
        assert [b.position for b in blocks] == [1, 2, 3]
        assert [b.text for b in blocks] == ["first", "second", "third"]

    @pytest.mark.parametrize("separator", ["## Heading", "A paragraph", "", "   "])
    def test_runs_never_merge_across_other_blocks(self, separator):
        blocks = parse_blocks(f"1. a\n2. b\n{separator}\n1. c")
        runs = [g for g in group_runs(blocks) if isinstance(g, list)]
        assert len(runs) == 2
        assert [item.position for item in runs[1]] == [1]

    def test_run_at_document_start_groups_like_mid_document_run(self):
        leading = [g for g in group_runs(parse_blocks("1. a\n2. b")) if isinstance(g, list)]
        middle = [g for g in group_runs(parse_blocks("Intro\n1. a\n2. b")) if isinstance(g, list)]
        assert leading == middle == [[ListItem("a", 1), ListItem("b", 2)]]

    @pytest.mark.parametrize("line", ["\u0661. step", "\uff11. step", "\u00b2. step"])
    def test_only_ascii_digits_start_a_step(self, line):
        assert parse_blocks(line) == [Paragraph(line)]

    def test_whitespace_only_line_is_blank(self):
        assert parse_blocks(" \t ") == [Blank()]

    def test_empty_body_is_single_blank(self):
        assert parse_blocks("") == [Blank()]

    def test_one_block_per_line_in_order(self):
        text = "## H\npara\n1. x\n\n**bold** line\n2. y"
        assert len(parse_blocks(text)) == len(text.split("\n"))

    def test_carriage_returns_are_dropped(self):
        assert parse_blocks("## Title\r\n1. one\r") == [Heading("Title"), ListItem("one", 1)]

    def test_iter_blocks_accepts_any_iterable(self):
        blocks = list(iter_blocks(iter(["1. a\n", "2. b\n"])))
        assert blocks == [ListItem("a", 1), ListItem("b", 2)]

    @pytest.mark.parametrize("line", [
        "**unterminated",
        "1.",
        "## ",
        "***",
        "| a | b |",
        "```code```",
        "- bullet",
        "\x00weird\x7f",
    ])
    def test_malformed_input_never_raises(self, line):
        blocks = parse_blocks(line)
        assert len(blocks) == 1


class TestMarkerRemoval:
    """Span text of each block equals the source line minus markers."""

    @pytest.mark.parametrize("line,expected", [
        ("## **Step** one", "Step one"),
        ("12. Press **Enter** twice", "Press Enter twice"),
        ("Plain text stays", "Plain text stays"),
        ("Odd **marker stays", "Odd **marker stays"),
    ])
    def test_visible_text(self, line, expected):
        (block,) = parse_blocks(line)
        assert visible_text(style_spans(block.text)) == expected
