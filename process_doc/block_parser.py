"""
Block Parser — Classifies each line of a generated process description
into a heading, numbered step, paragraph or blank block.

Single pass, no lookahead. The only state is whether a numbered-step run
is currently open, held locally for the duration of one parse call.
"""

import logging
import re
from enum import Enum
from typing import Iterable, Iterator

from .models import Blank, Block, Heading, ListItem, Paragraph

logger = logging.getLogger(__name__)

HEADING_MARKER = "## "
ORDERED_ITEM_PATTERN = re.compile(r"^[0-9]+\.\s*")


class ParserState(Enum):
    IDLE = "idle"
    IN_LIST = "in_list"


def iter_blocks(lines: Iterable[str]) -> Iterator[Block]:
    """
    Yield one block per source line, in source order.

    Never raises: any line that is not a heading, numbered step or blank
    line becomes a paragraph. Source step numbers are discarded; each
    item carries its 1-based position within the current run instead.
    """
    state = ParserState.IDLE
    position = 0

    for raw_line in lines:
        line = raw_line.rstrip("\r\n")

        if line.startswith(HEADING_MARKER):
            state = ParserState.IDLE
            yield Heading(text=line[len(HEADING_MARKER):])
            continue

        match = ORDERED_ITEM_PATTERN.match(line)
        if match:
            if state is ParserState.IN_LIST:
                position += 1
            else:
                state = ParserState.IN_LIST
                position = 1
            yield ListItem(text=line[match.end():], position=position)
            continue

        state = ParserState.IDLE
        if not line.strip():
            yield Blank()
        else:
            yield Paragraph(text=line)


def parse_blocks(text: str) -> list[Block]:
    blocks = list(iter_blocks(text.split("\n")))
    logger.debug(f"Parsed {len(blocks)} blocks "
                 f"({sum(isinstance(b, ListItem) for b in blocks)} list items)")
    return blocks


def group_runs(blocks: Iterable[Block]) -> Iterator[Block | list[ListItem]]:
    """
    Collapse each maximal run of adjacent list items into a list.

    Grouping depends only on adjacency, so a run opening the document is
    treated exactly like one further down. Blank blocks are passed through
    so that they still separate runs.
    """
    current_run: list[ListItem] = []
    for block in blocks:
        if isinstance(block, ListItem):
            if block.position == 1 and current_run:
                yield current_run
                current_run = []
            current_run.append(block)
            continue
        if current_run:
            yield current_run
            current_run = []
        yield block
    if current_run:
        yield current_run
