"""
Inline Styler — Splits a block's text into plain and emphasized spans.

Only the paired ``**`` delimiter is recognised. Matching is non-greedy and
non-nesting; an unpaired delimiter stays in the text as literal characters.
"""

import re

from .models import Emphasized, Plain, Span

EMPHASIS_DELIMITER = "**"
EMPHASIS_PATTERN = re.compile(r"\*\*(.*?)\*\*", flags=re.DOTALL)


def style_spans(text: str) -> list[Span]:
    spans: list[Span] = []
    last_end = 0
    for match in EMPHASIS_PATTERN.finditer(text):
        if match.start() > last_end:
            spans.append(Plain(text[last_end:match.start()]))
        spans.append(Emphasized(match.group(1)))
        last_end = match.end()
    if last_end < len(text):
        spans.append(Plain(text[last_end:]))
    return spans


def visible_text(spans: list[Span]) -> str:
    return "".join(span.text for span in spans)
