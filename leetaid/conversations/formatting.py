"""
Content Formatting

Splits message content into plain-text and fenced-code segments for display.
"""

from dataclasses import dataclass
from typing import Literal

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

FENCE = "```"


@dataclass(frozen=True)
class ContentSegment:
    """A run of message content rendered either as prose or as code."""

    kind: Literal["text", "code"]
    value: str


def split_content(content: str) -> list[ContentSegment]:
    """
    Split content into alternating text and code segments.

    Fenced regions are located by scanning for pairs of triple-backtick
    delimiters. A trailing delimiter without a partner is kept, together
    with everything after it, as plain text.

    Example:
        >>> split_content("intro ```code block``` outro")
        [ContentSegment(kind='text', value='intro '),
         ContentSegment(kind='code', value='code block'),
         ContentSegment(kind='text', value=' outro')]
    """
    segments: list[ContentSegment] = []
    text_start = 0
    position = 0

    while True:
        opening = content.find(FENCE, position)
        if opening == -1:
            break
        closing = content.find(FENCE, opening + len(FENCE))
        if closing == -1:
            break

        if opening > text_start:
            segments.append(ContentSegment("text", content[text_start:opening]))
        segments.append(ContentSegment("code", content[opening + len(FENCE) : closing]))

        position = closing + len(FENCE)
        text_start = position

    if text_start < len(content):
        segments.append(ContentSegment("text", content[text_start:]))

    return segments


def code_language(value: str) -> tuple[str | None, str]:
    """
    Split an info string (e.g. ``python``) off a code segment.

    The first line only counts as an info string when it sits directly
    against the opening fence and names a known lexer; otherwise it is
    treated as code and left in place.
    """
    first_line, newline, rest = value.partition("\n")
    if not newline or not first_line or first_line != first_line.strip():
        return None, value
    try:
        get_lexer_by_name(first_line)
    except ClassNotFound:
        return None, value
    return first_line, rest
