"""Optional passage sections marked with [OPTIONAL]...[/OPTIONAL].

WHY: Authors mark stretches of a passage that learners may skip (an
extra stanza, a bracketed verse). Whether they are practiced is a user
choice, so the markers are resolved before tokenizing: either the whole
span goes, or only the marker literals go.

HOW: A non-greedy regex matches each open..close pair left to right.
Anything left over after balanced pairs is handled by a fixed fallback
rule so malformed input still produces deterministic output.

RULES:
- Balanced pairs: minimal span from an open marker to the next close marker
- Markers do not nest; "[OPTIONAL]a [OPTIONAL] b[/OPTIONAL] c" removes
  up to the first close marker
- Unmatched open marker: the optional span runs to the end of the text
- Stray close marker: dropped, surrounding text kept
- Never raises on malformed input
"""

from __future__ import annotations

import logging
import re
from typing import List

from cloze_memorizer.core.ir import ContentPart

logger = logging.getLogger(__name__)

OPTIONAL_OPEN = "[OPTIONAL]"
OPTIONAL_CLOSE = "[/OPTIONAL]"

_OPTIONAL_RE = re.compile(r"\[OPTIONAL\](.*?)\[/OPTIONAL\]", re.DOTALL)


def has_optional_sections(text: str) -> bool:
    """True when the text contains at least one open marker."""
    return OPTIONAL_OPEN in text


def _warn_if_unbalanced(text: str) -> None:
    opens = text.count(OPTIONAL_OPEN)
    closes = text.count(OPTIONAL_CLOSE)
    if opens != closes:
        logger.warning(
            "Unbalanced optional markers (%d open, %d close); "
            "unmatched sections run to end of text", opens, closes,
        )


def remove_optional_sections(text: str) -> str:
    """Delete every optional span, markers included.

    WHY: When the learner skips optional content, it must vanish before
    tokenizing so word indices only cover practiced text.

    HOW: Removes balanced pairs with the non-greedy regex, then cuts the
    text at any remaining open marker and drops stray close markers.

    RULES:
    - "A [OPTIONAL]B[/OPTIONAL] C" -> "A  C" (surrounding spaces kept)
    - Unmatched open marker removes everything after it
    """
    _warn_if_unbalanced(text)
    result = _OPTIONAL_RE.sub("", text)
    dangling = result.find(OPTIONAL_OPEN)
    if dangling != -1:
        result = result[:dangling]
    return result.replace(OPTIONAL_CLOSE, "")


def strip_optional_markers(text: str) -> str:
    """Remove the marker literals but keep the optional content."""
    return text.replace(OPTIONAL_OPEN, "").replace(OPTIONAL_CLOSE, "")


def parse_content_with_optional(text: str) -> List[ContentPart]:
    """Split text into ordered optional / non-optional parts.

    WHY: A UI that shows optional content in a different style needs
    the pieces without losing any text.

    HOW: Walks the balanced-pair matches, emitting the plain text before
    each match and the captured content of the match. Trailing text
    after the last pair is scanned for an unmatched open marker.

    RULES:
    - Parts appear in source order and cover all non-marker text
    - Empty plain stretches are not emitted
    - Optional parts are emitted even when their content is empty
    """
    parts: List[ContentPart] = []

    def _add_plain(chunk: str) -> None:
        chunk = chunk.replace(OPTIONAL_CLOSE, "")
        if chunk:
            parts.append(ContentPart(content=chunk, optional=False))

    last_index = 0
    for match in _OPTIONAL_RE.finditer(text):
        _add_plain(text[last_index:match.start()])
        parts.append(ContentPart(content=match.group(1), optional=True))
        last_index = match.end()

    tail = text[last_index:]
    dangling = tail.find(OPTIONAL_OPEN)
    if dangling == -1:
        _add_plain(tail)
    else:
        _add_plain(tail[:dangling])
        parts.append(ContentPart(
            content=strip_optional_markers(tail[dangling:]),
            optional=True,
        ))

    return parts


def prepare_text(text: str, include_optional: bool = False) -> str:
    """Resolve optional sections — the first step of the text pipeline.

    RULES:
    - include_optional=True keeps optional content, strips markers
    - include_optional=False removes optional spans entirely
    """
    if include_optional:
        return strip_optional_markers(text)
    return remove_optional_sections(text)
