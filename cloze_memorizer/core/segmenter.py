"""Verse and couplet segmentation, and segment-to-word-index mapping.

WHY: Once most of a passage is hidden, practice moves to one segment
at a time: a numbered verse for scripture, a pair of lines for poetry.
The renderer hides exactly the words of the current segment, so each
segment must be mapped onto the word indices of the full token stream.

HOW: Two line-based parsers build Segment lists. The mapper re-tokenizes
each segment's own text and walks the passage tokens with a cursor that
only moves forward, consuming matching words in sequence. Because the
cursor never goes back, a word repeated elsewhere in the passage is never
attributed to the wrong verse.

RULES:
- Scripture: a line starting with digits + whitespace opens a verse;
  all following lines (blank ones too) belong to it
- Scripture: the first non-blank line before any verse is title 0;
  verse numbers are the integers printed in the text
- Poetry: blank lines, bare optional markers, and "Act N ... Scene N"
  headings are dropped; lines pair up two at a time
- Poetry: a first line matching ^[A-Z].*\\d+ is an isolated title 0
- Couplets are numbered 1, 2, ... in document order
- Segments must be mapped in document order (forward-only cursor)
- A segment that cannot be fully matched yields a partial index list
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence

from cloze_memorizer.core.ir import PassageKind, Segment, Token
from cloze_memorizer.core.optional import OPTIONAL_CLOSE, OPTIONAL_OPEN
from cloze_memorizer.core.tokenizer import tokenize

logger = logging.getLogger(__name__)

_VERSE_START_RE = re.compile(r"^([0-9]+)\s")
_STAGE_HEADING_RE = re.compile(r"^[A-Z].*Act \d+.*Scene \d+")
_POETRY_TITLE_RE = re.compile(r"^[A-Z].*\d+")


def parse_scripture_verses(text: str) -> List[Segment]:
    """Split scripture text into an optional title and numbered verses.

    Example:
        "Title\\n\\n1 First verse" ->
        [Segment(0, "Title", is_title=True), Segment(1, "1 First verse")]
    """
    verses: List[Segment] = []
    current_number: int | None = None
    current_lines: List[str] = []

    for line in text.split("\n"):
        match = _VERSE_START_RE.match(line)
        if match:
            if current_number is not None:
                verses.append(Segment(number=current_number, content="\n".join(current_lines)))
            current_number = int(match.group(1))
            current_lines = [line]
        elif current_number is not None:
            current_lines.append(line)
        elif not verses and line.strip():
            verses.append(Segment(number=0, content=line, is_title=True))

    if current_number is not None:
        verses.append(Segment(number=current_number, content="\n".join(current_lines)))

    return verses


def _is_poetry_line(line: str) -> bool:
    trimmed = line.strip()
    return bool(
        trimmed
        and not _STAGE_HEADING_RE.match(trimmed)
        and trimmed != OPTIONAL_OPEN
        and trimmed != OPTIONAL_CLOSE
    )


def parse_couplets(text: str) -> List[Segment]:
    """Split poetry into couplets (pairs of non-blank lines).

    Example:
        "a\\nb\\nc\\nd" -> couplets 1 ("a\\nb") and 2 ("c\\nd")
    """
    lines = [line for line in text.split("\n") if _is_poetry_line(line)]
    couplets: List[Segment] = []

    start = 0
    if lines and _POETRY_TITLE_RE.match(lines[0]):
        couplets.append(Segment(number=0, content=lines[0], is_title=True))
        start = 1

    number = 1
    for i in range(start, len(lines), 2):
        pair = lines[i:i + 2]
        couplets.append(Segment(number=number, content="\n".join(pair), is_couplet=True))
        number += 1

    return couplets


def parse_verses(text: str, kind: PassageKind | str = PassageKind.SCRIPTURE) -> List[Segment]:
    """Segment a passage according to its kind.

    RULES:
    - "poetry" -> parse_couplets
    - anything else -> parse_scripture_verses
    """
    if kind == PassageKind.POETRY or kind == PassageKind.POETRY.value:
        return parse_couplets(text)
    return parse_scripture_verses(text)


def get_word_indices_for_verse(
    tokens: Sequence[Token],
    segment_text: str,
    start_search_index: int = 0,
) -> List[int]:
    """Find the word indices of a segment inside the passage tokens.

    WHY: The renderer hides "the words of verse 3", but verses are text
    while hiding works on word indices of the full passage.

    HOW: Tokenizes the segment, then walks ``tokens`` from
    ``start_search_index`` matching the segment's words in order. Tokens
    that do not match the next expected word are skipped.

    RULES:
    - Empty segment text -> []
    - Stops when the segment words or the token stream run out
    - A result shorter than the segment's word count means "not fully
      found" — callers treat it as not renderable, never as an error

    Args:
        tokens: Full passage token stream.
        segment_text: Raw text of the segment.
        start_search_index: Token position (not word index) to start from.

    Returns:
        Matched word indices in ascending order.
    """
    segment_words = [t.value for t in tokenize(segment_text) if t.is_word]
    indices: List[int] = []
    expected = 0

    position = max(0, start_search_index)
    while position < len(tokens) and expected < len(segment_words):
        token = tokens[position]
        if token.is_word and token.value == segment_words[expected]:
            indices.append(token.word_index)
            expected += 1
        position += 1

    return indices


def map_segment_word_indices(
    tokens: Sequence[Token],
    segments: Sequence[Segment],
) -> Dict[int, List[int]]:
    """Map every non-title segment number to its word indices.

    HOW: Processes segments in document order. After each segment, the
    search cursor moves just past the token holding its last matched
    word, so the next segment can only match later words.

    RULES:
    - Title segments are skipped
    - Unmatched segments map to [] and leave the cursor where it was
    """
    if not tokens or not segments:
        return {}

    token_position = {t.word_index: pos for pos, t in enumerate(tokens) if t.is_word}
    result: Dict[int, List[int]] = {}
    search_start = 0

    for segment in segments:
        if segment.is_title:
            continue
        indices = get_word_indices_for_verse(tokens, segment.content, search_start)
        result[segment.number] = indices
        if indices:
            search_start = token_position[indices[-1]] + 1
        expected = sum(1 for t in tokenize(segment.content) if t.is_word)
        if len(indices) < expected:
            logger.debug(
                "Segment %d matched %d of %d words", segment.number, len(indices), expected,
            )

    return result
