"""Intermediate representation dataclasses for passages and progress.

WHY: A passage is raw text with no structure. The deletion selector,
the segmenter, the scheduler, and every renderer each need words,
verses, and progress — but in different groupings. The IR provides a
single, well-typed form that all of them share, decoupling text
processing from presentation and persistence.

HOW: Small dataclasses and string enums:
  Token          — one word or run of separator text, with its word index
  Segment        — one verse (scripture) or couplet (poetry), or a title
  ContentPart    — a stretch of text flagged as optional or not
  VerseProgress  — spaced-repetition state for one segment
  SegmentChoice  — which segment to practice next, and whether as review
  ClozeView      — tokens plus the hidden flag per word, ready to render

RULES:
- Token.word_index is set only for word tokens; indices run 0..N-1
- Segment.number is 0 for titles; verse/couplet numbers start at 1
- All VerseProgress times are integer epoch milliseconds
- interval is a duration in milliseconds, never a timestamp
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional


class PassageKind(str, enum.Enum):
    """How a passage is divided into segments.

    RULES:
    - scripture: numbered verses ("1 In the beginning ...")
    - poetry: couplets, two lines per segment
    """

    SCRIPTURE = "scripture"
    POETRY = "poetry"


class Quality(str, enum.Enum):
    """Self-graded recall quality submitted after reviewing a segment."""

    AGAIN = "again"
    HARD = "hard"
    EASY = "easy"


@dataclass
class Token:
    """A word or a maximal run of non-word text.

    WHY: Rendering, hiding, and verse mapping all address words by
    position. The tokenizer assigns each word a stable index so the
    hidden set can be persisted as a plain list of integers.

    RULES:
    - type: "word" or "other"
    - value: the exact source text; concatenating all values
      reproduces the tokenized text
    - word_index: zero-based position among word tokens, None for "other"
    - bold / italic: presentational flags from **...** / *...* spans
    """

    type: str  # "word" or "other"
    value: str
    word_index: Optional[int] = None
    bold: bool = False
    italic: bool = False

    @property
    def is_word(self) -> bool:
        return self.type == "word"


@dataclass
class Segment:
    """A verse or couplet — the unit of segment-at-a-time practice.

    RULES:
    - number: 0 for a title, otherwise the verse/couplet number
    - content: the raw lines of the segment joined with "\\n"
    - is_title: the heading line, never practiced or scheduled
    - is_couplet: True for poetry segments
    """

    number: int
    content: str
    is_title: bool = False
    is_couplet: bool = False


@dataclass
class ContentPart:
    """A contiguous piece of passage text, optional or not."""

    content: str
    optional: bool


@dataclass
class VerseProgress:
    """Spaced-repetition state for one segment.

    WHY: Each verse moves from learning (first passes) into a review
    rotation with growing intervals. Everything the scheduler needs
    lives here so a session can be rebuilt from the persisted map.

    RULES:
    - completions: number of completed passes, >= 0
    - interval: current review interval in ms (0 while learning)
    - next_review: epoch ms when the segment becomes due, None while learning
    - last_completed: epoch ms of the last completion or review
    - last_reviewed: epoch ms of the last graded review, if any
    """

    completions: int
    interval: int
    next_review: Optional[int]
    last_completed: int
    last_reviewed: Optional[int] = None


ProgressMap = Dict[int, VerseProgress]
"""Verse progress keyed by segment number."""


@dataclass
class SegmentChoice:
    """Outcome of picking the next segment to practice.

    RULES:
    - index: position in the practicable (non-title) segment list
    - reviewing: segment number when the choice enters a review, else None
    """

    index: int
    reviewing: Optional[int] = None


@dataclass
class ClozeView:
    """Everything a renderer needs to draw the passage.

    RULES:
    - hidden[i] tells whether word index i is currently blanked
    - show_all reveals every hidden word (hidden flags stay intact)
    """

    tokens: List[Token]
    hidden: List[bool] = field(default_factory=list)
    show_all: bool = False

    def is_hidden(self, word_index: int) -> bool:
        if self.show_all:
            return False
        if 0 <= word_index < len(self.hidden):
            return self.hidden[word_index]
        return False
