"""Practice session — the state machine a host application drives.

WHY: The core modules are pure functions; a UI needs one object that
holds the passage, the difficulty, the hidden words, and verse
progress, and reacts to button presses (harder, easier, show all,
complete verse, grade review). Keeping that logic here means a web
page, a terminal, or a test can drive identical behavior.

HOW: PracticeSession prepares the passage once (optional sections →
tokens → segments → segment word indices) and keeps a small mutable
state. Every action delegates to core functions and replaces state
values; derived values (due queue, hidden flags) are recomputed on
demand from that state and the injected clock.

RULES:
- Percentage mode hides deleted_indices; segment mode hides the words
  of the current segment only
- harder/easier move the percentage by PERCENTAGE_STEP, clamped to
  [min_percentage, 100], and always hide everything again (show_all off)
- Reaching VERSE_MODE_THRESHOLD via harder switches to segment mode
  once, starting at the first segment; the user may toggle back
- While reviewing, complete_segment only arms quality feedback;
  submit_review_quality applies it
- Clock and rng are injected; system_clock and the global random module
  are used only when none is passed
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from cloze_memorizer import config
from cloze_memorizer.core.deletion import (
    add_more_deletions,
    calculate_deletion_count,
    calculate_min_percentage,
    remove_deletions,
    select_words_to_delete,
)
from cloze_memorizer.core.ir import (
    ClozeView,
    PassageKind,
    ProgressMap,
    Quality,
    Segment,
    SegmentChoice,
    Token,
)
from cloze_memorizer.core.optional import prepare_text
from cloze_memorizer.core.scheduler import (
    choose_next_segment,
    get_due_reviews,
    record_completion,
    record_review,
    system_clock,
)
from cloze_memorizer.core.segmenter import map_segment_word_indices, parse_verses
from cloze_memorizer.core.tokenizer import count_words, tokenize
from cloze_memorizer.session.models import ProgressRecord

logger = logging.getLogger(__name__)


class PracticeSession:
    """Interactive cloze practice over one passage.

    Args:
        text: Raw passage text, optional markers included.
        kind: "scripture" or "poetry".
        include_optional: Practice optional sections too.
        percentage: Starting deletion percentage (config.DEFAULT_PERCENTAGE
            when omitted).
        deleted_indices: Persisted hidden indices; rebuilt when empty.
        verse_progress: Persisted progress keyed by segment number.
        clock: Callable returning epoch milliseconds.
        rng: Random source with randrange() and shuffle().
    """

    def __init__(
        self,
        text: str,
        kind: Union[PassageKind, str] = PassageKind.SCRIPTURE,
        include_optional: bool = False,
        percentage: Optional[int] = None,
        deleted_indices: Optional[Sequence[int]] = None,
        verse_progress: Optional[ProgressMap] = None,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[Any] = None,
    ) -> None:
        try:
            self.kind = PassageKind(kind)
        except ValueError:
            logger.warning("Unknown passage kind %r, treating as scripture", kind)
            self.kind = PassageKind.SCRIPTURE
        self.include_optional = include_optional
        self.text = prepare_text(text, include_optional)
        self._clock = clock or system_clock
        self._rng = rng

        self.tokens: List[Token] = tokenize(self.text)
        self.total_words = count_words(self.tokens)
        self.min_percentage = calculate_min_percentage(self.total_words)

        all_segments = parse_verses(self.text, self.kind)
        self.title: Optional[Segment] = next((s for s in all_segments if s.is_title), None)
        self.segments: List[Segment] = [s for s in all_segments if not s.is_title]
        self.segment_word_indices: Dict[int, List[int]] = map_segment_word_indices(
            self.tokens, all_segments,
        )

        if percentage is None:
            percentage = config.DEFAULT_PERCENTAGE
        self.percentage = percentage
        self.deleted_indices: List[int] = sorted(set(deleted_indices or []))
        self.verse_progress: ProgressMap = dict(verse_progress or {})
        self.show_all = False
        self.segment_mode = percentage >= config.VERSE_MODE_THRESHOLD
        self.current_index = 0
        self.reviewing: Optional[int] = None
        self.awaiting_quality: Optional[int] = None

        if not self.deleted_indices and self.tokens:
            self.deleted_indices = select_words_to_delete(
                self.tokens, self.percentage, self.total_words,
            )

        logger.debug(
            "Session ready: %d words, %d segments, %d%% hidden",
            self.total_words, len(self.segments), self.percentage,
        )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @classmethod
    def from_record(
        cls,
        text: str,
        record: Optional[ProgressRecord],
        **kwargs: Any,
    ) -> "PracticeSession":
        """Restore a session from a stored record (None for a fresh start)."""
        if record is None:
            return cls(text, **kwargs)
        return cls(
            text,
            percentage=record.deletion_percentage,
            deleted_indices=record.deleted_indices,
            verse_progress=record.progress_map(),
            **kwargs,
        )

    def to_record(self) -> ProgressRecord:
        return ProgressRecord.from_state(
            self.percentage, self.deleted_indices, self.verse_progress,
        )

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def segment_numbers(self) -> List[int]:
        return [s.number for s in self.segments]

    @property
    def current_segment(self) -> Optional[Segment]:
        if 0 <= self.current_index < len(self.segments):
            return self.segments[self.current_index]
        return None

    def due_queue(self) -> List[int]:
        """Due segment numbers at the current clock time, earliest first."""
        return get_due_reviews(self.verse_progress, self._clock())

    def is_word_hidden(self, word_index: int) -> bool:
        """Whether a word is blanked right now (show_all ignored).

        Percentage mode hides deleted_indices; segment mode hides the
        words of the current segment.
        """
        if self.segment_mode:
            segment = self.current_segment
            if segment is None:
                return False
            return word_index in self.segment_word_indices.get(segment.number, ())
        return word_index in self._deleted_set()

    def _deleted_set(self) -> set:
        return set(self.deleted_indices)

    def hidden_flags(self) -> List[bool]:
        """Per word index, whether the word is hidden."""
        if self.segment_mode:
            return [self.is_word_hidden(i) for i in range(self.total_words)]
        deleted = self._deleted_set()
        return [i in deleted for i in range(self.total_words)]

    def view(self) -> ClozeView:
        """Snapshot for formatters: tokens, hidden flags, show_all."""
        return ClozeView(tokens=self.tokens, hidden=self.hidden_flags(), show_all=self.show_all)

    # -------------------------------------------------------------------------
    # Percentage mode actions
    # -------------------------------------------------------------------------

    def harder(self) -> None:
        """Hide PERCENTAGE_STEP more percent of the words."""
        new_percentage = min(config.MAX_PERCENTAGE, self.percentage + config.PERCENTAGE_STEP)
        target = calculate_deletion_count(self.total_words, new_percentage)
        self.deleted_indices = add_more_deletions(
            self.tokens, self.deleted_indices, target, rng=self._rng,
        )
        self.percentage = new_percentage
        self.show_all = False

        if new_percentage >= config.VERSE_MODE_THRESHOLD and not self.segment_mode:
            logger.info("Reached %d%%, switching to segment mode", new_percentage)
            self.segment_mode = True
            self.current_index = 0

    def easier(self) -> None:
        """Reveal PERCENTAGE_STEP percent of the words, down to min_percentage."""
        new_percentage = max(self.min_percentage, self.percentage - config.PERCENTAGE_STEP)
        target = calculate_deletion_count(self.total_words, new_percentage)
        self.deleted_indices = remove_deletions(self.deleted_indices, target, rng=self._rng)
        self.percentage = new_percentage
        self.show_all = False

    def toggle_show_all(self) -> None:
        self.show_all = not self.show_all

    def toggle_segment_mode(self) -> None:
        self.segment_mode = not self.segment_mode
        self.reviewing = None
        self.awaiting_quality = None
        logger.info("Segment mode %s", "on" if self.segment_mode else "off")

    # -------------------------------------------------------------------------
    # Segment mode actions
    # -------------------------------------------------------------------------

    def complete_segment(self) -> None:
        """Mark the current segment as recited.

        During a review this only asks for a quality grade. Otherwise the
        completion is recorded and the cursor moves via choose_next_segment.
        """
        segment = self.current_segment
        if segment is None:
            return

        if self.reviewing is not None:
            self.awaiting_quality = segment.number
            return

        now = self._clock()
        self.verse_progress = record_completion(self.verse_progress, segment.number, now)
        first_time = self.verse_progress[segment.number].completions == 1
        self._move_to(choose_next_segment(
            self.verse_progress,
            self.segment_numbers,
            self.current_index,
            just_completed_first_time=first_time,
            now=now,
            exclude=[segment.number],
        ))

    def submit_review_quality(self, quality: Union[Quality, str]) -> None:
        """Grade the pending review (again / hard / easy)."""
        if self.awaiting_quality is None:
            return

        number = self.awaiting_quality
        now = self._clock()
        self.verse_progress = record_review(self.verse_progress, number, quality, now)
        self.awaiting_quality = None
        self.reviewing = None

        self._move_to(choose_next_segment(
            self.verse_progress,
            self.segment_numbers,
            self.current_index,
            just_completed_first_time=False,
            now=now,
            exclude=[number],
        ))

    def start_review(self, number: int) -> None:
        """Jump to segment ``number`` and review it."""
        self.reviewing = number
        if number in self.segment_numbers:
            self.current_index = self.segment_numbers.index(number)

    def previous_segment(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1

    def _move_to(self, choice: SegmentChoice) -> None:
        self.current_index = choice.index
        self.reviewing = choice.reviewing
        if choice.reviewing is not None:
            logger.debug("Reviewing segment %d", choice.reviewing)
