"""Short-term spaced repetition for verse-by-verse practice.

WHY: In verse mode the learner recites one segment at a time. A verse
completed twice enters a review rotation; reviews come back after
minutes, not days, because a memorization session is short. The order
in which verses are offered (re-confirm the previous verse, then due
reviews, then the next new verse) is what makes the session effective.

HOW: VerseProgress records per segment number. Pure functions compute
the next interval on a fixed ladder, the due queue, and the next
segment. Update functions return new records/maps; nothing is mutated.
``now`` is always an explicit argument; system_clock() is the default
clock that callers inject.

RULES:
- Learning: completions < 2; reviewable: completions >= 2
- Reaching exactly 2 completions sets interval 2 min, next_review now + 2 min
- Further plain completions advance one ladder rung ("easy")
- Review: again -> 1 min; hard -> stay on the rung at or above the
  current interval; easy (or unknown) -> one rung up, capped at 30 min
- Due: completions >= 2, next_review set and <= now
- Due queue: segment numbers ordered by next_review, stable on ties
"""

from __future__ import annotations

import time
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from cloze_memorizer.core.ir import ProgressMap, Quality, SegmentChoice, VerseProgress

# Review interval ladder in ms: 0, 1m, 2m, 5m, 10m, 20m, 30m
LADDER = (0, 60000, 120000, 300000, 600000, 1200000, 1800000)

INITIAL_INTERVAL = 0
AGAIN_INTERVAL = 60000
FIRST_REVIEW_INTERVAL = 120000
COMPLETIONS_FOR_REVIEW = 2


def system_clock() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def _ladder_index(current_interval: int) -> int:
    """Index of the smallest rung >= current_interval (last rung if none)."""
    for index, rung in enumerate(LADDER):
        if rung >= current_interval:
            return index
    return len(LADDER) - 1


def get_next_interval(quality: Union[Quality, str], current_interval: int) -> int:
    """Next review interval in ms for a graded review.

    Example:
        get_next_interval("easy", 120000) -> 300000
        get_next_interval("easy", 1800000) -> 1800000
        get_next_interval("again", 600000) -> 60000
    """
    index = _ladder_index(current_interval)
    if quality == Quality.AGAIN or quality == Quality.AGAIN.value:
        return AGAIN_INTERVAL
    if quality == Quality.HARD or quality == Quality.HARD.value:
        return LADDER[index]
    return LADDER[min(len(LADDER) - 1, index + 1)]


def is_verse_due(progress: Optional[VerseProgress], now: int) -> bool:
    """True when the segment is in review rotation and its time has come."""
    return bool(
        progress is not None
        and progress.next_review is not None
        and progress.next_review <= now
        and progress.completions >= COMPLETIONS_FOR_REVIEW
    )


def get_due_reviews(
    progress_map: Mapping[int, VerseProgress],
    now: int,
    exclude: Optional[Iterable[int]] = None,
) -> List[int]:
    """Due segment numbers, earliest next_review first.

    Safe to call as often as the host likes (e.g. once a second) — it
    only filters the map against ``now``.

    Example:
        {1: due at now-5000, 2: due at now-10000, 3: due at now-2000}
        -> [2, 1, 3]
    """
    skipped = set(exclude or ())
    due = [
        (progress.next_review, number)
        for number, progress in progress_map.items()
        if number not in skipped and is_verse_due(progress, now)
    ]
    due.sort(key=lambda item: item[0])
    return [number for _, number in due]


def create_initial_progress(now: int) -> VerseProgress:
    """Progress record for a segment completed for the first time."""
    return VerseProgress(
        completions=1,
        interval=INITIAL_INTERVAL,
        next_review=None,
        last_completed=now,
    )


def update_progress(
    current: VerseProgress,
    now: int,
    is_review: bool = False,
    quality: Union[Quality, str] = Quality.EASY,
) -> VerseProgress:
    """Apply one completion (or graded review) to a progress record.

    RULES:
    - completions always increases by 1
    - Review: interval from get_next_interval(quality), last_reviewed = now
    - Plain completion below 2: interval unchanged, next_review None
    - Plain completion reaching 2: FIRST_REVIEW_INTERVAL
    - Plain completion beyond 2: one rung up ("easy")
    - last_completed is always refreshed
    """
    completions = current.completions + 1
    interval = current.interval
    next_review: Optional[int] = None
    last_reviewed = current.last_reviewed

    if is_review:
        interval = get_next_interval(quality, current.interval)
        next_review = now + interval
        last_reviewed = now
    elif completions >= COMPLETIONS_FOR_REVIEW:
        if completions == COMPLETIONS_FOR_REVIEW:
            interval = FIRST_REVIEW_INTERVAL
        else:
            interval = get_next_interval(Quality.EASY, current.interval)
        next_review = now + interval

    return VerseProgress(
        completions=completions,
        interval=interval,
        next_review=next_review,
        last_completed=now,
        last_reviewed=last_reviewed,
    )


def record_completion(progress_map: Mapping[int, VerseProgress], number: int, now: int) -> ProgressMap:
    """New progress map with one plain completion of segment ``number``."""
    updated = dict(progress_map)
    current = progress_map.get(number)
    if current is None:
        updated[number] = create_initial_progress(now)
    else:
        updated[number] = update_progress(current, now)
    return updated


def record_review(
    progress_map: Mapping[int, VerseProgress],
    number: int,
    quality: Union[Quality, str],
    now: int,
) -> ProgressMap:
    """New progress map with a graded review of segment ``number``.

    A segment reviewed without any record is treated as freshly
    reviewable (2 completions, 2 minute interval).
    """
    current = progress_map.get(number)
    if current is None:
        current = VerseProgress(
            completions=COMPLETIONS_FOR_REVIEW,
            interval=FIRST_REVIEW_INTERVAL,
            next_review=None,
            last_completed=now,
        )
    updated = dict(progress_map)
    updated[number] = update_progress(current, now, is_review=True, quality=quality)
    return updated


def choose_next_segment(
    progress_map: Mapping[int, VerseProgress],
    segment_numbers: Sequence[int],
    current_index: int,
    just_completed_first_time: bool,
    now: int,
    exclude: Optional[Iterable[int]] = None,
) -> SegmentChoice:
    """Decide which segment to offer after a completion or review.

    WHY: During the first pass a learner completes verse N, then
    re-confirms verse N-1 before moving on; due reviews take priority
    over new material. Keeping the decision in one pure function makes
    the interplay of those rules testable without any UI state.

    HOW: Checks, in order:
      1. Step back — the segment was just completed for the first time
         and the previous segment has exactly one completion.
      2. Review — the earliest due segment present in segment_numbers.
      3. Advance — the next segment in document order, if any.
      4. Stay — the current index.

    Args:
        progress_map: Progress after the action was applied.
        segment_numbers: Practicable segment numbers in document order.
        current_index: Position of the segment just practiced.
        just_completed_first_time: The action raised completions to 1.
        now: Current time in epoch ms.
        exclude: Segment numbers not to offer as reviews (typically the
                 segment just practiced).

    Returns:
        SegmentChoice with the next index and, for reviews, the number.
    """
    if just_completed_first_time and current_index > 0:
        previous = progress_map.get(segment_numbers[current_index - 1])
        if previous is not None and previous.completions == 1:
            return SegmentChoice(index=current_index - 1)

    positions = {number: index for index, number in enumerate(segment_numbers)}
    for number in get_due_reviews(progress_map, now, exclude=exclude):
        if number in positions:
            return SegmentChoice(index=positions[number], reviewing=number)

    if current_index < len(segment_numbers) - 1:
        return SegmentChoice(index=current_index + 1)
    return SegmentChoice(index=current_index)


def time_until_due(progress: VerseProgress, now: int) -> Optional[int]:
    """Milliseconds until the segment is due (negative when overdue)."""
    if progress.next_review is None:
        return None
    return progress.next_review - now


def format_time_until(ms: int) -> str:
    """Human-readable countdown: "now", "42s", "3m 5s"."""
    if ms <= 0:
        return "now"
    seconds = ms // 1000
    minutes = seconds // 60
    if minutes > 0:
        return "{}m {}s".format(minutes, seconds % 60)
    return "{}s".format(seconds)

