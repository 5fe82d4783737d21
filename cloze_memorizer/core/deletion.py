"""Hidden-word selection for percentage-based cloze practice.

WHY: The learner sets a difficulty percentage; that many words of the
passage are hidden. The base selection must be reproducible — the
percentage is the persisted state, and reloading it must rebuild the
same hidden set. "Harder" and "easier" clicks are one-shot actions that
grow or shrink the current set without reshuffling what the learner
has already been practicing.

HOW: select_words_to_delete draws from a seeded sine hash keyed by
(pick number, percentage), removing each pick from a shrinking pool.
add_more_deletions and remove_deletions use an injected random source
so repeated clicks show no visible pattern and tests stay deterministic.

RULES:
- Target count: max(MIN_DELETED_WORDS, round_half_up(total * pct / 100)),
  clamped to the number of words
- Seed for pick i: i + percentage * 1000, indexing into the current pool
- Every function returns a new sorted list with no duplicates
- add_more_deletions keeps every current index; remove_deletions keeps a subset
- No range validation of the percentage here; the session clamps it
"""

from __future__ import annotations

import logging
import math
import random
from typing import Any, List, Optional, Sequence

from cloze_memorizer import config
from cloze_memorizer.core.ir import Token

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (5.5 -> 6, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def seeded_random(seed: float) -> float:
    """Deterministic hash of ``seed`` into [0, 1).

    Fractional part of sin(seed) * 10000. Not uniform, but identical
    seeds always give identical values, which is all selection needs.
    """
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def calculate_deletion_count(total_words: int, percentage: float) -> int:
    """Number of words to hide at ``percentage`` (not clamped to total)."""
    return max(config.MIN_DELETED_WORDS, round_half_up(total_words * percentage / 100))


def calculate_min_percentage(total_words: int) -> int:
    """Lowest percentage the "easier" button may reach for a passage.

    RULES:
    - Empty passage -> PERCENTAGE_STEP
    - Otherwise enough to hide max(2, min(10, ceil(5% of words))) words,
      and never below PERCENTAGE_STEP
    """
    if total_words == 0:
        return config.PERCENTAGE_STEP
    min_words = max(config.MIN_DELETED_WORDS, min(10, -(-total_words * 5 // 100)))
    return max(config.PERCENTAGE_STEP, -(-min_words * 100 // total_words))


def _word_indices(tokens: Sequence[Token]) -> List[int]:
    return [t.word_index for t in tokens if t.is_word]


def select_words_to_delete(
    tokens: Sequence[Token],
    percentage: float,
    total_words: int,
) -> List[int]:
    """Pick the hidden word indices for a percentage, deterministically.

    Args:
        tokens: Passage tokens.
        percentage: Deletion percentage (0-100).
        total_words: Word count used for the target size.

    Returns:
        Sorted word indices. The same (percentage, total_words, tokens)
        always gives the same result.
    """
    available = _word_indices(tokens)
    count = min(calculate_deletion_count(total_words, percentage), len(available))

    selected: List[int] = []
    for i in range(count):
        if not available:
            break
        seed = i + percentage * 1000
        pick = min(int(math.floor(seeded_random(seed) * len(available))), len(available) - 1)
        selected.append(available.pop(pick))

    return sorted(selected)


def add_more_deletions(
    tokens: Sequence[Token],
    current_indices: Sequence[int],
    target_count: int,
    rng: Optional[Any] = None,
) -> List[int]:
    """Grow the hidden set to ``target_count`` without dropping any index.

    RULES:
    - target_count <= len(current_indices) -> copy of the input, sorted
    - Adds min(target - current, available) indices sampled uniformly
      without replacement from words not yet hidden
    - rng: object with randrange(); defaults to the random module
    """
    rng = rng or random
    current = sorted(set(current_indices))
    current_set = set(current)
    available = [i for i in _word_indices(tokens) if i not in current_set]

    to_add = min(target_count - len(current), len(available))
    if to_add <= 0:
        return current

    added: List[int] = []
    for _ in range(to_add):
        added.append(available.pop(rng.randrange(len(available))))

    logger.debug("Added %d deletions (%d -> %d)", len(added), len(current), len(current) + len(added))
    return sorted(current + added)


def remove_deletions(
    current_indices: Sequence[int],
    target_count: int,
    rng: Optional[Any] = None,
) -> List[int]:
    """Shrink the hidden set to ``target_count`` by dropping random indices.

    RULES:
    - target_count >= len(current_indices) -> copy of the input, sorted
    - rng: object with shuffle(); defaults to the random module
    """
    rng = rng or random
    current = sorted(set(current_indices))
    if target_count >= len(current):
        return current

    to_remove = len(current) - max(0, target_count)
    shuffled = list(current)
    rng.shuffle(shuffled)

    logger.debug("Removed %d deletions (%d -> %d)", to_remove, len(current), len(current) - to_remove)
    return sorted(shuffled[to_remove:])
