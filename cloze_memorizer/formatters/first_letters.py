"""First-letter cloze formatter: hidden words keep their initial.

WHY: The first letter is the classic memorization cue — enough to
trigger recall without giving the word away. Useful as an easier mode
at high deletion percentages.

HOW: Keeps the first character and blanks the rest with underscores.
An apostrophe inside a contraction is kept so "didn't" reads "d___'_".

RULES:
- First character kept, remaining letters become "_"
- Apostrophes are kept in place
"""

from __future__ import annotations

from cloze_memorizer.formatters.base import BaseFormatter


class FirstLettersFormatter(BaseFormatter):
    """Blanks hidden words except for their first letter."""

    @property
    def name(self) -> str:
        return "First Letters"

    def mask_word(self, word: str) -> str:
        if not word:
            return word
        rest = "".join("'" if ch == "'" else "_" for ch in word[1:])
        return word[0] + rest
