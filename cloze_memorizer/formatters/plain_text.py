"""Plain cloze formatter: hidden words become underscores.

WHY: The simplest blank that still hints at word length, readable in
any terminal.

RULES:
- One underscore per character of the hidden word ("didn't" -> "______")
"""

from __future__ import annotations

from cloze_memorizer.formatters.base import BaseFormatter


class PlainTextFormatter(BaseFormatter):
    """Blanks hidden words with same-length underscore runs."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def mask_word(self, word: str) -> str:
        return "_" * len(word)
