"""Abstract base formatter for rendering a cloze view as text.

WHY: Every text style consumes the same ClozeView (tokens plus hidden
flags) but blanks words differently. This base class enforces one
interface so the CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with a ``name`` property and a
``mask_word()`` hook. ``format()`` walks the tokens once, copying
separator text verbatim and passing hidden words through the hook.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``mask_word()``
- Non-word tokens are emitted unchanged, so layout and line breaks survive
- show_all on the view disables masking entirely
- Styling flags (bold/italic) are ignored; asterisks are already in the text
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from cloze_memorizer.core.ir import ClozeView


class BaseFormatter(ABC):
    """Abstract base for all cloze text formatters.

    To add a new style:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement mask_word() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable style name, e.g. 'Plain Text'."""

    @abstractmethod
    def mask_word(self, word: str) -> str:
        """Replacement text for a hidden word."""

    def format(self, view: ClozeView) -> str:
        """Render the passage with hidden words masked.

        Args:
            view: Tokens, hidden flags, and the show_all switch.

        Returns:
            The passage text with each hidden word replaced by mask_word().
        """
        parts: List[str] = []
        for token in view.tokens:
            if token.is_word and view.is_hidden(token.word_index):
                parts.append(self.mask_word(token.value))
            else:
                parts.append(token.value)
        return "".join(parts)
