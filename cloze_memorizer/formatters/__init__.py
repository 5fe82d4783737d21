"""Cloze text formatter registry — pluggable rendering.

WHY: The CLI (and any other text front end) needs a single lookup to
find the right renderer by name. A central dict makes it trivial to add
new styles: create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["plain_text"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cloze_memorizer.formatters.first_letters import FirstLettersFormatter
from cloze_memorizer.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from cloze_memorizer.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "first_letters": FirstLettersFormatter,
}
