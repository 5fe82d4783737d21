"""Word tokenizer with stable word indices and markdown style flags.

WHY: Every other component addresses words by index — the hidden set
is a list of word indices, verses map to word indices, the renderer
asks "is word 17 hidden?". The tokenizer is the single place those
indices are assigned, so it must be a pure function of the text.

HOW: One regex alternates between a word pattern (ASCII letters with
at most one internal apostrophe) and a run of everything else. Word
matches get consecutive indices. A separate pass finds closed
**bold** and *italic* spans and flags the words inside them.

RULES:
- Word: [A-Za-z]+ optionally followed by ' and more letters
  ("didn't" is one word; in "'tis" the leading ' is separator text)
- Every maximal non-word run becomes exactly one "other" token
- Lossless: joining all token values reproduces the input text
- word_index counts word tokens from 0, strictly left to right
- Asterisks remain in "other" tokens; styling never shifts indices
- Style spans are closed pairs on a single line; unclosed markers style nothing
- A marker with whitespace on its inner side is a literal asterisk ("a * b * c")
"""

from __future__ import annotations

import re
from typing import List, Tuple

from cloze_memorizer.core.ir import Token

_TOKEN_RE = re.compile(r"([a-zA-Z]+(?:'[a-zA-Z]+)?)|([^a-zA-Z]+)")

# Closed emphasis spans, confined to one line. The opening marker must be
# followed by, and the closing marker preceded by, a non-space character.
_BOLD_RE = re.compile(r"\*\*(?!\*)(?=\S)([^\n]+?)(?<=\S)(?<!\*)\*\*")
_ITALIC_RE = re.compile(r"(?<!\*)\*(?!\*)(?=\S)([^\n*]+?)(?<=\S)\*(?!\*)")


def _style_ranges(text: str, pattern: re.Pattern) -> List[Tuple[int, int]]:
    """Character ranges of the content inside each emphasis span."""
    return [(m.start(1), m.end(1)) for m in pattern.finditer(text)]


def _in_ranges(start: int, end: int, ranges: List[Tuple[int, int]]) -> bool:
    for range_start, range_end in ranges:
        if start >= range_start and end <= range_end:
            return True
    return False


def tokenize(text: str) -> List[Token]:
    """Split text into word and non-word tokens.

    Args:
        text: Processed passage text (optional sections already resolved).

    Returns:
        Tokens in source order. Word tokens carry word_index 0..N-1.
    """
    tokens: List[Token] = []
    bold_ranges = _style_ranges(text, _BOLD_RE) if "**" in text else []
    italic_ranges = _style_ranges(text, _ITALIC_RE) if "*" in text else []

    word_index = 0
    for match in _TOKEN_RE.finditer(text):
        if match.group(1):
            start, end = match.span(1)
            tokens.append(Token(
                type="word",
                value=match.group(1),
                word_index=word_index,
                bold=_in_ranges(start, end, bold_ranges),
                italic=_in_ranges(start, end, italic_ranges),
            ))
            word_index += 1
        else:
            tokens.append(Token(type="other", value=match.group(2)))

    return tokens


def word_tokens(tokens: List[Token]) -> List[Token]:
    """The word tokens only, in order."""
    return [t for t in tokens if t.is_word]


def count_words(tokens: List[Token]) -> int:
    """Number of word tokens — the size of the word-index domain."""
    return sum(1 for t in tokens if t.is_word)
