"""Shared test fixtures for the cloze_memorizer test suite.

WHY: Several test modules need the same sample passages and a clock
and random source they control. Centralizing them here avoids
duplication and keeps every scheduler/session test deterministic.

HOW: Plain string constants for passages, a FakeClock with an
``advance()`` helper, and a seeded random.Random per test.

RULES:
- Passages are small enough to reason about word indices by hand
- FakeClock starts at a fixed epoch ms value, never the wall clock
- Each test gets a fresh clock and rng (no shared mutable state)
- Difficulty tuning is reset to its defaults around every test
"""

import random

import pytest

from cloze_memorizer import config


TEN_WORDS = "one two three four five six seven eight nine ten"

SCRIPTURE = (
    "Psalm Twenty Three\n"
    "\n"
    "1 The Lord is my shepherd\n"
    "2 He maketh me to lie down\n"
    "in green pastures\n"
    "3 He restoreth my soul\n"
)

POEM = (
    "Sonnet 18\n"
    "Shall I compare thee to a summer's day?\n"
    "Thou art more lovely and more temperate:\n"
    "\n"
    "Rough winds do shake the darling buds of May,\n"
    "And summer's lease hath all too short a date;\n"
    "Sometime too hot the eye of heaven shines\n"
)

# Three verses of two words each: words a=0 b=1 | c=2 d=3 | e=4 f=5
SHORT_VERSES = "1 a b\n2 c d\n3 e f"

START_MS = 1_700_000_000_000


class FakeClock:
    """Callable clock returning a controllable epoch ms value."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


TUNING_ENV_VARS = (
    "CLOZE_MIN_DELETED_WORDS",
    "CLOZE_PERCENTAGE_STEP",
    "CLOZE_VERSE_MODE_THRESHOLD",
    "CLOZE_DEFAULT_PERCENTAGE",
)


@pytest.fixture(autouse=True)
def default_tuning(monkeypatch):
    """Run every test with default tuning and no CLOZE_* overrides."""
    for name in TUNING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name, value in config._TUNING_DEFAULTS.items():
        monkeypatch.setattr(config, name, value)
