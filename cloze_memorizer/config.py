"""Configuration constants, difficulty tuning, and .env loading.

WHY: Centralizes every tunable value (difficulty step, minimum number
of hidden words, the percentage at which practice switches to verse
mode) so they are easy to find, update, and override. They are plain
module-level values, not buried in the algorithms, so both humans and
coding agents can adjust them confidently.

HOW: python-dotenv loads the .env file on import. The module-level
constants hold the defaults; load_tuning() reads the optional
``CLOZE_*`` environment overrides, validates them, and updates the
constants. Callers invoke it at startup (the CLI does so inside its
error handling) and read the values as ``config.NAME`` at call time.
load_log_level() turns the configured level name into a logging
constant with a clear error when it is wrong.

RULES:
- MIN_DELETED_WORDS: never hide fewer than this many words (2)
- PERCENTAGE_STEP: one "harder"/"easier" click moves this many points (5)
- VERSE_MODE_THRESHOLD: at this percentage practice switches to verses (50)
- DEFAULT_PERCENTAGE: starting difficulty for a fresh passage (5)
- Importing this module never raises; bad overrides fail in load_tuning()
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_int(
    name: str,
    default: int,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """Read an integer environment variable, falling back to ``default``.

    RULES:
    - Missing or blank variable returns the default
    - A non-integer or out-of-range value raises ValueError naming the variable
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}".format(name, raw)
        ) from None
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        raise ValueError(
            "{} must be between {} and {}, got {}".format(
                name,
                minimum if minimum is not None else "-inf",
                maximum if maximum is not None else "inf",
                value,
            )
        )
    return value


# ---------------------------------------------------------------------------
# Difficulty tuning
# ---------------------------------------------------------------------------

MAX_PERCENTAGE = 100
"""Upper bound for the deletion percentage."""

_TUNING_DEFAULTS: Dict[str, int] = {
    "MIN_DELETED_WORDS": 2,
    "PERCENTAGE_STEP": 5,
    "VERSE_MODE_THRESHOLD": 50,
    "DEFAULT_PERCENTAGE": 5,
}

MIN_DELETED_WORDS = _TUNING_DEFAULTS["MIN_DELETED_WORDS"]
PERCENTAGE_STEP = _TUNING_DEFAULTS["PERCENTAGE_STEP"]
VERSE_MODE_THRESHOLD = _TUNING_DEFAULTS["VERSE_MODE_THRESHOLD"]
DEFAULT_PERCENTAGE = _TUNING_DEFAULTS["DEFAULT_PERCENTAGE"]


def load_tuning() -> Dict[str, int]:
    """Apply the ``CLOZE_*`` difficulty overrides from the environment.

    WHY: A typo in .env should surface as a one-line configuration
    error from the CLI, not as a traceback while the package imports.

    HOW: Reads and validates every override first, then assigns all of
    them, so a bad value leaves the current settings untouched.

    RULES:
    - CLOZE_MIN_DELETED_WORDS: >= 1
    - CLOZE_PERCENTAGE_STEP: 1..MAX_PERCENTAGE (0 would freeze harder/easier,
      a negative step would reverse them)
    - CLOZE_VERSE_MODE_THRESHOLD, CLOZE_DEFAULT_PERCENTAGE: 0..MAX_PERCENTAGE
    - Unset variables restore the defaults

    Returns:
        The applied values keyed by constant name.
    """
    global MIN_DELETED_WORDS, PERCENTAGE_STEP, VERSE_MODE_THRESHOLD, DEFAULT_PERCENTAGE

    values = {
        "MIN_DELETED_WORDS": _env_int(
            "CLOZE_MIN_DELETED_WORDS", _TUNING_DEFAULTS["MIN_DELETED_WORDS"], minimum=1,
        ),
        "PERCENTAGE_STEP": _env_int(
            "CLOZE_PERCENTAGE_STEP", _TUNING_DEFAULTS["PERCENTAGE_STEP"],
            minimum=1, maximum=MAX_PERCENTAGE,
        ),
        "VERSE_MODE_THRESHOLD": _env_int(
            "CLOZE_VERSE_MODE_THRESHOLD", _TUNING_DEFAULTS["VERSE_MODE_THRESHOLD"],
            minimum=0, maximum=MAX_PERCENTAGE,
        ),
        "DEFAULT_PERCENTAGE": _env_int(
            "CLOZE_DEFAULT_PERCENTAGE", _TUNING_DEFAULTS["DEFAULT_PERCENTAGE"],
            minimum=0, maximum=MAX_PERCENTAGE,
        ),
    }

    MIN_DELETED_WORDS = values["MIN_DELETED_WORDS"]
    PERCENTAGE_STEP = values["PERCENTAGE_STEP"]
    VERSE_MODE_THRESHOLD = values["VERSE_MODE_THRESHOLD"]
    DEFAULT_PERCENTAGE = values["DEFAULT_PERCENTAGE"]
    return values

# ---------------------------------------------------------------------------
# Passage defaults
# ---------------------------------------------------------------------------

DEFAULT_KIND = os.getenv("CLOZE_DEFAULT_KIND", "scripture")
DEFAULT_INCLUDE_OPTIONAL = os.getenv("CLOZE_INCLUDE_OPTIONAL", "false").lower() == "true"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("CLOZE_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def load_log_level(name: str | None = None) -> int:
    """Resolve a logging level name to its numeric value.

    WHY: The CLI accepts the level from the environment or a flag; a
    typo should fail loudly instead of silently logging nothing.

    HOW: Looks the upper-cased name up in the logging module.

    RULES:
    - Defaults to LOG_LEVEL when no name is given
    - Raises ValueError for unknown level names
    """
    level_name = (name or LOG_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(
            "Unknown log level {!r}. Use DEBUG, INFO, WARNING, or ERROR.".format(
                level_name
            )
        )
    return level
