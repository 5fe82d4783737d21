"""Pydantic models for the persisted per-passage progress record.

WHY: The host application stores one key-value record per user and
passage: the deletion percentage, the hidden word indices, and verse
progress. Validating that record on the way in catches corrupted or
hand-edited state before it reaches the session, and the generated
JSON Schema documents the storage shape for whoever owns the database.

HOW: VerseProgressRecord mirrors core.ir.VerseProgress with the
camelCase keys the record has always used. ProgressRecord bundles the
three fields. Conversion helpers translate between record and IR.
load_record / save_record handle a JSON file for the CLI.

RULES:
- Progress keys are camelCase on the wire (nextReview, lastCompleted, ...)
  and accepted in snake_case too
- verse_progress keys are segment numbers as strings
- deleted_indices are normalized to sorted, unique, non-negative ints
- deletion_percentage is 0-100
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cloze_memorizer.core.ir import ProgressMap, VerseProgress

logger = logging.getLogger(__name__)


class VerseProgressRecord(BaseModel):
    """Stored spaced-repetition state for one segment."""

    model_config = ConfigDict(populate_by_name=True)

    completions: int = Field(ge=0, description="Completed passes of the segment.")
    interval: int = Field(default=0, ge=0, description="Current review interval in ms.")
    next_review: Optional[int] = Field(
        default=None,
        alias="nextReview",
        description="Epoch ms when the segment becomes due; null while learning.",
    )
    last_completed: int = Field(
        default=0,
        alias="lastCompleted",
        description="Epoch ms of the last completion.",
    )
    last_reviewed: Optional[int] = Field(
        default=None,
        alias="lastReviewed",
        description="Epoch ms of the last graded review.",
    )

    @classmethod
    def from_progress(cls, progress: VerseProgress) -> "VerseProgressRecord":
        return cls(
            completions=progress.completions,
            interval=progress.interval,
            next_review=progress.next_review,
            last_completed=progress.last_completed,
            last_reviewed=progress.last_reviewed,
        )

    def to_progress(self) -> VerseProgress:
        return VerseProgress(
            completions=self.completions,
            interval=self.interval,
            next_review=self.next_review,
            last_completed=self.last_completed,
            last_reviewed=self.last_reviewed,
        )


class ProgressRecord(BaseModel):
    """Everything needed to restore a practice session for one passage.

    RULES:
    - deletion_percentage: current difficulty (0-100)
    - deleted_indices: hidden word indices (may be empty; the session
      rebuilds them from the percentage)
    - verse_progress: progress keyed by segment number as a string
    """

    deletion_percentage: int = Field(
        ge=0, le=100,
        description="Percentage of words hidden in percentage mode.",
    )
    deleted_indices: List[int] = Field(
        default_factory=list,
        description="Hidden word indices, sorted ascending.",
    )
    verse_progress: Dict[str, VerseProgressRecord] = Field(
        default_factory=dict,
        description="Spaced-repetition progress keyed by segment number.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "deletion_percentage": 50,
                "deleted_indices": [0, 3, 7],
                "verse_progress": {
                    "1": {
                        "completions": 2,
                        "interval": 120000,
                        "nextReview": 1700000120000,
                        "lastCompleted": 1700000000000,
                    }
                },
            }
        ]
    }}

    @field_validator("deleted_indices")
    @classmethod
    def _normalize_indices(cls, value: List[int]) -> List[int]:
        if any(index < 0 for index in value):
            raise ValueError("deleted_indices must be non-negative")
        return sorted(set(value))

    @field_validator("verse_progress")
    @classmethod
    def _check_segment_keys(cls, value: Dict[str, VerseProgressRecord]) -> Dict[str, VerseProgressRecord]:
        for key in value:
            if not key.strip().lstrip("-").isdigit():
                raise ValueError("verse_progress key {!r} is not a segment number".format(key))
        return value

    def progress_map(self) -> ProgressMap:
        """Verse progress as IR records keyed by int segment number."""
        return {int(key): record.to_progress() for key, record in self.verse_progress.items()}

    @classmethod
    def from_state(
        cls,
        deletion_percentage: int,
        deleted_indices: List[int],
        progress: ProgressMap,
    ) -> "ProgressRecord":
        return cls(
            deletion_percentage=deletion_percentage,
            deleted_indices=list(deleted_indices),
            verse_progress={
                str(number): VerseProgressRecord.from_progress(p)
                for number, p in sorted(progress.items())
            },
        )

    def to_storage(self) -> dict:
        """JSON-ready dict in the stored shape (camelCase progress keys)."""
        return self.model_dump(by_alias=True, mode="json")


def load_record(path: Path) -> Optional[ProgressRecord]:
    """Read a progress record from a JSON file.

    RULES:
    - Missing file -> None (fresh passage)
    - Invalid JSON -> ValueError naming the file
    - Schema violations -> pydantic.ValidationError
    """
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError("State file {} is not valid JSON: {}".format(path, exc)) from exc
    record = ProgressRecord.model_validate(data)
    logger.info("Loaded progress from %s (%d%%)", path, record.deletion_percentage)
    return record


def save_record(record: ProgressRecord, path: Path) -> None:
    """Write a progress record as pretty-printed JSON."""
    path.write_text(json.dumps(record.to_storage(), indent=2) + "\n", encoding="utf-8")
    logger.info("Saved progress to %s", path)
