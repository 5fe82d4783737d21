"""Practice session state machine and persisted progress record.

WHY: Hosts (a web page, the CLI, tests) need a single object to drive
the cloze workflow and a validated shape to store between visits.

HOW: practice.py holds PracticeSession; models.py defines the Pydantic
ProgressRecord stored per user and passage.
"""

from cloze_memorizer.session.models import ProgressRecord, VerseProgressRecord, load_record, save_record
from cloze_memorizer.session.practice import PracticeSession

__all__ = [
    "PracticeSession",
    "ProgressRecord",
    "VerseProgressRecord",
    "load_record",
    "save_record",
]
