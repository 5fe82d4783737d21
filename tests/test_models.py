"""Tests for the persisted progress record models.

WHY: The record is the only state that outlives a session. A record that
validates but restores wrong (lost camelCase keys, unsorted indices)
would corrupt a learner's progress on the next save.

HOW: Validation and normalization through pydantic, the stored shape
checked against the generated JSON Schema with jsonschema, and file
load/save through tmp_path.
"""

import json

import jsonschema
import pytest
from pydantic import ValidationError

from cloze_memorizer.core.ir import VerseProgress
from cloze_memorizer.session.models import (
    ProgressRecord,
    VerseProgressRecord,
    load_record,
    save_record,
)

from tests.conftest import START_MS


def _progress(completions=2):
    return VerseProgress(
        completions=completions,
        interval=120000,
        next_review=START_MS + 120000,
        last_completed=START_MS,
    )


class TestValidation:

    def test_indices_sorted_and_unique(self):
        record = ProgressRecord(deletion_percentage=10, deleted_indices=[5, 1, 5, 3])
        assert record.deleted_indices == [1, 3, 5]

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            ProgressRecord(deletion_percentage=10, deleted_indices=[-1])

    @pytest.mark.parametrize("percentage", [-5, 101])
    def test_percentage_out_of_range(self, percentage):
        with pytest.raises(ValidationError):
            ProgressRecord(deletion_percentage=percentage)

    def test_non_numeric_segment_key_rejected(self):
        with pytest.raises(ValidationError):
            ProgressRecord.model_validate({
                "deletion_percentage": 50,
                "verse_progress": {"intro": {"completions": 1}},
            })

    def test_defaults(self):
        record = ProgressRecord(deletion_percentage=5)
        assert record.deleted_indices == []
        assert record.verse_progress == {}

    def test_snake_case_progress_accepted(self):
        record = VerseProgressRecord.model_validate({
            "completions": 2, "next_review": 10, "last_completed": 5,
        })
        assert record.next_review == 10
        assert record.last_completed == 5


class TestConversion:

    def test_progress_round_trip(self):
        progress = _progress()
        assert VerseProgressRecord.from_progress(progress).to_progress() == progress

    def test_from_state_uses_string_keys(self):
        record = ProgressRecord.from_state(50, [2, 0], {3: _progress(), 1: _progress(1)})
        assert list(record.verse_progress) == ["1", "3"]
        assert record.deleted_indices == [0, 2]
        assert record.progress_map()[3] == _progress()

    def test_storage_uses_camel_case(self):
        record = ProgressRecord.from_state(50, [0], {1: _progress()})
        stored = record.to_storage()
        entry = stored["verse_progress"]["1"]
        assert entry["nextReview"] == START_MS + 120000
        assert entry["lastCompleted"] == START_MS
        assert entry["lastReviewed"] is None
        assert "next_review" not in entry

    def test_storage_matches_json_schema(self):
        schema = ProgressRecord.model_json_schema(by_alias=True)
        record = ProgressRecord.from_state(65, [1, 4, 9], {1: _progress(), 2: _progress(1)})
        jsonschema.validate(record.to_storage(), schema)

    def test_schema_example_is_valid(self):
        schema = ProgressRecord.model_json_schema(by_alias=True)
        for example in schema["examples"]:
            jsonschema.validate(example, schema)
            ProgressRecord.model_validate(example)


class TestFileIO:

    def test_missing_file_returns_none(self, tmp_path):
        assert load_record(tmp_path / "nope.json") is None

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "state.json"
        record = ProgressRecord.from_state(40, [3, 7], {2: _progress()})
        save_record(record, path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["verse_progress"]["2"]["nextReview"] == START_MS + 120000

        assert load_record(path) == record

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_record(path)

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"deletion_percentage": 500}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_record(path)
