"""Unit tests for optional-section handling.

WHY: Optional sections are resolved before tokenizing, so any mistake
here shifts every word index downstream.

HOW: Tests cover removal, marker stripping, part splitting, and the
fallback rules for unbalanced markers.
"""

import logging

from cloze_memorizer.core.ir import ContentPart
from cloze_memorizer.core.optional import (
    has_optional_sections,
    parse_content_with_optional,
    prepare_text,
    remove_optional_sections,
    strip_optional_markers,
)


class TestRemoveOptionalSections:
    """Balanced spans vanish, markers included."""

    def test_keeps_surrounding_spaces(self):
        assert remove_optional_sections("A [OPTIONAL]B[/OPTIONAL] C") == "A  C"

    def test_multiple_spans(self):
        text = "a [OPTIONAL]x[/OPTIONAL] b [OPTIONAL]y[/OPTIONAL] c"
        assert remove_optional_sections(text) == "a  b  c"

    def test_spans_across_lines(self):
        text = "line one\n[OPTIONAL]\nextra line\n[/OPTIONAL]\nline two"
        assert remove_optional_sections(text) == "line one\n\nline two"

    def test_nested_looking_markers_end_at_first_close(self):
        text = "A [OPTIONAL]B [OPTIONAL] C[/OPTIONAL] D"
        assert remove_optional_sections(text) == "A  D"

    def test_optional_at_start_and_end(self):
        assert remove_optional_sections("[OPTIONAL]hidden[/OPTIONAL]visible") == "visible"
        assert remove_optional_sections("visible[OPTIONAL]hidden[/OPTIONAL]") == "visible"

    def test_only_optional_content(self):
        assert remove_optional_sections("[OPTIONAL]all hidden[/OPTIONAL]") == ""

    def test_text_without_markers_unchanged(self):
        assert remove_optional_sections("plain text") == "plain text"


class TestUnbalancedMarkers:
    """Malformed input follows the fallback rules and never raises."""

    def test_unmatched_open_runs_to_end(self):
        assert remove_optional_sections("keep [OPTIONAL]drop this") == "keep "

    def test_stray_close_is_dropped(self):
        assert remove_optional_sections("a [/OPTIONAL]b") == "a b"

    def test_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cloze_memorizer.core.optional"):
            remove_optional_sections("x [OPTIONAL] y")
        assert "Unbalanced optional markers" in caplog.text

    def test_balanced_input_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cloze_memorizer.core.optional"):
            remove_optional_sections("x [OPTIONAL]y[/OPTIONAL]")
        assert caplog.text == ""


class TestStripOptionalMarkers:

    def test_keeps_content(self):
        assert strip_optional_markers("A [OPTIONAL]B[/OPTIONAL] C") == "A B C"

    def test_strips_unbalanced_markers_too(self):
        assert strip_optional_markers("[OPTIONAL]a [/OPTIONAL]b[/OPTIONAL]") == "a b"


class TestParseContentWithOptional:
    """Parts cover the text in order with no gaps."""

    def test_mixed_content(self):
        parts = parse_content_with_optional("A [OPTIONAL]B[/OPTIONAL] C")
        assert parts == [
            ContentPart(content="A ", optional=False),
            ContentPart(content="B", optional=True),
            ContentPart(content=" C", optional=False),
        ]

    def test_plain_text_is_one_part(self):
        assert parse_content_with_optional("just text") == [
            ContentPart(content="just text", optional=False),
        ]

    def test_empty_text(self):
        assert parse_content_with_optional("") == []

    def test_adjacent_optional_sections(self):
        parts = parse_content_with_optional("[OPTIONAL]a[/OPTIONAL][OPTIONAL]b[/OPTIONAL]")
        assert [p.optional for p in parts] == [True, True]
        assert [p.content for p in parts] == ["a", "b"]

    def test_reconstructs_text_without_markers(self):
        text = "In [OPTIONAL]the[/OPTIONAL] beginning [OPTIONAL]was[/OPTIONAL] the word"
        parts = parse_content_with_optional(text)
        assert "".join(p.content for p in parts) == strip_optional_markers(text)

    def test_unmatched_open_becomes_trailing_optional_part(self):
        parts = parse_content_with_optional("x [OPTIONAL]y")
        assert parts == [
            ContentPart(content="x ", optional=False),
            ContentPart(content="y", optional=True),
        ]


class TestPrepareText:

    def test_excludes_optional_by_default(self):
        assert prepare_text("A [OPTIONAL]B[/OPTIONAL] C") == "A  C"

    def test_includes_optional_when_asked(self):
        assert prepare_text("A [OPTIONAL]B[/OPTIONAL] C", include_optional=True) == "A B C"

    def test_has_optional_sections(self):
        assert has_optional_sections("x [OPTIONAL]y[/OPTIONAL]")
        assert not has_optional_sections("x y")
