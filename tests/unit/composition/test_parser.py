"""Tests for outlet marker parsing, protected regions and substitution."""
from __future__ import annotations

import pytest

from mdslots.core.composition import ContentParser


@pytest.fixture
def parser() -> ContentParser:
    return ContentParser()


class TestFindPlaceholders:
    """Marker recognition."""

    def test_finds_outlet_and_slot_keywords_in_order(self, parser: ContentParser) -> None:
        text = "A <!-- outlet: first --> B <!-- slot: second --> C <!-- outlet: first -->"

        found = parser.find_placeholders(text)

        assert [p.name for p in found] == ["first", "second", "first"]
        assert [p.start for p in found] == sorted(p.start for p in found)
        assert text[found[1].start : found[1].end] == "<!-- slot: second -->"

    def test_keyword_is_case_insensitive_and_whitespace_tolerant(self, parser: ContentParser) -> None:
        text = "<!--OUTLET:a--> <!--   Slot   :   b_2-x   -->"

        assert parser.placeholder_names(text) == ["a", "b_2-x"]

    @pytest.mark.parametrize(
        "text",
        [
            "<!-- outlet: -->",
            "<!-- outlet:    -->",
            "<!-- outlet: has space -->",
            "<!-- outlet: dot.name -->",
            "<!-- section: name -->",
            "<!- outlet: name -->",
        ],
    )
    def test_malformed_markers_are_not_placeholders(self, parser: ContentParser, text: str) -> None:
        assert parser.find_placeholders(text) == []
        assert not parser.has_placeholders(text)

    def test_names_are_distinct_in_discovery_order(self, parser: ContentParser) -> None:
        text = "<!-- outlet: b --><!-- outlet: a --><!-- outlet: b -->"

        parsed = parser.parse(text)

        assert len(parsed.placeholders) == 3
        assert parsed.names == ["b", "a"]


class TestProtectedRegions:
    """Markers inside code blocks are neither found nor substituted."""

    def test_fenced_backtick_block(self, parser: ContentParser) -> None:
        text = "```md\n<!-- outlet: z -->\n```\n<!-- outlet: z -->"

        found = parser.find_placeholders(text)

        assert len(found) == 1
        assert found[0].start == text.rindex("<!--")

    def test_fenced_tilde_block(self, parser: ContentParser) -> None:
        text = "~~~\n<!-- outlet: hidden -->\n~~~\n"

        assert parser.find_placeholders(text) == []

    def test_fences_close_only_on_the_same_delimiter(self, parser: ContentParser) -> None:
        text = "~~~\n```\n<!-- outlet: a -->\n~~~\n<!-- outlet: b -->\n"

        assert parser.placeholder_names(text) == ["b"]

    def test_longer_fence_is_not_closed_by_shorter(self, parser: ContentParser) -> None:
        text = "````\n```\n<!-- outlet: a -->\n````\n<!-- outlet: b -->"

        assert parser.placeholder_names(text) == ["b"]

    def test_unterminated_fence_runs_to_end(self, parser: ContentParser) -> None:
        text = "<!-- outlet: a -->\n```\n<!-- outlet: b -->\nmore text"

        assert parser.placeholder_names(text) == ["a"]

    def test_indented_block_with_four_spaces(self, parser: ContentParser) -> None:
        text = "Intro\n\n    <!-- outlet: a -->\n\nText <!-- outlet: a -->"

        found = parser.find_placeholders(text)

        assert len(found) == 1
        assert found[0].start == text.rindex("<!--")

    def test_indented_block_with_tab(self, parser: ContentParser) -> None:
        text = "\t<!-- outlet: a -->\nplain <!-- outlet: b -->"

        assert parser.placeholder_names(text) == ["b"]

    def test_blank_lines_do_not_end_indented_block(self, parser: ContentParser) -> None:
        text = "    code\n\n    <!-- outlet: a -->\nafter"

        assert parser.find_placeholders(text) == []

    def test_all_markers_protected_yields_nothing(self, parser: ContentParser) -> None:
        text = "```\n<!-- outlet: a -->\n<!-- slot: b -->\n```\n\n    <!-- outlet: c -->\n"

        assert parser.find_placeholders(text) == []

    def test_regions_are_reported(self, parser: ContentParser) -> None:
        text = "```\ncode\n```\ntext\n    indented\n"

        parsed = parser.parse(text)

        assert [r.type for r in parsed.regions] == ["fenced", "indented"]


class TestSubstitute:
    """Substitution semantics."""

    def test_empty_replacements_return_text_unchanged(self, parser: ContentParser) -> None:
        text = "A <!-- outlet: x --> B ```\n<!-- outlet: y -->\n```"

        assert parser.substitute(text, {}) == text

    def test_missing_entries_are_left_verbatim(self, parser: ContentParser) -> None:
        text = "<!-- outlet: a --> and <!-- outlet: b -->"

        assert parser.substitute(text, {"a": "A"}) == "A and <!-- outlet: b -->"

    def test_every_occurrence_is_replaced(self, parser: ContentParser) -> None:
        text = "<!-- outlet: a -->-<!-- outlet: a -->"

        assert parser.substitute(text, {"a": "x"}) == "x-x"

    def test_empty_string_removes_marker(self, parser: ContentParser) -> None:
        assert parser.substitute("A <!-- slot: x --> B", {"x": ""}) == "A  B"

    def test_protected_occurrence_survives(self, parser: ContentParser) -> None:
        text = "```\n<!-- outlet: z -->\n```\n<!-- outlet: z -->"

        result = parser.substitute(text, {"z": "Y"})

        assert result == "```\n<!-- outlet: z -->\n```\nY"

    def test_replacements_are_not_rescanned(self, parser: ContentParser) -> None:
        text = "<!-- outlet: a --><!-- outlet: b -->"

        result = parser.substitute(text, {"a": "<!-- outlet: b -->", "b": "B"})

        assert result == "<!-- outlet: b -->B"

    def test_replacement_lengths_do_not_shift_offsets(self, parser: ContentParser) -> None:
        text = "1<!-- outlet: a -->2<!-- outlet: b -->3"

        result = parser.substitute(text, {"a": "a" * 50, "b": ""})

        assert result == "1" + "a" * 50 + "23"
