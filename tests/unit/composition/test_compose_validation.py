"""Input validation performed by compose() before any source is touched."""
from __future__ import annotations

from typing import Any, Dict, List

import pytest

from mdslots.core.composition import (
    ComposeOptions,
    DocumentNode,
    LiteralText,
    MemorySource,
    SourceRef,
    compose,
    validate_node,
    validate_options,
)
from mdslots.core.exceptions import MdSlotsError, ValidationError


class SpySource(MemorySource):
    def __init__(self) -> None:
        super().__init__({"/main.md": "x"})
        self.touched: List[str] = []

    def exists(self, path: str) -> bool:
        self.touched.append(path)
        return super().exists(path)


class TestValidateNode:
    def test_none_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="required"):
            validate_node(None)

    def test_both_text_and_source_rejected(self) -> None:
        with pytest.raises(ValidationError, match="both"):
            validate_node(DocumentNode(text="a", source="b.md"))

    def test_neither_text_nor_source_rejected(self) -> None:
        with pytest.raises(ValidationError, match="either"):
            validate_node(DocumentNode())

    def test_mapping_with_both_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_node({"content": "a", "file": "b.md"})

    def test_non_node_rejected(self) -> None:
        with pytest.raises(ValidationError, match="DocumentNode or mapping"):
            validate_node("just a string")

    def test_invalid_nested_slot_is_reported_with_location(self) -> None:
        node = DocumentNode(
            text="<!-- outlet: a -->",
            slots={"a": DocumentNode(text="x", slots={"b": 42})},  # type: ignore[dict-item]
        )

        with pytest.raises(ValidationError, match=r"node\.slots\.a\.slots\.b"):
            validate_node(node)

    def test_empty_source_path_rejected(self) -> None:
        with pytest.raises(ValidationError, match="source path"):
            validate_node(DocumentNode(text="x", slots={"a": SourceRef("")}))

    def test_mapping_is_coerced(self) -> None:
        node = validate_node({
            "content": "<!-- outlet: a --><!-- outlet: b --><!-- outlet: c -->",
            "slots": {
                "a": "plain",
                "b": {"file": "b.md"},
                "c": {"file": "c.md", "slots": {"d": {"content": "D"}}},
            },
        })

        assert node.text is not None
        assert node.slots["a"] == LiteralText("plain")
        assert node.slots["b"] == SourceRef("b.md")
        nested = node.slots["c"]
        assert isinstance(nested, DocumentNode)
        assert nested.source == "c.md"
        assert nested.slots == {"d": LiteralText("D")}

    def test_unsupported_slot_type_in_mapping(self) -> None:
        with pytest.raises(ValidationError, match="Invalid slot source type"):
            validate_node({"content": "x", "slots": {"a": 3.14}})


class TestValidateOptions:
    def test_none_gives_defaults(self) -> None:
        options = validate_options(None)

        assert options == ComposeOptions()
        assert options.max_depth == 10
        assert options.on_missing_slot == "keep"
        assert options.on_file_error == "warn-empty"
        assert options.resolve_from == "cwd"
        assert options.parallel is False

    def test_camel_and_snake_case_are_accepted(self) -> None:
        options = validate_options({"maxDepth": 3, "on_missing_slot": "ignore", "onFileError": "throw"})

        assert options.max_depth == 3
        assert options.on_missing_slot == "ignore"
        assert options.on_file_error == "throw"

    @pytest.mark.parametrize(
        "raw, message",
        [
            ({"maxDepth": -1}, "maxDepth"),
            ({"maxDepth": 2.5}, "maxDepth"),
            ({"maxDepth": True}, "maxDepth"),
            ({"onMissingSlot": "explode"}, "onMissingSlot"),
            ({"onFileError": "warn"}, "onFileError"),
            ({"resolveFrom": "parent"}, "resolveFrom"),
            ({"parallel": "yes"}, "parallel"),
            ({"cache": ["not", "a", "mapping"]}, "cache"),
            ({"basePath": 7}, "basePath"),
            ({"colour": "blue"}, "Unknown compose option"),
        ],
    )
    def test_invalid_values(self, raw: Dict[str, Any], message: str) -> None:
        with pytest.raises(ValidationError, match=message):
            validate_options(raw)

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_options(42)  # type: ignore[arg-type]


class TestValidationPrecedesIO:
    def test_bad_options_never_touch_source(self) -> None:
        source = SpySource()

        with pytest.raises(ValidationError):
            compose(DocumentNode(source="/main.md"), {"maxDepth": -5}, source=source)

        assert source.touched == []

    def test_validation_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            compose({"content": "x"}, {"onMissingSlot": "nope"})

    def test_validation_error_json_payload(self) -> None:
        try:
            validate_node({"content": "x", "slots": {"a": 3.14}})
        except MdSlotsError as exc:
            payload = exc.to_json_error()
        else:  # pragma: no cover
            pytest.fail("expected ValidationError")

        assert payload["code"] == "ValidationError"
        assert payload["context"] == {"where": "node.slots.a"}
