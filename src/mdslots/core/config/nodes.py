"""Conversion between plain mappings and document nodes.

Mapping form (as used in config files)::

    {"content": "text", "slots": {...}}     # literal node
    {"file": "path.md", "slots": {...}}     # source-backed node
    {"content": "text"}                     # literal slot value
    {"file": "path.md"}                     # source reference (not scanned)

``text``/``source`` are accepted as synonyms of ``content``/``file``.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from mdslots.core.composition.types import (
    Callback,
    DocumentNode,
    LiteralText,
    SlotValue,
    SourceRef,
)
from mdslots.core.exceptions import ValidationError

_TEXT_KEYS = ("content", "text")
_SOURCE_KEYS = ("file", "source")


def _pick(data: Mapping[str, Any], keys: tuple[str, ...], where: str) -> Optional[Any]:
    present = [k for k in keys if k in data]
    if len(present) > 1:
        raise ValidationError(f"{where}: use only one of {present}")
    return data[present[0]] if present else None


def node_from_mapping(data: Mapping[str, Any], where: str = "node") -> DocumentNode:
    """Build a ``DocumentNode`` from its mapping form."""
    text = _pick(data, _TEXT_KEYS, where)
    source = _pick(data, _SOURCE_KEYS, where)
    if text is not None and source is not None:
        raise ValidationError(f"{where}: cannot have both content and file")
    if text is None and source is None:
        raise ValidationError(f"{where}: must have either content or file")
    slots = slots_from_mapping(data.get("slots") or {}, where=f"{where}.slots")
    return DocumentNode(text=text, source=source, slots=slots)


def slot_from_value(value: Any, where: str = "slot") -> SlotValue:
    """Coerce a plain Python value into a slot value."""
    if isinstance(value, (LiteralText, SourceRef, Callback, DocumentNode)):
        return value
    if isinstance(value, str):
        return LiteralText(value)
    if isinstance(value, Mapping):
        if "slots" not in value:
            text = _pick(value, _TEXT_KEYS, where)
            source = _pick(value, _SOURCE_KEYS, where)
            if text is not None and source is None:
                return LiteralText(text)
            if source is not None and text is None:
                return SourceRef(source)
        return node_from_mapping(value, where=where)
    if callable(value):
        return Callback(value)
    raise ValidationError(
        f"Invalid slot source type at {where}: {type(value).__name__}",
        context={"where": where},
    )


def slots_from_mapping(slots: Any, where: str = "slots") -> Dict[str, SlotValue]:
    if not isinstance(slots, Mapping):
        raise ValidationError(f"{where} must be a mapping, got {type(slots).__name__}")
    out: Dict[str, SlotValue] = {}
    # Later keys win when a surface format repeats a name.
    for name, value in slots.items():
        if not isinstance(name, str):
            raise ValidationError(f"{where}: slot names must be strings, got {name!r}")
        out[name] = slot_from_value(value, where=f"{where}.{name}")
    return out


def map_node_paths(node: DocumentNode, fn: Callable[[str], str]) -> DocumentNode:
    """Return a copy of ``node`` with every source path passed through ``fn``."""
    slots = {name: _map_slot_paths(value, fn) for name, value in node.slots.items()}
    source = fn(node.source) if node.source is not None else None
    return DocumentNode(text=node.text, source=source, slots=slots)


def _map_slot_paths(value: SlotValue, fn: Callable[[str], str]) -> SlotValue:
    if isinstance(value, SourceRef):
        return SourceRef(fn(value.path))
    if isinstance(value, DocumentNode):
        return map_node_paths(value, fn)
    return value


__all__ = [
    "node_from_mapping",
    "slot_from_value",
    "slots_from_mapping",
    "map_node_paths",
]
