"""Composition config files and mapping <-> node conversion.

Usage:
    from mdslots.core.config import build_request

    node, options = build_request("README.tpl.md", {"title": "Hello"}, config_path=Path("slots.yaml"))
"""
from __future__ import annotations

from .loader import (
    SLOT_NAME_PATTERN,
    CompositionConfig,
    build_request,
    load_config_file,
    load_defaults,
    parse_cli_slots,
    parse_slot_argument,
)
from .nodes import map_node_paths, node_from_mapping, slot_from_value, slots_from_mapping

__all__ = [
    "SLOT_NAME_PATTERN",
    "CompositionConfig",
    "build_request",
    "load_config_file",
    "load_defaults",
    "parse_cli_slots",
    "parse_slot_argument",
    "map_node_paths",
    "node_from_mapping",
    "slot_from_value",
    "slots_from_mapping",
]
