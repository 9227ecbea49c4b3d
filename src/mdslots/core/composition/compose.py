"""Public composition API.

``compose`` / ``compose_async`` validate their inputs (raising
``ValidationError`` before any source is touched), build a
``CompositionEngine`` and return a ``ComposeResult``.
"""
from __future__ import annotations

import asyncio
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional, Union

from mdslots.core.exceptions import ValidationError

from .engine import CompositionEngine
from .sources import SourceProvider
from .types import (
    FILE_ERROR_CHOICES,
    MISSING_SLOT_CHOICES,
    RESOLVE_FROM_CHOICES,
    Callback,
    ComposeOptions,
    ComposeResult,
    DocumentNode,
    LiteralText,
    SlotValue,
    SourceRef,
)

NodeInput = Union[DocumentNode, Mapping[str, Any]]
OptionsInput = Union[ComposeOptions, Mapping[str, Any], None]

# camelCase names accepted in option mappings
_OPTION_ALIASES = {
    "basePath": "base_path",
    "resolveFrom": "resolve_from",
    "maxDepth": "max_depth",
    "onMissingSlot": "on_missing_slot",
    "onFileError": "on_file_error",
}
_OPTION_FIELDS = {
    "base_path",
    "resolve_from",
    "max_depth",
    "on_missing_slot",
    "on_file_error",
    "cache",
    "parallel",
}


def validate_node(node: Any, where: str = "node") -> DocumentNode:
    """Return ``node`` as a validated ``DocumentNode``.

    Mappings are converted with ``node_from_mapping``. Slot values are
    validated recursively.
    """
    if node is None:
        raise ValidationError("DocumentNode is required")
    if isinstance(node, Mapping):
        from mdslots.core.config.nodes import node_from_mapping

        node = node_from_mapping(node, where=where)
    if not isinstance(node, DocumentNode):
        raise ValidationError(f"{where} must be a DocumentNode or mapping, got {type(node).__name__}")

    if node.text is not None and node.source is not None:
        raise ValidationError(f"{where} cannot have both text and source")
    if node.text is None and node.source is None:
        raise ValidationError(f"{where} must have either text or source")
    if node.text is not None and not isinstance(node.text, str):
        raise ValidationError(f"{where} text must be a string")
    if node.source is not None and (not isinstance(node.source, str) or not node.source):
        raise ValidationError(f"{where} source must be a non-empty string")
    if not isinstance(node.slots, Mapping):
        raise ValidationError(f"{where} slots must be a mapping")

    for name, value in node.slots.items():
        _validate_slot(value, f"{where}.slots.{name}")
    return node


def _validate_slot(value: SlotValue, where: str) -> None:
    if isinstance(value, LiteralText):
        if not isinstance(value.text, str):
            raise ValidationError(f"{where} literal text must be a string")
    elif isinstance(value, SourceRef):
        if not isinstance(value.path, str) or not value.path:
            raise ValidationError(f"{where} source path must be a non-empty string")
    elif isinstance(value, Callback):
        if not callable(value.func):
            raise ValidationError(f"{where} callback must be callable")
    elif isinstance(value, DocumentNode):
        validate_node(value, where)
    else:
        raise ValidationError(f"Invalid slot source type at {where}: {type(value).__name__}")


def validate_options(options: OptionsInput) -> ComposeOptions:
    """Return ``options`` as a validated ``ComposeOptions``."""
    if options is None:
        return ComposeOptions()
    if isinstance(options, Mapping):
        kwargs = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in _OPTION_FIELDS:
                raise ValidationError(f"Unknown compose option: {key}")
            kwargs[name] = value
        options = ComposeOptions(**kwargs)
    if not isinstance(options, ComposeOptions):
        raise ValidationError(f"options must be ComposeOptions or a mapping, got {type(options).__name__}")

    depth = options.max_depth
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise ValidationError("maxDepth must be a non-negative integer")
    if options.on_missing_slot not in MISSING_SLOT_CHOICES:
        raise ValidationError(f"onMissingSlot must be one of: {', '.join(MISSING_SLOT_CHOICES)}")
    if options.on_file_error not in FILE_ERROR_CHOICES:
        raise ValidationError(f"onFileError must be one of: {', '.join(FILE_ERROR_CHOICES)}")
    if options.resolve_from not in RESOLVE_FROM_CHOICES:
        raise ValidationError(f"resolveFrom must be one of: {', '.join(RESOLVE_FROM_CHOICES)}")
    if not isinstance(options.parallel, bool):
        raise ValidationError("parallel must be a boolean")
    if options.cache is not None and not isinstance(options.cache, MutableMapping):
        raise ValidationError("cache must be a mutable mapping")
    if options.base_path is not None and not isinstance(options.base_path, str):
        raise ValidationError("basePath must be a string")
    return options


async def compose_async(
    node: NodeInput,
    options: OptionsInput = None,
    *,
    source: Optional[SourceProvider] = None,
) -> ComposeResult:
    """Compose ``node`` and return the text plus any collected errors.

    Raises:
        ValidationError: Malformed node or options.
        ComposeError: Only under ``on_missing_slot="error"`` or
            ``on_file_error="throw"``.
    """
    doc = validate_node(node)
    opts = validate_options(options)
    engine = CompositionEngine(source=source)
    return await engine.compose(doc, opts)


def compose(
    node: NodeInput,
    options: OptionsInput = None,
    *,
    source: Optional[SourceProvider] = None,
) -> ComposeResult:
    """Synchronous wrapper around ``compose_async``.

    Must not be called from a running event loop; await ``compose_async``
    there instead.
    """
    doc = validate_node(node)
    opts = validate_options(options)
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(CompositionEngine(source=source).compose(doc, opts))
    raise RuntimeError("compose() called inside a running event loop; use 'await compose_async()'")


__all__ = ["compose", "compose_async", "validate_node", "validate_options"]
