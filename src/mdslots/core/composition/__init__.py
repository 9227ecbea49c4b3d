"""Slot composition: parser, dependency tracker and engine."""
from __future__ import annotations

from .compose import compose, compose_async, validate_node, validate_options
from .engine import CompositionEngine, ResolutionContext, error_marker
from .parser import ContentParser, ParsedContent, Placeholder, ProtectedRegion
from .sources import FileSystemSource, MemorySource, SourceProvider
from .tracker import DependencyTracker
from .types import (
    Callback,
    ComposeOptions,
    ComposeResult,
    DocumentNode,
    ErrorKind,
    ErrorRecord,
    LiteralText,
    SlotValue,
    SourceRef,
)

__all__ = [
    "compose",
    "compose_async",
    "validate_node",
    "validate_options",
    "CompositionEngine",
    "ResolutionContext",
    "error_marker",
    "ContentParser",
    "ParsedContent",
    "Placeholder",
    "ProtectedRegion",
    "FileSystemSource",
    "MemorySource",
    "SourceProvider",
    "DependencyTracker",
    "Callback",
    "ComposeOptions",
    "ComposeResult",
    "DocumentNode",
    "ErrorKind",
    "ErrorRecord",
    "LiteralText",
    "SlotValue",
    "SourceRef",
]
