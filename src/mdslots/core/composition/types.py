"""Data model for slot composition.

Slot values form a tagged union discriminated by ``kind``:

- ``LiteralText``  - text used as-is
- ``SourceRef``    - path of a document read through the source provider
- ``Callback``     - zero-argument function producing text (sync or async)
- ``DocumentNode`` - nested document, itself composed with its own slots
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    ClassVar,
    Dict,
    List,
    Literal,
    MutableMapping,
    Optional,
    Union,
)

from mdslots.core.exceptions import ErrorKind

ResolveFrom = Literal["cwd", "file"]
MissingSlotPolicy = Literal["error", "ignore", "keep"]
FileErrorPolicy = Literal["throw", "warn-empty"]

RESOLVE_FROM_CHOICES = ("cwd", "file")
MISSING_SLOT_CHOICES = ("error", "ignore", "keep")
FILE_ERROR_CHOICES = ("throw", "warn-empty")

DEFAULT_MAX_DEPTH = 10

SlotFunction = Callable[[], Union[str, Awaitable[str]]]


@dataclass(frozen=True)
class LiteralText:
    text: str
    kind: ClassVar[str] = "literal"


@dataclass(frozen=True)
class SourceRef:
    path: str
    kind: ClassVar[str] = "source"


@dataclass(frozen=True)
class Callback:
    func: SlotFunction
    kind: ClassVar[str] = "callback"


@dataclass(frozen=True)
class DocumentNode:
    """A document with either literal ``text`` or a ``source`` path.

    ``slots`` maps placeholder names to slot values. Exactly one of
    ``text``/``source`` must be set; ``validate_node`` enforces it.
    """

    text: Optional[str] = None
    source: Optional[str] = None
    slots: Dict[str, "SlotValue"] = field(default_factory=dict)
    kind: ClassVar[str] = "node"

    @property
    def is_source_backed(self) -> bool:
        return self.source is not None


SlotValue = Union[LiteralText, SourceRef, Callback, DocumentNode]


@dataclass
class ComposeOptions:
    """Options consumed by the composition engine."""

    base_path: Optional[str] = None
    resolve_from: ResolveFrom = "cwd"
    max_depth: int = DEFAULT_MAX_DEPTH
    on_missing_slot: MissingSlotPolicy = "keep"
    on_file_error: FileErrorPolicy = "warn-empty"
    cache: Optional[MutableMapping[str, str]] = None
    parallel: bool = False


@dataclass(frozen=True)
class ErrorRecord:
    """A collected runtime problem."""

    kind: ErrorKind
    message: str
    source_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.source_path is not None:
            data["source_path"] = self.source_path
        return data


@dataclass
class ComposeResult:
    """Composed text plus the problems collected while producing it.

    ``errors`` is ``None`` when nothing was collected.
    """

    text: str
    errors: Optional[List[ErrorRecord]] = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def errors_of(self, kind: ErrorKind) -> List[ErrorRecord]:
        return [e for e in (self.errors or []) if e.kind == kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "errors": [e.to_dict() for e in self.errors] if self.errors else [],
        }


__all__ = [
    "ResolveFrom",
    "MissingSlotPolicy",
    "FileErrorPolicy",
    "RESOLVE_FROM_CHOICES",
    "MISSING_SLOT_CHOICES",
    "FILE_ERROR_CHOICES",
    "DEFAULT_MAX_DEPTH",
    "SlotFunction",
    "LiteralText",
    "SourceRef",
    "Callback",
    "DocumentNode",
    "SlotValue",
    "ComposeOptions",
    "ErrorKind",
    "ErrorRecord",
    "ComposeResult",
]
