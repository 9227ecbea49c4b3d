from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

if TYPE_CHECKING:
    from mdslots.core.composition.types import ErrorRecord


class ErrorKind(str, Enum):
    """Kinds of runtime problems collected during composition."""

    MISSING_SLOT = "missing-slot"
    SOURCE_ERROR = "source-error"
    CYCLE = "cycle"
    MAX_DEPTH = "max-depth"
    CALLBACK_ERROR = "callback-error"


class MdSlotsError(Exception):
    """Base exception for mdslots."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ValidationError(MdSlotsError, ValueError):
    """Raised when a document node or compose options are malformed.

    Never collected: always raised before any source is read.
    """

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MdSlotsError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ComposeError(MdSlotsError):
    """Runtime composition problem.

    Subclasses are recorded into the per-call error list and only raised
    out of ``compose`` when the matching hard policy is selected.
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        source_path: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if source_path is not None:
            ctx.setdefault("source_path", source_path)
        super().__init__(message, context=ctx)
        self.source_path = source_path

    def to_json_error(self) -> Dict[str, Any]:
        payload = super().to_json_error()
        payload["kind"] = self.kind.value
        return payload

    def to_record(self) -> "ErrorRecord":
        """Convert into the record stored in a ``ComposeResult``."""
        from mdslots.core.composition.types import ErrorRecord

        return ErrorRecord(kind=self.kind, message=str(self), source_path=self.source_path)


class MissingSlotError(ComposeError):
    """A placeholder has no supplied slot value."""

    kind = ErrorKind.MISSING_SLOT


class SourceError(ComposeError):
    """A backing source is absent or unreadable."""

    kind = ErrorKind.SOURCE_ERROR


class CycleError(ComposeError):
    """A source path revisits the active resolution chain."""

    kind = ErrorKind.CYCLE


class DepthExceededError(ComposeError):
    """The resolution chain would exceed the configured maximum depth."""

    kind = ErrorKind.MAX_DEPTH


class CallbackError(ComposeError):
    """A slot-producing callback raised or returned a non-string."""

    kind = ErrorKind.CALLBACK_ERROR


class ConfigError(MdSlotsError):
    """Raised when a composition config file cannot be loaded."""


class SchemaValidationError(ConfigError, ValueError):
    """Raised when a config payload violates its JSON schema."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ConfigError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "ErrorKind",
    "MdSlotsError",
    "ValidationError",
    "ComposeError",
    "MissingSlotError",
    "SourceError",
    "CycleError",
    "DepthExceededError",
    "CallbackError",
    "ConfigError",
    "SchemaValidationError",
]
