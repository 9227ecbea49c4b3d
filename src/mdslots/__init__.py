"""
mdslots - compose Markdown documents from reusable fragments

Templates mark insertion points with ``<!-- outlet: name -->`` (or
``<!-- slot: name -->``). Slots are filled from literal text, other files,
callbacks, or nested templates with their own slots, recursively, with cycle
and depth guards and structured error reporting.

    from mdslots import compose

    result = compose({"content": "Hello <!-- outlet: who -->!", "slots": {"who": "World"}})
    assert result.text == "Hello World!"
"""

from mdslots.core.composition import (
    Callback,
    ComposeOptions,
    ComposeResult,
    DocumentNode,
    ErrorKind,
    ErrorRecord,
    LiteralText,
    SourceRef,
    compose,
    compose_async,
)
from mdslots.core.exceptions import (
    CallbackError,
    ComposeError,
    CycleError,
    DepthExceededError,
    MissingSlotError,
    SourceError,
    ValidationError,
)

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "compose",
    "compose_async",
    "Callback",
    "ComposeOptions",
    "ComposeResult",
    "DocumentNode",
    "ErrorKind",
    "ErrorRecord",
    "LiteralText",
    "SourceRef",
    "CallbackError",
    "ComposeError",
    "CycleError",
    "DepthExceededError",
    "MissingSlotError",
    "SourceError",
    "ValidationError",
]
