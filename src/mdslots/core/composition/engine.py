"""Composition engine: recursive slot resolution for document nodes.

Per node:
1. OBTAIN TEXT  - literal text, or a source read through cache/provider while
                  the path sits on the dependency tracker's active chain
2. SCAN         - find unprotected outlets (skip the rest if none)
3. RESOLVE      - one value per distinct outlet name (sequential or gathered)
4. SUBSTITUTE   - replace outlets that received a value
5. POP          - leave the tracker as it was found, on every exit path

Runtime problems are recorded on the ``ResolutionContext`` and rendered as a
stand-in (kept marker, empty string or ``<!-- ERROR: ... -->``). They are
raised out of the call only under ``on_missing_slot="error"`` or
``on_file_error="throw"``.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from mdslots.core.exceptions import (
    CallbackError,
    ComposeError,
    CycleError,
    DepthExceededError,
    MissingSlotError,
    SourceError,
    ValidationError,
)

from .parser import ContentParser
from .sources import FileSystemSource, SourceProvider
from .tracker import DependencyTracker
from .types import (
    Callback,
    ComposeOptions,
    ComposeResult,
    DocumentNode,
    ErrorRecord,
    LiteralText,
    SlotValue,
    SourceRef,
)

logger = logging.getLogger(__name__)


def error_marker(message: str) -> str:
    """Inline diagnostic rendered in place of content that failed to resolve."""
    return f"<!-- ERROR: {message} -->"


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass
class ResolutionContext:
    """Call-scoped state threaded through every recursive resolution."""

    options: ComposeOptions
    tracker: DependencyTracker
    errors: List[ErrorRecord] = field(default_factory=list)

    @classmethod
    def for_call(cls, options: ComposeOptions) -> "ResolutionContext":
        return cls(options=options, tracker=DependencyTracker(options.max_depth))

    def record(self, error: ComposeError) -> None:
        logger.warning("%s: %s", error.kind.value, error)
        self.errors.append(error.to_record())

    def fork(self) -> "ResolutionContext":
        """Context for a concurrently resolved branch.

        Shares options and the error list; owns a fork of the active chain.
        """
        return ResolutionContext(options=self.options, tracker=self.tracker.fork(), errors=self.errors)


class CompositionEngine:
    """Compose document nodes, resolving their slots recursively.

    Usage:
        engine = CompositionEngine()
        result = await engine.compose(DocumentNode(source="README.tpl.md", slots={...}))
    """

    def __init__(
        self,
        source: Optional[SourceProvider] = None,
        parser: Optional[ContentParser] = None,
    ) -> None:
        self.source: SourceProvider = source or FileSystemSource()
        self.parser = parser or ContentParser()

    async def compose(
        self, node: DocumentNode, options: Optional[ComposeOptions] = None
    ) -> ComposeResult:
        """Compose ``node``. Inputs are assumed validated (see ``compose.py``)."""
        ctx = ResolutionContext.for_call(options or ComposeOptions())
        text = await self._compose_node(node, ctx, parent_path=None, in_slot=False)
        return ComposeResult(text=text, errors=ctx.errors or None)

    # ------------------------------------------------------------------
    # Node resolution
    # ------------------------------------------------------------------
    async def _compose_node(
        self,
        node: DocumentNode,
        ctx: ResolutionContext,
        parent_path: Optional[str],
        in_slot: bool,
        fill: bool = True,
    ) -> str:
        if node.source is None:
            text = node.text or ""
            return await self._fill(text, node.slots, ctx, parent_path) if fill else text

        path = self._resolve_path(node.source, parent_path, ctx.options)
        try:
            ctx.tracker.check_and_push(path)
        except (CycleError, DepthExceededError) as exc:
            ctx.record(exc)
            if in_slot and ctx.options.on_missing_slot == "error":
                raise
            return error_marker(str(exc))

        try:
            text = await self._load(path, ctx)
            if text is None:
                return ""
            if not fill:
                return text
            return await self._fill(text, node.slots, ctx, path)
        finally:
            ctx.tracker.pop()

    def _resolve_path(self, path: str, parent_path: Optional[str], options: ComposeOptions) -> str:
        if options.resolve_from == "file" and parent_path:
            return self.source.resolve(path, parent_path, "file")
        return self.source.resolve(path, options.base_path, "cwd")

    async def _load(self, path: str, ctx: ResolutionContext) -> Optional[str]:
        """Read ``path`` through the cache; ``None`` means "use empty text"."""
        cache = ctx.options.cache
        if cache is not None and path in cache:
            logger.debug("cache hit %s", path)
            return cache[path]

        try:
            if not await _maybe_await(self.source.exists(path)):
                raise SourceError(f"File not found: {path}", source_path=path)
            text = await _maybe_await(self.source.read(path))
        except SourceError as exc:
            return self._source_failed(exc, ctx)
        except Exception as exc:
            err = SourceError(f"Failed to read file {path}: {exc}", source_path=path)
            err.__cause__ = exc
            return self._source_failed(err, ctx)

        if cache is not None:
            cache[path] = text
        return text

    def _source_failed(self, exc: SourceError, ctx: ResolutionContext) -> None:
        ctx.record(exc)
        if ctx.options.on_file_error == "throw":
            raise exc
        return None

    # ------------------------------------------------------------------
    # Slot resolution
    # ------------------------------------------------------------------
    async def _fill(
        self,
        text: str,
        slots: Mapping[str, SlotValue],
        ctx: ResolutionContext,
        current_path: Optional[str],
    ) -> str:
        parsed = self.parser.parse(text)
        if not parsed.placeholders:
            return text

        names = parsed.names
        if ctx.options.parallel:
            outcomes = await asyncio.gather(
                *(self._resolve_slot(name, slots, ctx.fork(), current_path) for name in names),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome
            results: List[Optional[str]] = list(outcomes)
        else:
            results = []
            for name in names:
                results.append(await self._resolve_slot(name, slots, ctx, current_path))

        replacements: Dict[str, str] = {
            name: value for name, value in zip(names, results) if value is not None
        }
        return self.parser.substitute_parsed(parsed, replacements)

    async def _resolve_slot(
        self,
        name: str,
        slots: Mapping[str, SlotValue],
        ctx: ResolutionContext,
        current_path: Optional[str],
    ) -> Optional[str]:
        """Resolve one outlet name; ``None`` leaves the marker verbatim."""
        value = slots.get(name)
        if value is None:
            exc = MissingSlotError(
                f"Missing slot: {name}", source_path=current_path, context={"slot": name}
            )
            ctx.record(exc)
            policy = ctx.options.on_missing_slot
            if policy == "error":
                raise exc
            if policy == "ignore":
                return ""
            return None
        return await self._resolve_value(value, ctx, current_path)

    async def _resolve_value(
        self, value: SlotValue, ctx: ResolutionContext, current_path: Optional[str]
    ) -> str:
        if isinstance(value, LiteralText):
            return value.text
        if isinstance(value, SourceRef):
            ref = DocumentNode(source=value.path)
            return await self._compose_node(ref, ctx, current_path, in_slot=True, fill=False)
        if isinstance(value, DocumentNode):
            return await self._compose_node(value, ctx, current_path, in_slot=True)
        if isinstance(value, Callback):
            return await self._invoke(value, ctx, current_path)
        raise ValidationError(f"Invalid slot value type: {type(value).__name__}")

    async def _invoke(
        self, callback: Callback, ctx: ResolutionContext, current_path: Optional[str]
    ) -> str:
        try:
            result = await _maybe_await(callback.func())
        except Exception as exc:
            err = CallbackError(f"Function execution failed: {exc}", source_path=current_path)
            err.__cause__ = exc
            return self._callback_failed(err, ctx)

        if not isinstance(result, str):
            err = CallbackError(
                f"Function execution failed: expected str, got {type(result).__name__}",
                source_path=current_path,
            )
            return self._callback_failed(err, ctx)
        return result

    def _callback_failed(self, exc: CallbackError, ctx: ResolutionContext) -> str:
        ctx.record(exc)
        if ctx.options.on_file_error == "warn-empty":
            return ""
        return error_marker(str(exc))


__all__ = ["CompositionEngine", "ResolutionContext", "error_marker"]
