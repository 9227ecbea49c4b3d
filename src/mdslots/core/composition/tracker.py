"""Cycle detection and depth limiting for source-backed composition."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from mdslots.core.exceptions import CycleError, DepthExceededError

logger = logging.getLogger(__name__)


class DependencyTracker:
    """Track the active chain of source paths for one ``compose`` call.

    The stack never holds the same path twice and never grows beyond
    ``max_depth``. ``visited`` keeps every path pushed during the call, even
    after it has been popped.
    """

    def __init__(self, max_depth: int = 10, *, visited: Optional[Set[str]] = None) -> None:
        self._max_depth = max_depth
        self._stack: List[str] = []
        self._visited: Set[str] = visited if visited is not None else set()

    def check_and_push(self, path: str) -> None:
        """Push ``path`` onto the active chain.

        Raises:
            DepthExceededError: If the stack is already at ``max_depth``.
            CycleError: If ``path`` is already on the stack.
        """
        if len(self._stack) >= self._max_depth:
            chain = " -> ".join([*self._stack, path])
            raise DepthExceededError(
                f"Maximum composition depth of {self._max_depth} exceeded. Current stack: {chain}",
                source_path=path,
                context={"stack": list(self._stack), "max_depth": self._max_depth},
            )

        if path in self._stack:
            cycle = self._stack[self._stack.index(path):]
            chain = " -> ".join([*cycle, path])
            raise CycleError(
                f"Circular dependency detected: {chain}",
                source_path=path,
                context={"cycle": [*cycle, path]},
            )

        self._stack.append(path)
        self._visited.add(path)
        logger.debug("push %s (depth %d/%d)", path, len(self._stack), self._max_depth)

    def pop(self) -> None:
        """Remove the most recently pushed path; no-op on an empty stack."""
        if self._stack:
            path = self._stack.pop()
            logger.debug("pop %s (depth %d/%d)", path, len(self._stack), self._max_depth)

    def clear(self) -> None:
        self._stack.clear()
        self._visited.clear()

    def fork(self) -> "DependencyTracker":
        """Return a tracker with a copy of the active chain.

        The fork shares the visited set and maximum depth, so sibling branches
        resolved concurrently keep independent chains.
        """
        child = DependencyTracker(self._max_depth, visited=self._visited)
        child._stack = list(self._stack)
        return child

    @property
    def stack(self) -> List[str]:
        return list(self._stack)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def remaining_depth(self) -> int:
        return max(0, self._max_depth - len(self._stack))

    @property
    def visited(self) -> List[str]:
        return sorted(self._visited)

    def has_visited(self, path: str) -> bool:
        return path in self._visited

    def snapshot(self) -> Dict[str, Any]:
        """Debug view of the tracker state."""
        return {
            "stack": list(self._stack),
            "depth": len(self._stack),
            "max_depth": self._max_depth,
            "visited": sorted(self._visited),
        }


__all__ = ["DependencyTracker"]
