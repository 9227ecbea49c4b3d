"""Outlet marker parsing for markdown content.

Marker syntax (keyword is case-insensitive, whitespace tolerated)::

    <!-- outlet: name -->
    <!-- slot: name -->

Markers inside fenced code blocks (``` or ~~~) and indented code blocks are
protected: they are neither reported nor substituted.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Mapping, Tuple

KEYWORDS: Tuple[str, ...] = ("outlet", "slot")

OUTLET_PATTERN = re.compile(
    r"<!--\s*(?:" + "|".join(KEYWORDS) + r")\s*:\s*([A-Za-z0-9_-]+)\s*-->",
    re.IGNORECASE,
)

# Opening/closing fence: three or more backticks or tildes at line start.
FENCE_PATTERN = re.compile(r"^(`{3,}|~{3,})[^\n]*$", re.MULTILINE)


@dataclass(frozen=True)
class Placeholder:
    """An outlet marker located in parsed text."""

    name: str
    start: int
    end: int
    match: str


@dataclass(frozen=True)
class ProtectedRegion:
    """A span exempt from substitution."""

    start: int
    end: int
    type: str  # "fenced" | "indented"

    def contains(self, start: int, end: int) -> bool:
        return start >= self.start and end <= self.end


@dataclass(frozen=True)
class ParsedContent:
    """Result of one scan pass: protected regions plus unprotected outlets."""

    text: str
    regions: Tuple[ProtectedRegion, ...]
    placeholders: Tuple[Placeholder, ...]

    @property
    def names(self) -> List[str]:
        """Distinct outlet names in discovery order."""
        seen: dict[str, None] = {}
        for p in self.placeholders:
            seen.setdefault(p.name, None)
        return list(seen)


class ContentParser:
    """Parser for markdown content with outlet markers.

    Region detection and marker detection share a single pass (``parse``), so
    a marker protected for lookup is protected for substitution too.
    """

    def parse(self, text: str) -> ParsedContent:
        regions = self._find_regions(text)
        placeholders: List[Placeholder] = []
        for match in OUTLET_PATTERN.finditer(text):
            start, end = match.span()
            if any(region.contains(start, end) for region in regions):
                continue
            placeholders.append(
                Placeholder(name=match.group(1), start=start, end=end, match=match.group(0))
            )
        return ParsedContent(text=text, regions=tuple(regions), placeholders=tuple(placeholders))

    def find_placeholders(self, text: str) -> List[Placeholder]:
        return list(self.parse(text).placeholders)

    def has_placeholders(self, text: str) -> bool:
        return bool(self.parse(text).placeholders)

    def placeholder_names(self, text: str) -> List[str]:
        return self.parse(text).names

    def substitute(self, text: str, replacements: Mapping[str, str]) -> str:
        """Replace unprotected outlets that have an entry in ``replacements``.

        Outlets without an entry are left verbatim. Replacement text is never
        re-scanned.
        """
        return self.substitute_parsed(self.parse(text), replacements)

    def substitute_parsed(self, parsed: ParsedContent, replacements: Mapping[str, str]) -> str:
        result = parsed.text
        # Reverse order keeps earlier offsets valid.
        for placeholder in reversed(parsed.placeholders):
            replacement = replacements.get(placeholder.name)
            if replacement is None:
                continue
            result = result[: placeholder.start] + replacement + result[placeholder.end :]
        return result

    # ------------------------------------------------------------------
    # Region detection
    # ------------------------------------------------------------------
    def _find_regions(self, text: str) -> List[ProtectedRegion]:
        regions = self._find_fenced(text)
        regions.extend(self._find_indented(text, regions))
        return sorted(regions, key=lambda r: r.start)

    def _find_fenced(self, text: str) -> List[ProtectedRegion]:
        regions: List[ProtectedRegion] = []
        open_start = -1
        open_fence = ""

        for match in FENCE_PATTERN.finditer(text):
            fence = match.group(1)
            if open_start == -1:
                open_start = match.start()
                open_fence = fence
            elif fence == open_fence:
                regions.append(ProtectedRegion(open_start, match.end(), "fenced"))
                open_start = -1
                open_fence = ""

        if open_start != -1:
            regions.append(ProtectedRegion(open_start, len(text), "fenced"))
        return regions

    def _find_indented(self, text: str, fenced: List[ProtectedRegion]) -> List[ProtectedRegion]:
        regions: List[ProtectedRegion] = []
        line_start = 0
        block_start = -1

        for line in text.split("\n"):
            in_fence = any(r.start <= line_start <= r.end for r in fenced)
            indented = line.startswith("    ") or line.startswith("\t")
            blank = not line.strip()

            if in_fence:
                if block_start != -1:
                    regions.append(ProtectedRegion(block_start, line_start, "indented"))
                    block_start = -1
            else:
                if indented and not blank:
                    if block_start == -1:
                        block_start = line_start
                elif block_start != -1 and not blank:
                    regions.append(ProtectedRegion(block_start, line_start, "indented"))
                    block_start = -1

            line_start += len(line) + 1

        if block_start != -1:
            regions.append(ProtectedRegion(block_start, len(text), "indented"))
        return regions


__all__ = [
    "KEYWORDS",
    "OUTLET_PATTERN",
    "Placeholder",
    "ProtectedRegion",
    "ParsedContent",
    "ContentParser",
]
