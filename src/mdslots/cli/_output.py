"""Unified CLI output formatting utilities.

Supports JSON and text output modes. Composed documents go to stdout;
diagnostics go to stderr.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, Optional

from mdslots.core.composition.types import ErrorRecord


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result to stderr."""
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {
                "error": error_code,
                "message": msg,
            }
            to_json = getattr(error, "to_json_error", None)
            if callable(to_json):
                output["details"] = to_json()
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)

    def document(self, content: str) -> None:
        """Write composed content to stdout exactly, plus a final newline."""
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")

    def report_errors(self, errors: Iterable[ErrorRecord], verbose: bool = False) -> None:
        """List collected composition errors on stderr (text mode only)."""
        if self.json_mode:
            return
        print("Composition completed with errors:", file=sys.stderr)
        for record in errors:
            if verbose:
                print(f"  [{record.kind.value}] {record.message}", file=sys.stderr)
                if record.source_path:
                    print(f"    Path: {record.source_path}", file=sys.stderr)
            else:
                print(f"  {record.message}", file=sys.stderr)
        print("", file=sys.stderr)


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)


__all__ = [
    "OutputFormatter",
    "print_error",
]
