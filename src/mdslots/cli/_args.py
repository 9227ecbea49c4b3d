"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse

from mdslots.core.composition.types import (
    FILE_ERROR_CHOICES,
    MISSING_SLOT_CHOICES,
    RESOLVE_FROM_CHOICES,
)


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )


def add_template_arg(parser: argparse.ArgumentParser, required: bool = True) -> None:
    """Add the positional template path."""
    if required:
        parser.add_argument("template", help="Path to the template Markdown file")
    else:
        parser.add_argument(
            "template",
            nargs="?",
            help="Path to the template Markdown file (may come from --config)",
        )


def add_compose_option_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags overriding compose options.

    Unset flags stay ``None`` so config file values and defaults apply.
    """
    parser.add_argument(
        "--on-missing-slot",
        dest="on_missing_slot",
        choices=MISSING_SLOT_CHOICES,
        help="Outlets without a slot value: error aborts, ignore removes, keep leaves the marker",
    )
    parser.add_argument(
        "--on-file-error",
        dest="on_file_error",
        choices=FILE_ERROR_CHOICES,
        help="Missing/unreadable files: throw aborts, warn-empty uses empty text",
    )
    parser.add_argument(
        "--resolve-from",
        dest="resolve_from",
        choices=RESOLVE_FROM_CHOICES,
        help="Resolve relative paths from the working directory or the parent file",
    )
    parser.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        help="Maximum nesting depth of file-backed documents",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Resolve slots one after another instead of concurrently",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add standard flags that most commands use: --json, --verbose."""
    add_json_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_verbose_flag",
    "add_template_arg",
    "add_compose_option_flags",
    "add_standard_flags",
]
