"""
mdslots outlets command.

SUMMARY: List the outlets a template exposes
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mdslots.cli import OutputFormatter, add_json_flag, add_template_arg
from mdslots.core.composition import ContentParser

SUMMARY = "List the outlets a template exposes"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_template_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Print distinct unprotected outlet names in discovery order."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    if args.template == "-":
        content = sys.stdin.read()
        label = None
    else:
        path = Path(args.template).expanduser()
        if not path.is_file():
            formatter.error(
                FileNotFoundError(str(path)),
                f"Template file not found: {path}",
                error_code="not_found",
            )
            return 1
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            formatter.error(e, f"Failed to read template {path}: {e}", error_code="read_error")
            return 1
        label = str(path)

    parsed = ContentParser().parse(content)
    names = parsed.names

    if formatter.json_mode:
        formatter.json_output({
            "template": label,
            "outlets": names,
            "occurrences": len(parsed.placeholders),
        })
        return 0

    header = f"Outlets found in {label}:" if label else "Outlets found:"
    formatter.text(header)
    if names:
        for name in names:
            formatter.text(f"- {name}")
    else:
        formatter.text("No outlets found")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
