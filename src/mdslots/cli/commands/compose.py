"""
mdslots compose command.

SUMMARY: Compose a Markdown template by filling its outlets
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from mdslots.cli import (
    OutputFormatter,
    add_compose_option_flags,
    add_standard_flags,
    add_template_arg,
)
from mdslots.core.composition import compose
from mdslots.core.config import build_request, parse_slot_argument
from mdslots.core.exceptions import ComposeError, ConfigError, ValidationError
from mdslots.core.utils.io import write_text

SUMMARY = "Compose a Markdown template by filling its outlets"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_template_arg(parser, required=False)
    parser.add_argument(
        "--slot",
        "-s",
        dest="slots",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Fill a slot with inline content, or with a file's content via NAME=@file.md",
    )
    parser.add_argument(
        "--config",
        "-c",
        help="YAML or JSON file with template, slots and options",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write output to this file instead of stdout",
    )
    add_compose_option_flags(parser)
    add_standard_flags(parser)


def _cli_options(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "onMissingSlot": getattr(args, "on_missing_slot", None),
        "onFileError": getattr(args, "on_file_error", None),
        "resolveFrom": getattr(args, "resolve_from", None),
        "maxDepth": getattr(args, "max_depth", None),
        "parallel": False if getattr(args, "sequential", False) else None,
    }


def main(args: argparse.Namespace) -> int:
    """Compose the template and emit the result."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    verbose = bool(getattr(args, "verbose", False))

    try:
        raw_slots: Dict[str, str] = {}
        for raw in args.slots or []:
            name, value = parse_slot_argument(raw)
            raw_slots[name] = value

        node, options = build_request(
            args.template,
            raw_slots,
            config_path=Path(args.config) if args.config else None,
            cli_options=_cli_options(args),
        )
        logger.debug("composing %s with %d slot(s)", node.source, len(node.slots))
        result = compose(node, options)
    except ConfigError as e:
        formatter.error(e, f"Configuration loading failed: {e}", error_code="config_error")
        return 1
    except ValidationError as e:
        formatter.error(e, error_code="validation_error")
        return 1
    except ComposeError as e:
        formatter.error(e, f"Composition failed: {e}", error_code=e.kind.value)
        return 1

    output_path = None
    if args.output:
        output_path = Path(args.output).expanduser().absolute()
        try:
            write_text(output_path, result.text)
        except OSError as e:
            formatter.error(e, f"Failed to write output file: {e}", error_code="output_error")
            return 1

    if formatter.json_mode:
        payload = result.to_dict()
        payload["output"] = str(output_path) if output_path else None
        formatter.json_output({"status": "success", **payload})
        return 0

    if result.errors:
        formatter.report_errors(result.errors, verbose=verbose)
    if output_path is None:
        formatter.document(result.text)
    elif verbose:
        print(f"Output written to: {output_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
