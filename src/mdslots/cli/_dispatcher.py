"""
Auto-discovery CLI dispatcher for mdslots.

Scans ``cli/commands`` for command modules and registers them.
Adding a new command = adding a .py file that defines ``SUMMARY``,
``register_args(parser)`` and ``main(args) -> int``.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from mdslots.cli._output import print_error
from mdslots.core.stdlib_logging import configure_stdlib_logging, suppress_lastresort_in_json_mode


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """Discover commands under cli/commands."""
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue

        cmd_name = item.stem
        try:
            module = importlib.import_module(f"mdslots.cli.commands.{cmd_name}")
        except ImportError as e:
            print(f"Warning: Could not import command {cmd_name}: {e}", file=sys.stderr)
            continue
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", cmd_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered commands."""
    parser = argparse.ArgumentParser(
        prog="mdslots",
        description="mdslots - compose Markdown documents by filling outlet markers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  mdslots compose template.md -s title='My Document' -s body=@body.md\n"
            "  mdslots compose template.md --config slots.yaml -o README.md\n"
            "  mdslots outlets template.md"
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in sorted(discover_commands().items()):
        summary = cmd_info["summary"]
        cmd_parser = subparsers.add_parser(cmd_name, help=summary, description=summary)
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from mdslots import __version__

    return __version__


def _configure_logging(args: argparse.Namespace) -> None:
    if getattr(args, "json", False):
        suppress_lastresort_in_json_mode()
        return
    configure_stdlib_logging(level="DEBUG" if getattr(args, "verbose", False) else "ERROR")


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the mdslots CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "_func", None)
    if not args.command or func is None:
        parser.print_help()
        return 0

    _configure_logging(args)
    try:
        return int(func(args))
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130


__all__ = ["main", "build_parser", "discover_commands"]
