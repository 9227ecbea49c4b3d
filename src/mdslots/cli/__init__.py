"""
mdslots CLI package.

Provides the command-line interface with auto-discovery of commands
from cli/commands/.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
"""
from ._output import OutputFormatter, print_error
from ._args import (
    add_json_flag,
    add_verbose_flag,
    add_template_arg,
    add_compose_option_flags,
    add_standard_flags,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    "print_error",
    # Argument helpers
    "add_json_flag",
    "add_verbose_flag",
    "add_template_arg",
    "add_compose_option_flags",
    "add_standard_flags",
]
