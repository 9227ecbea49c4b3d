from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_MDSLOTS_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, level: str = "WARNING", stream: Optional[TextIO] = None) -> None:
    """Route ``mdslots`` log records to ``stream`` (stderr by default).

    Idempotent per-process: a previously installed mdslots handler is
    replaced, other handlers are left alone.
    """
    global _MDSLOTS_HANDLER

    logger = logging.getLogger("mdslots")
    logger.setLevel(_level_from_name(level))

    if _MDSLOTS_HANDLER is not None:
        logger.removeHandler(_MDSLOTS_HANDLER)
        _MDSLOTS_HANDLER.close()
        _MDSLOTS_HANDLER = None

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    _MDSLOTS_HANDLER = handler


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the installed handler and restore propagation."""
    global _MDSLOTS_HANDLER, _JSON_MODE_NULL_HANDLER_INSTALLED
    logger = logging.getLogger("mdslots")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    _MDSLOTS_HANDLER = None
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib logging's ``lastResort`` handler off stderr in ``--json`` mode.

    Without any handler, WARNING records (e.g. collected composition errors)
    would be printed to stderr next to the JSON payload.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    logger = logging.getLogger("mdslots")
    if logger.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests", "suppress_lastresort_in_json_mode"]
