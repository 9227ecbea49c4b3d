"""Composition config loading.

A config file (YAML, or JSON by ``.json`` extension) describes a template, its
slots and compose options::

    template: ./README.tpl.md
    slots:
      title: My Project            # literal text
      intro: {file: ./intro.md}    # file contents, not scanned
      usage:
        file: ./usage.tpl.md       # nested template with its own slots
        slots:
          example: {content: "mdslots compose README.tpl.md"}
    options:
      onMissingSlot: ignore

Relative paths in the file resolve against the file's own directory.

Precedence (lowest to highest):
- options: bundled defaults -> config ``options`` -> command-line flags
- slots:   config ``slots``  -> command-line ``--slot`` values
"""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from mdslots.core.composition.compose import validate_options
from mdslots.core.composition.types import (
    ComposeOptions,
    DocumentNode,
    LiteralText,
    SlotValue,
    SourceRef,
)
from mdslots.core.exceptions import ConfigError, ValidationError
from mdslots.core.schemas.validation import validate_payload
from mdslots.core.utils.io import read_json, read_yaml
from mdslots.data import read_yaml as read_data_yaml

from .nodes import map_node_paths, slots_from_mapping

logger = logging.getLogger(__name__)

SLOT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
CONFIG_SCHEMA = "config.schema"


@dataclass
class CompositionConfig:
    """A parsed config file with paths already made absolute."""

    template: Optional[str] = None
    slots: Dict[str, SlotValue] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None


def load_defaults() -> Dict[str, Any]:
    """Bundled compose defaults (camelCase option names)."""
    data = read_data_yaml("config", "defaults.yaml")
    return dict(data.get("compose") or {})


def _read_payload(path: Path) -> Any:
    try:
        if path.suffix.lower() == ".json":
            return read_json(path, raise_on_error=True)
        return read_yaml(path, default={}, raise_on_error=True)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}", context={"path": str(path)}) from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {path}\n{exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file: {path}\n{exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to load configuration {path}: {exc}") from exc


def load_config_file(path: Path) -> CompositionConfig:
    """Load, validate and path-resolve a composition config file.

    Raises:
        ConfigError: Unreadable/unparseable file or invalid slot sources.
        SchemaValidationError: Payload violates the bundled schema.
    """
    path = Path(path).expanduser().absolute()
    payload = _read_payload(path)
    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration must be a mapping: {path}")
    validate_payload(payload, CONFIG_SCHEMA)

    base_dir = path.parent

    def _abs(p: str) -> str:
        return os.path.normpath(str(base_dir / Path(p).expanduser()))

    try:
        slots = slots_from_mapping(payload.get("slots") or {})
    except ValidationError as exc:
        raise ConfigError(f"Invalid slots in {path}: {exc}") from exc

    # Resolve every file reference against the config file's directory.
    rooted = map_node_paths(DocumentNode(text="", slots=slots), _abs)
    template = payload.get("template")
    logger.debug("loaded config %s (%d slots)", path, len(slots))
    return CompositionConfig(
        template=_abs(template) if template else None,
        slots=dict(rooted.slots),
        options=dict(payload.get("options") or {}),
        path=path,
    )


def parse_slot_argument(raw: str) -> Tuple[str, str]:
    """Split ``name=value`` (``value`` may be ``@file``)."""
    name, sep, value = raw.partition("=")
    if not sep:
        raise ValidationError(
            f"Invalid slot format: {raw}. Expected format: name=value or name=@file.md"
        )
    if not name:
        raise ValidationError(f"Empty slot name in: {raw}")
    if not SLOT_NAME_PATTERN.match(name):
        raise ValidationError(
            f"Invalid slot name: {name}. Slot names may contain letters, digits, '-' and '_'"
        )
    return name, value


def parse_cli_slots(raw: Mapping[str, str], base_dir: Path) -> Dict[str, SlotValue]:
    """Convert ``--slot`` values; ``@path`` becomes a file reference."""
    result: Dict[str, SlotValue] = {}
    for name, value in raw.items():
        if value.startswith("@"):
            result[name] = SourceRef(os.path.normpath(str(base_dir / Path(value[1:]).expanduser())))
        else:
            result[name] = LiteralText(value)
    return result


def build_request(
    template: Optional[str],
    cli_slots: Mapping[str, str],
    *,
    config_path: Optional[Path] = None,
    cli_options: Optional[Mapping[str, Any]] = None,
    cwd: Optional[Path] = None,
) -> Tuple[DocumentNode, ComposeOptions]:
    """Merge defaults, config file and command-line input into a request."""
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    config = load_config_file(config_path) if config_path else CompositionConfig()

    if template:
        template_path = os.path.normpath(str(cwd / Path(template).expanduser()))
    elif config.template:
        template_path = config.template
    else:
        raise ValidationError(
            "Template file is required. Use: mdslots compose <template> or set 'template' in the config file"
        )

    slot_base = config.path.parent if config.path else cwd
    slots: Dict[str, SlotValue] = {**config.slots, **parse_cli_slots(cli_slots, slot_base)}

    merged: Dict[str, Any] = {**load_defaults(), **config.options}
    merged.update({k: v for k, v in (cli_options or {}).items() if v is not None})
    options = validate_options(merged)

    return DocumentNode(source=template_path, slots=slots), options


__all__ = [
    "SLOT_NAME_PATTERN",
    "CompositionConfig",
    "load_defaults",
    "load_config_file",
    "parse_slot_argument",
    "parse_cli_slots",
    "build_request",
]
