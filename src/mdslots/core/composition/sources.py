"""Source providers: where source-backed documents are read from."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Awaitable, Dict, Optional, Protocol, Union

from mdslots.core.exceptions import SourceError

from .types import ResolveFrom


class SourceProvider(Protocol):
    """Contract consumed by the composition engine.

    ``read`` and ``exists`` may return plain values or awaitables.
    """

    def read(self, path: str) -> Union[str, Awaitable[str]]: ...

    def exists(self, path: str) -> Union[bool, Awaitable[bool]]: ...

    def resolve(
        self, path: str, base_path: Optional[str] = None, mode: ResolveFrom = "cwd"
    ) -> str: ...


class FileSystemSource:
    """Read documents from the local filesystem as UTF-8 text."""

    def __init__(self, cwd: Optional[Path] = None) -> None:
        self.cwd = Path(cwd) if cwd is not None else None

    def read(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SourceError(f"File not found: {path}", source_path=path) from exc
        except PermissionError as exc:
            raise SourceError(f"Permission denied reading file: {path}", source_path=path) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(f"Failed to read file {path}: {exc}", source_path=path) from exc

    def exists(self, path: str) -> bool:
        try:
            return Path(path).is_file()
        except OSError:
            return False

    def resolve(
        self, path: str, base_path: Optional[str] = None, mode: ResolveFrom = "cwd"
    ) -> str:
        """Resolve ``path`` to an absolute path.

        Absolute paths pass through unchanged. In ``file`` mode ``base_path``
        is the parent document, so resolution is against its directory; in
        ``cwd`` mode ``base_path`` (if given) is a directory.
        """
        p = Path(path).expanduser()
        if p.is_absolute():
            return str(p)

        if mode == "file" and base_path:
            anchor = Path(base_path).parent
        elif base_path:
            anchor = Path(base_path)
        else:
            anchor = self.cwd or Path.cwd()
        return os.path.normpath(str(anchor.absolute() / p))


class MemorySource:
    """In-memory provider keyed by absolute POSIX-style paths.

    Useful for composing documents that never touch the filesystem.
    """

    def __init__(self, files: Optional[Dict[str, str]] = None, cwd: str = "/") -> None:
        self.files: Dict[str, str] = dict(files or {})
        self.cwd = cwd

    def read(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError as exc:
            raise SourceError(f"File not found: {path}", source_path=path) from exc

    def exists(self, path: str) -> bool:
        return path in self.files

    def resolve(
        self, path: str, base_path: Optional[str] = None, mode: ResolveFrom = "cwd"
    ) -> str:
        if path.startswith("/"):
            return _normalize(path)
        if mode == "file" and base_path:
            anchor = base_path.rsplit("/", 1)[0] or "/"
        else:
            anchor = base_path or self.cwd
        return _normalize(f"{anchor.rstrip('/')}/{path}")


def _normalize(path: str) -> str:
    parts: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return "/" + "/".join(parts)


__all__ = ["SourceProvider", "FileSystemSource", "MemorySource"]
