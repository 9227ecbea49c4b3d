"""Tests for filesystem and in-memory source providers."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from mdslots.core.composition import FileSystemSource, MemorySource
from mdslots.core.exceptions import SourceError


class TestFileSystemSource:
    def test_read_returns_utf8_text(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.md"
        path.write_text("héllo", encoding="utf-8")

        assert FileSystemSource().read(str(path)) == "héllo"

    def test_read_missing_raises_source_error(self, tmp_path: Path) -> None:
        missing = str(tmp_path / "missing.md")

        with pytest.raises(SourceError) as exc_info:
            FileSystemSource().read(missing)

        assert str(exc_info.value) == f"File not found: {missing}"
        assert exc_info.value.source_path == missing

    def test_exists_is_false_for_directories(self, tmp_path: Path) -> None:
        source = FileSystemSource()
        (tmp_path / "file.md").write_text("x", encoding="utf-8")

        assert source.exists(str(tmp_path / "file.md"))
        assert not source.exists(str(tmp_path))
        assert not source.exists(str(tmp_path / "nope.md"))

    def test_absolute_paths_pass_through(self, tmp_path: Path) -> None:
        absolute = str(tmp_path / "a.md")

        assert FileSystemSource().resolve(absolute, "/elsewhere/parent.md", "file") == absolute

    def test_file_mode_uses_parent_directory(self, tmp_path: Path) -> None:
        parent = str(tmp_path / "docs" / "main.md")

        resolved = FileSystemSource().resolve("../shared/x.md", parent, "file")

        assert resolved == os.path.normpath(str(tmp_path / "shared" / "x.md"))

    def test_cwd_mode_uses_base_path_directory(self, tmp_path: Path) -> None:
        resolved = FileSystemSource().resolve("x.md", str(tmp_path), "cwd")

        assert resolved == str(tmp_path / "x.md")

    def test_cwd_mode_defaults_to_configured_cwd(self, tmp_path: Path) -> None:
        resolved = FileSystemSource(cwd=tmp_path).resolve("./a/../b.md")

        assert resolved == str(tmp_path / "b.md")


class TestMemorySource:
    def test_read_and_exists(self) -> None:
        source = MemorySource({"/a.md": "A"})

        assert source.exists("/a.md")
        assert not source.exists("/b.md")
        assert source.read("/a.md") == "A"

    def test_read_missing_raises_source_error(self) -> None:
        with pytest.raises(SourceError):
            MemorySource().read("/none.md")

    @pytest.mark.parametrize(
        "path, base, mode, expected",
        [
            ("/abs/./x.md", None, "cwd", "/abs/x.md"),
            ("x.md", None, "cwd", "/x.md"),
            ("x.md", "/base", "cwd", "/base/x.md"),
            ("x.md", "/docs/main.md", "file", "/docs/x.md"),
            ("../x.md", "/docs/sub/main.md", "file", "/docs/x.md"),
            ("x.md", "/main.md", "file", "/x.md"),
        ],
    )
    def test_resolve(self, path: str, base: str, mode: str, expected: str) -> None:
        assert MemorySource().resolve(path, base, mode) == expected  # type: ignore[arg-type]
