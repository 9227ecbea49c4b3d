import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'mdslots'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


from mdslots.core.stdlib_logging import reset_stdlib_logging_for_tests


@pytest.fixture(autouse=True)
def _reset_mdslots_logging():
    """CLI runs install handlers on the ``mdslots`` logger; undo that per test."""
    reset_stdlib_logging_for_tests()
    yield
    reset_stdlib_logging_for_tests()


@pytest.fixture
def write_md(tmp_path: Path):
    """Write a markdown file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
