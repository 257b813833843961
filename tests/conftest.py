"""
Pytest configuration and fixtures
"""
from pathlib import Path
import sys
from typing import Callable, Dict

import pytest


PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


_REFACTOR_SOURCE = (
    "// TODO: refactor parser\n"
    "// category=core issue=7\n"
    "// needs cleanup\n"
    "x := 1\n"
)


@pytest.fixture
def refactor_source() -> str:
    return _REFACTOR_SOURCE


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write a small source tree under tmp_path/project and return its root."""
    root = tmp_path / "project"

    def _make(files: Dict[str, str]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make
