from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def fruit_dir(tmp_path: Path) -> Path:
    """A directory holding two subdirectories and a file"""
    (tmp_path / "apple").mkdir()
    (tmp_path / "banana").mkdir()
    (tmp_path / "banana" / "inner").mkdir()
    (tmp_path / "readme.txt").write_text("hello")
    return tmp_path
