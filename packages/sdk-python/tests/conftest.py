"""Pytest fixtures for bzldeps_sdk tests."""

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def make_files(tmp_path: Path) -> Callable[..., Path]:
    """Create empty files (relative to tmp_path) and return the repository root."""

    def _make(*paths: str) -> Path:
        for rel in paths:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        return tmp_path

    return _make
