"""Shared pytest setup: importable project root, clean RRT_* environment."""

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

_SETTINGS_VARS = ("RRT_SEPARATOR", "RRT_STRICT", "RRT_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolated_settings():
    """Keep RRT_* variables (from the shell or a loaded .env) out of other tests."""
    saved = {name: os.environ.pop(name) for name in _SETTINGS_VARS if name in os.environ}
    yield
    for name in _SETTINGS_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)
