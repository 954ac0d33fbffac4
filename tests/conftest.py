"""
Pytest configuration for the media client test suite.

This module configures the Python path to ensure test files can import
from the src directory properly.
"""
import sys
from pathlib import Path

import pytest

# Add project root to Python path so tests can import from src
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.common.settings import SettingsStore  # noqa: E402


@pytest.fixture
def settings(tmp_path: Path) -> SettingsStore:
    """Settings store backed by a file in the test's temp directory."""
    return SettingsStore(tmp_path / "settings.json")
