"""Shared pytest configuration and fixtures for the test suite."""

import atexit
import os
import shutil
import tempfile
from pathlib import Path

import pytest

_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="anisync-tests-"))
os.environ["ANISYNC_DATA_PATH"] = str(_TEST_DATA_DIR)
os.environ.pop("ANISYNC_ANILIST_TOKEN", None)

from anisync.config import settings as settings_module  # noqa: E402

settings_module.get_config.cache_clear()


@pytest.fixture(autouse=True)
def _reset_config():
    """Ensure each test reads a fresh configuration."""
    settings_module.get_config.cache_clear()
    yield
    settings_module.get_config.cache_clear()


@atexit.register
def _cleanup_test_data_dir() -> None:
    """Remove the temporary test data directory after the test session."""
    shutil.rmtree(_TEST_DATA_DIR, ignore_errors=True)
