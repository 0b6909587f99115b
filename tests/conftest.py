"""
Shared test fixtures for tracker-cli tests.
Isolates config files and environment so no test reads the real
~/.tracker.ini or makes API calls.
"""

import os
import sys

import pytest

# Add project root to path so imports work without an install
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

_ENV_KEYS = [
    "TRACKER_CONFIG",
    "TRACKER_API_URL",
    "TRACKER_HTTP_TIMEOUT_SECONDS",
    "TRACKER_HTTP_MAX_RESPONSE_BYTES",
    "TRACKER_HTTP_LOG",
]


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Ensure every test starts with a clean config state."""
    from tracker_cli import config

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(config, "SYSTEM_CONFIG_PATH", str(tmp_path / "etc-tracker.ini"))
    monkeypatch.setattr(config, "API_URL", config.DEFAULT_API_URL)
    monkeypatch.setattr(config, "HTTP_TIMEOUT_SECONDS", 30)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)


@pytest.fixture
def write_config(tmp_path):
    """Write an INI file and return its path."""

    def _write(text, name="tracker.ini"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def user_config():
    """Write ~/.tracker.ini (HOME is already isolated)."""

    def _write(text):
        path = os.path.join(os.path.expanduser("~"), ".tracker.ini")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    return _write
