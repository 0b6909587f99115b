"""
tracker-cli shared configuration, constants, and settings loading.
Standalone module — imports only from exceptions.py.
"""

import configparser
import functools
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from tracker_cli.exceptions import ConfigError

# ---------------------------------------------------------------------------
# Environment helpers
# ---------------------------------------------------------------------------


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "1.0.0"
CONTRACT_SCHEMA_VERSION = "1.0"

VALID_STORY_TYPES = {"feature", "release", "bug", "chore"}
VALID_STORY_STATES = {
    "unscheduled",
    "unstarted",
    "started",
    "finished",
    "delivered",
    "accepted",
    "rejected",
}
VALID_FORMATS = {"text", "json"}

DEFAULT_API_URL = "https://www.pivotaltracker.com/services/v5"
SYSTEM_CONFIG_PATH = "/etc/tracker.ini"
USER_CONFIG_FILENAME = ".tracker.ini"

# ---------------------------------------------------------------------------
# Transport knobs (environment only)
# ---------------------------------------------------------------------------

API_URL = os.environ.get("TRACKER_API_URL") or DEFAULT_API_URL
HTTP_TIMEOUT_SECONDS = _env_int("TRACKER_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RESPONSE_BYTES = _env_int("TRACKER_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("TRACKER_HTTP_LOG", False)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Merged user configuration. Built once per invocation, never mutated."""

    api_key: str | None = None
    me: str | None = None
    default_project: str | None = None
    projects: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    api_url: str = DEFAULT_API_URL
    timeout: int = 30

    def project_id(self, name):
        """Look up a named project; None when the name is not configured."""
        if name is None:
            return None
        return self.projects.get(name)

    def require_api_key(self):
        if not self.api_key:
            raise ConfigError(
                "[ERROR] No API key configured.\n"
                f"  Add 'APIKey = <token>' to the [General] section of ~/{USER_CONFIG_FILENAME}"
            )
        return self.api_key


def default_config_paths():
    """Ordered config sources, lowest precedence first."""
    paths = [SYSTEM_CONFIG_PATH, os.path.join(os.path.expanduser("~"), USER_CONFIG_FILENAME)]
    extra = os.environ.get("TRACKER_CONFIG")
    if extra:
        paths.append(os.path.expanduser(extra))
    return paths


def read_config_source(path):
    """Parse one INI file into {section: {key: value}}. Key case is preserved."""
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        with open(path, encoding="utf-8") as f:
            parser.read_file(f, source=path)
    except OSError as e:
        raise ConfigError(f"[ERROR] Cannot read config file {path}: {e.strerror}") from e
    except (configparser.Error, UnicodeDecodeError) as e:
        raise ConfigError(f"[ERROR] Malformed config file {path}: {e}") from e
    return {section: dict(parser.items(section)) for section in parser.sections()}


def _merge_two(base, override):
    merged = {section: dict(values) for section, values in base.items()}
    for section, values in override.items():
        merged.setdefault(section, {}).update(values)
    return merged


def merge_sources(sources):
    """Fold parsed sources left-to-right; later sources win key-by-key."""
    return functools.reduce(_merge_two, sources, {})


def _blank_to_none(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


def settings_from_mapping(mapping):
    """Convert a merged {section: {key: value}} mapping into Settings."""
    general = mapping.get("General", {})
    projects = {}
    for name, raw_id in mapping.get("Projects", {}).items():
        try:
            projects[name] = int(raw_id)
        except ValueError:
            raise ConfigError(
                f"[ERROR] Project '{name}' has a non-integer ID '{raw_id}' in [Projects]."
            ) from None

    timeout = HTTP_TIMEOUT_SECONDS
    raw_timeout = _blank_to_none(general.get("Timeout"))
    if raw_timeout is not None:
        try:
            timeout = int(raw_timeout)
        except ValueError:
            timeout = 0
        if timeout <= 0:
            raise ConfigError(
                f"[ERROR] Timeout must be a positive integer, got '{raw_timeout}'."
            )

    return Settings(
        api_key=_blank_to_none(general.get("APIKey")),
        me=_blank_to_none(general.get("Me")),
        default_project=_blank_to_none(general.get("DefaultProject")),
        projects=MappingProxyType(projects),
        api_url=_blank_to_none(general.get("APIUrl")) or API_URL,
        timeout=timeout,
    )


def load_settings(paths=None):
    """Load and merge every existing config source into one Settings value.

    Raises ConfigError when no source exists or any source is malformed.
    """
    if paths is None:
        paths = default_config_paths()
    sources = [read_config_source(p) for p in paths if os.path.exists(p)]
    if not sources:
        raise ConfigError(
            "[ERROR] No configuration file found.\n"
            f"  Create ~/{USER_CONFIG_FILENAME} with [General] and [Projects] sections."
        )
    return settings_from_mapping(merge_sources(sources))
