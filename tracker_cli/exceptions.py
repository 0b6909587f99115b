"""
tracker-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1 — network, timeout, response-shape errors."""

    exit_code = 1


class UsageError(CliError):
    """Exit code 1 — bad or missing flags. Raised before any network call."""

    exit_code = 1


class ConfigError(CliError):
    """Exit code 1 — missing or malformed config file, missing API key."""

    exit_code = 1


class ProjectResolutionError(UsageError):
    """Exit code 1 — a named project is not in the config's project table."""


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
