"""tracker-cli — command-line front end for a remote story tracker."""

from tracker_cli.client import TrackerClient
from tracker_cli.config import VERSION, Settings, load_settings
from tracker_cli.exceptions import (
    CliError,
    ConfigError,
    ProjectResolutionError,
    UsageError,
)
from tracker_cli.models import (
    Action,
    ApiResult,
    ParsedOptions,
    StoryFields,
    StoryState,
    StoryType,
    TrackerRequest,
)

__all__ = [
    "VERSION",
    "Action",
    "ApiResult",
    "CliError",
    "ConfigError",
    "ParsedOptions",
    "ProjectResolutionError",
    "Settings",
    "StoryFields",
    "StoryState",
    "StoryType",
    "TrackerClient",
    "TrackerRequest",
    "UsageError",
    "load_settings",
]
