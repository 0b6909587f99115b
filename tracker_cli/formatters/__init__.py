"""Output formatting package for tracker-cli.

Re-exports all public names so consumers can do:
    from tracker_cli.formatters import format_story
"""

from tracker_cli.formatters._core import (
    ERROR_HEADER,
    format_errors,
    message_response,
    output,
    pretty_print,
    print_api_errors,
)
from tracker_cli.formatters._projects import (
    format_project,
    format_project_list,
)
from tracker_cli.formatters._stories import (
    STORY_DIVIDER,
    format_note,
    format_stories,
    format_story,
)
from tracker_cli.formatters._table import (
    _CONTROL_RE,
    _sanitize_str,
    _table,
    _trunc,
)

__all__ = [
    "ERROR_HEADER",
    "STORY_DIVIDER",
    "_CONTROL_RE",
    "_sanitize_str",
    "_table",
    "_trunc",
    "format_errors",
    "format_note",
    "format_project",
    "format_project_list",
    "format_stories",
    "format_story",
    "message_response",
    "output",
    "pretty_print",
    "print_api_errors",
]
