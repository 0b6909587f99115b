"""
tracker-cli — command-line front end for a remote story tracker
"""

import argparse
import json
import sys

from tracker_cli import config
from tracker_cli.actions import build_request, select_action
from tracker_cli.api import _mask_token
from tracker_cli.client import TrackerClient
from tracker_cli.commands import cmd_list_projects, run_request
from tracker_cli.exceptions import CliError, ConfigError, UsageError
from tracker_cli.formatters import pretty_print
from tracker_cli.models import Action, ParsedOptions
from tracker_cli.resolver import resolve

HELP_TEXT = """\
Usage: tracker <action> [options...]

Actions (one per invocation; the first match in this order wins):
  -L, --list-projects         List the named projects in your config file
  --show-project              Show the current project's settings
  -S, --show-story            Show a story (needs --story-id or --all-stories)
  --search <filter>           List stories matching a tracker search filter
  --add-story                 Create a story (needs --story)
  --update-story              Update a story (needs --story-id)
  --delete-story              Delete a story (needs --story-id)
  --add-note <text>           Add a note to a story (needs --story-id)

Project selection:
  -p, --project <name>        Named project from the [Projects] config section
  -P, --project-id <id>       Numeric project ID (default: DefaultProject)

Story options:
  -i, --story-id <id>         Story to show, update, delete, or annotate
  -a, --all-stories           With --show-story: show every story
  -n, --show-notes            Include notes when showing stories
  -s, --story <name>          Story name
  -d, --description <text>    Story description
  --requested-by <name>       Requester (default for --add-story: Me)
  -o, --owned-by <name>       Owner
  -l, --label <labels>        Label; repeat or comma-separate for several
  -e, --estimate <n>          Point estimate
  --created-at <date>         Creation date
  --deadline <date>           Deadline (release stories)
  -t, --story-type <type>     feature, release, bug, chore
  --feature, --bug, --chore, --release
                              Shorthand for --story-type
  --state <state>             unscheduled, unstarted, started, finished,
                              delivered, accepted, rejected

Global flags:
  --format text|json          Output format (default: text)
  --dry-run                   Print the request that would be sent
  -v, --verbose               Log HTTP requests to stderr
  --version                   Show version number
  -h, --help                  Show this help
  --man                       Show the full manual
"""

MAN_TEXT = (
    HELP_TEXT
    + f"""
Configuration:
  Settings are read from {config.SYSTEM_CONFIG_PATH}, then ~/{config.USER_CONFIG_FILENAME},
  then the file named by $TRACKER_CONFIG. Later files override earlier ones
  key by key.

    [General]
    APIKey = <your API token>
    Me = Your Name
    DefaultProject = Website
    # APIUrl = https://tracker.example.com/services/v5
    # Timeout = 30

    [Projects]
    Website = 123456
    Mobile = 234567

Environment:
  TRACKER_CONFIG                    Extra config file (highest precedence)
  TRACKER_API_URL                   API base URL when APIUrl is not set
  TRACKER_HTTP_TIMEOUT_SECONDS      Request timeout when Timeout is not set
  TRACKER_HTTP_MAX_RESPONSE_BYTES   Response size limit (default: 5000000)
  TRACKER_HTTP_LOG                  Log HTTP requests to stderr (1/0)

Examples:
  tracker --show-story --story-id 1234 --show-notes
  tracker -p Mobile --search "state:started owner:me"
  tracker --add-story --story "Fix login" --bug --label auth,urgent
  tracker --update-story -i 1234 --state finished
  tracker --add-note "Deployed to staging" -i 1234

Exit status:
  0 on success, help, or when no action flag is given; 1 on a usage error,
  an invalid project name, a configuration error, or a failed request.
"""
)

USAGE_HINT = "Run 'tracker --help' for usage."

_INFO_FLAGS = {"--help", "-h", "--man", "--version"}


# ---------------------------------------------------------------------------
# Informational flags (handled before argparse, so they never fail validation)
# ---------------------------------------------------------------------------


def _handle_info_flags(argv):
    """Print help, manual, or version and exit 0 if any of them was given."""
    given = _INFO_FLAGS.intersection(argv)
    if not given:
        return
    if "--man" in given:
        print(MAN_TEXT)
    elif "--version" in given and not given & {"--help", "-h"}:
        print(f"tracker-cli {config.VERSION}")
    else:
        print(HELP_TEXT)
    sys.exit(0)


def _extract_format(argv):
    """Pull --format out of argv regardless of position.

    Returns (format_str, remaining_argv). Done before argparse so that
    parse errors are already reported in the requested format.
    """
    fmt = "text"
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            i += 2
        elif arg.startswith("--format="):
            fmt = arg.split("=", 1)[1]
            i += 1
        else:
            remaining.append(arg)
            i += 1
            continue
        if fmt not in config.VALID_FORMATS:
            raise UsageError(f"[ERROR] Invalid format '{fmt}'. Use: text, json")
    return fmt, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _UsageParser(argparse.ArgumentParser):
    """Parser that raises UsageError instead of printing full help text."""

    def error(self, message):
        raise UsageError(f"[ERROR] {message}")


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _non_negative_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a non-negative integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be a non-negative integer")
    return parsed


def build_parser():
    parser = _UsageParser(
        prog="tracker",
        description="Command-line front end for a remote story tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )

    # --- actions ---
    parser.add_argument("--list-projects", "-L", action="store_true", dest="list_projects")
    parser.add_argument("--show-project", action="store_true", dest="show_project")
    parser.add_argument("--show-story", "-S", action="store_true", dest="show_story")
    parser.add_argument("--search", metavar="FILTER")
    parser.add_argument("--add-story", action="store_true", dest="add_story")
    parser.add_argument("--update-story", action="store_true", dest="update_story")
    parser.add_argument("--delete-story", action="store_true", dest="delete_story")
    parser.add_argument("--add-note", dest="add_note", metavar="TEXT")

    # --- project selection ---
    parser.add_argument("--project", "-p")
    parser.add_argument("--project-id", "-P", type=_positive_int, dest="project_id")

    # --- story options ---
    parser.add_argument("--story-id", "-i", type=_positive_int, dest="story_id")
    parser.add_argument("--all-stories", "-a", action="store_true", dest="all_stories")
    parser.add_argument("--show-notes", "-n", action="store_true", dest="show_notes")
    parser.add_argument("--story", "-s")
    parser.add_argument("--description", "-d")
    parser.add_argument("--requested-by", dest="requested_by")
    parser.add_argument("--owned-by", "-o", dest="owned_by")
    parser.add_argument("--label", "-l", action="append", dest="labels")
    parser.add_argument("--estimate", "-e", type=_non_negative_int)
    parser.add_argument("--created-at", dest="created_at")
    parser.add_argument("--deadline")
    parser.add_argument(
        "--story-type", "-t", choices=sorted(config.VALID_STORY_TYPES), dest="story_type"
    )
    for story_type in sorted(config.VALID_STORY_TYPES):
        parser.add_argument(
            f"--{story_type}",
            action="store_const",
            const=story_type,
            dest="story_type",
        )
    parser.add_argument("--state", choices=sorted(config.VALID_STORY_STATES))

    # --- global flags (--format is extracted before parsing) ---
    parser.add_argument("--dry-run", action="store_true", dest="dry_run")
    parser.add_argument("--verbose", "-v", action="store_true")

    return parser


def parse_options(argv, fmt="text"):
    """Parse argv into ParsedOptions. Raises UsageError on any bad flag or value."""
    ns = build_parser().parse_args(argv)
    ns.format = fmt
    return ParsedOptions.from_namespace(ns)


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def _dry_run(request, settings):
    pretty_print(
        {
            "dry_run": True,
            "api_url": settings.api_url,
            "api_key": _mask_token(settings.api_key),
            "request": request.describe(),
        }
    )
    return 0


def execute(options, config_paths=None, client_factory=TrackerClient):
    """Run one parsed invocation and return the process exit code."""
    action = select_action(options)
    if action is None and options.project is None:
        return 0

    try:
        settings = config.load_settings(config_paths)
    except ConfigError:
        if action is not None and action.needs_remote:
            raise
        settings = None

    # A bad --project name fails even when nothing remote would run.
    project_id = resolve(options, settings if settings is not None else config.Settings())
    if action is None:
        return 0
    if action is Action.LIST_PROJECTS:
        return cmd_list_projects(settings, options.format)

    request = build_request(action, options, settings, project_id)
    if options.dry_run:
        return _dry_run(request, settings)
    settings.require_api_key()
    return run_request(request, client_factory(settings), options.format)


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        payload = {
            "ok": False,
            "schema_version": config.CONTRACT_SCHEMA_VERSION,
            "error": {
                "type": type(err).__name__,
                "message": msg,
                "exit_code": getattr(err, "exit_code", 1),
            },
        }
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)
    if isinstance(err, UsageError):
        print(USAGE_HINT, file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    if argv is None:
        argv = sys.argv[1:]
    _handle_info_flags(argv)

    fmt = "text"
    try:
        fmt, remaining_argv = _extract_format(argv)
        options = parse_options(remaining_argv, fmt=fmt)
        if options.verbose:
            config.HTTP_LOG_ENABLED = True
        exit_code = execute(options)
    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
