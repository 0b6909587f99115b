"""MCP server exposing TrackerClient operations as tools.

Run: python -m tracker_cli.mcp_server
Requires: python -m pip install .[mcp]
"""

from __future__ import annotations

from typing import Literal

from mcp.server.fastmcp import FastMCP

from tracker_cli.actions import add_story_fields, update_story_fields
from tracker_cli.client import TrackerClient
from tracker_cli.config import CONTRACT_SCHEMA_VERSION, Settings, load_settings
from tracker_cli.exceptions import CliError, UsageError
from tracker_cli.models import ApiResult, ParsedOptions, StoryState, StoryType
from tracker_cli.resolver import resolve_project_id

StoryTypeName = Literal["feature", "release", "bug", "chore"]
StoryStateName = Literal[
    "unscheduled", "unstarted", "started", "finished", "delivered", "accepted", "rejected"
]

mcp = FastMCP(
    "tracker",
    instructions=(
        "Story tracker tools. "
        "Select a project with either `project` (a configured name) or "
        "`project_id`; with neither, the configured DefaultProject is used. "
        "Story IDs are integers. Labels are plain strings.\n"
        "Every tool returns a dict with `ok`; on failure read `error`."
    ),
)

_settings: Settings | None = None
_client: TrackerClient | None = None


def _get_settings() -> Settings:
    """Return cached Settings, loading the config files on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def _get_client() -> TrackerClient:
    """Return a cached TrackerClient, creating one on first use."""
    global _client
    if _client is None:
        _client = TrackerClient(_get_settings())
    return _client


def _contract_error(message: str, error_type: str = "error") -> dict:
    """Return a stable MCP error envelope."""
    return {
        "ok": False,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "error": message,
        "error_detail": {
            "type": error_type,
            "message": message,
        },
    }


def _result_dict(result: ApiResult) -> dict:
    if not result.success:
        out = _contract_error("; ".join(result.errors), "api")
        out["errors"] = list(result.errors)
        return out
    out = result.to_dict()
    out["schema_version"] = CONTRACT_SCHEMA_VERSION
    return out


def _call(method_name: str, project: str | None, project_id: int | None, **kwargs) -> dict:
    """Resolve the project, call a TrackerClient method, convert errors to dicts."""
    try:
        settings = _get_settings()
        settings.require_api_key()
        pid = resolve_project_id(settings, project=project, project_id=project_id)
        result = getattr(_get_client(), method_name)(project_id=pid, **kwargs)
    except UsageError as e:
        return _contract_error(str(e), "usage")
    except CliError as e:
        return _contract_error(str(e), "error")
    return _result_dict(result)


# -------------------------------------------------------------------
# Read tools
# -------------------------------------------------------------------


@mcp.tool()
def list_projects() -> dict:
    """List the named projects from the local config file.

    Returns:
        Dict with projects: {name: id}.
    """
    try:
        settings = _get_settings()
    except CliError as e:
        return _contract_error(str(e), "config")
    return {
        "ok": True,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "projects": dict(settings.projects),
    }


@mcp.tool()
def get_project(project: str | None = None, project_id: int | None = None) -> dict:
    """Get project metadata (name, point scale, iteration length)."""
    return _call("get_project", project, project_id)


@mcp.tool()
def list_stories(project: str | None = None, project_id: int | None = None) -> dict:
    """List every story in the project."""
    return _call("list_stories", project, project_id)


@mcp.tool()
def get_story(story_id: int, project: str | None = None, project_id: int | None = None) -> dict:
    """Get one story, including its notes."""
    return _call("get_story", project, project_id, story_id=story_id)


@mcp.tool()
def search_stories(
    filter: str, project: str | None = None, project_id: int | None = None
) -> dict:
    """Search stories with a tracker filter string (e.g. "state:started label:auth")."""
    if not filter.strip():
        return _contract_error("[ERROR] filter must not be empty.", "usage")
    return _call("search_stories", project, project_id, filter=filter)


# -------------------------------------------------------------------
# Mutation tools
# -------------------------------------------------------------------


def _options(
    name=None,
    description=None,
    requested_by=None,
    owned_by=None,
    labels=None,
    estimate=None,
    deadline=None,
    story_type=None,
    current_state=None,
    created_at=None,
) -> ParsedOptions:
    return ParsedOptions(
        story=name,
        description=description,
        requested_by=requested_by,
        owned_by=owned_by,
        labels=tuple(labels) if labels is not None else None,
        estimate=estimate,
        deadline=deadline,
        story_type=StoryType(story_type) if story_type is not None else None,
        state=StoryState(current_state) if current_state is not None else None,
        created_at=created_at,
    )


@mcp.tool()
def create_story(
    name: str,
    description: str | None = None,
    requested_by: str | None = None,
    owned_by: str | None = None,
    labels: list[str] | None = None,
    estimate: int | None = None,
    deadline: str | None = None,
    story_type: StoryTypeName | None = None,
    current_state: StoryStateName | None = None,
    created_at: str | None = None,
    project: str | None = None,
    project_id: int | None = None,
) -> dict:
    """Create a story. requested_by defaults to the configured Me.

    Args:
        labels: Label names; comma-separated entries are split.
        story_type/current_state: Omit to let the service choose its default.
    """
    try:
        fields = add_story_fields(
            _options(
                name,
                description,
                requested_by,
                owned_by,
                labels,
                estimate,
                deadline,
                story_type,
                current_state,
                created_at,
            ),
            _get_settings(),
        )
    except UsageError as e:
        return _contract_error(str(e), "usage")
    except CliError as e:
        return _contract_error(str(e), "config")
    return _call("create_story", project, project_id, fields=fields)


@mcp.tool()
def update_story(
    story_id: int,
    name: str | None = None,
    description: str | None = None,
    requested_by: str | None = None,
    owned_by: str | None = None,
    labels: list[str] | None = None,
    estimate: int | None = None,
    deadline: str | None = None,
    story_type: StoryTypeName | None = None,
    current_state: StoryStateName | None = None,
    created_at: str | None = None,
    project: str | None = None,
    project_id: int | None = None,
) -> dict:
    """Update a story. Only the arguments you pass are changed.

    Pass an empty string to clear a text field; labels=[] clears labels.
    """
    try:
        fields = update_story_fields(
            _options(
                name,
                description,
                requested_by,
                owned_by,
                labels,
                estimate,
                deadline,
                story_type,
                current_state,
                created_at,
            )
        )
    except UsageError as e:
        return _contract_error(str(e), "usage")
    return _call("update_story", project, project_id, story_id=story_id, fields=fields)


@mcp.tool()
def delete_story(story_id: int, project: str | None = None, project_id: int | None = None) -> dict:
    """Permanently delete a story."""
    return _call("delete_story", project, project_id, story_id=story_id)


@mcp.tool()
def add_note(
    story_id: int, text: str, project: str | None = None, project_id: int | None = None
) -> dict:
    """Add a note (comment) to a story."""
    return _call("add_note", project, project_id, story_id=story_id, text=text)


# -------------------------------------------------------------------
# Entry point
# -------------------------------------------------------------------


def main():
    """Run the MCP server (stdio transport)."""
    mcp.run()


if __name__ == "__main__":
    main()
