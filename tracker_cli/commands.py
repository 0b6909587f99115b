"""
Command implementations for tracker-cli.
Each cmd_*() function handles one action: it calls TrackerClient with the
already-built TrackerRequest, renders the ApiResult, and returns the exit code.

Request building lives in actions.py. These thin wrappers handle
client calls, format selection, and formatter dispatch.
"""

from tracker_cli.formatters import (
    format_note,
    format_project,
    format_project_list,
    format_stories,
    format_story,
    message_response,
    output,
    pretty_print,
    print_api_errors,
)
from tracker_cli.models import Action


def _failed(result, fmt):
    if result.success:
        return False
    print_api_errors(result.errors, fmt)
    return True


# ---------------------------------------------------------------------------
# Local commands
# ---------------------------------------------------------------------------


def cmd_list_projects(settings, fmt):
    projects = dict(settings.projects) if settings is not None else {}
    output(projects, format_project_list, fmt)
    return 0


# ---------------------------------------------------------------------------
# Read commands
# ---------------------------------------------------------------------------


def cmd_show_project(request, client, fmt):
    result = client.get_project(project_id=request.project_id)
    if _failed(result, fmt):
        return 1
    output(result.payload, format_project, fmt)
    return 0


def cmd_show_story(request, client, fmt):
    result = client.get_story(project_id=request.project_id, story_id=request.story_id)
    if _failed(result, fmt):
        return 1
    output(result.payload, lambda s: format_story(s, request.show_notes), fmt)
    return 0


def cmd_all_stories(request, client, fmt):
    result = client.list_stories(project_id=request.project_id)
    if _failed(result, fmt):
        return 1
    output(result.payload, lambda s: format_stories(s, request.show_notes), fmt)
    return 0


def cmd_search(request, client, fmt):
    result = client.search_stories(project_id=request.project_id, filter=request.filter)
    if _failed(result, fmt):
        return 1
    if fmt == "json":
        pretty_print({"message": result.message, "stories": result.payload})
        return 0
    print(result.message)
    print(format_stories(result.payload, request.show_notes))
    return 0


# ---------------------------------------------------------------------------
# Mutation commands
# ---------------------------------------------------------------------------


def cmd_add_story(request, client, fmt):
    result = client.create_story(project_id=request.project_id, fields=request.fields)
    if _failed(result, fmt):
        return 1
    output(result.payload, format_story, fmt)
    return 0


def cmd_update_story(request, client, fmt):
    result = client.update_story(
        project_id=request.project_id, story_id=request.story_id, fields=request.fields
    )
    if _failed(result, fmt):
        return 1
    output(result.payload, format_story, fmt)
    return 0


def cmd_delete_story(request, client, fmt):
    result = client.delete_story(project_id=request.project_id, story_id=request.story_id)
    if _failed(result, fmt):
        return 1
    message_response(result.message, fmt)
    return 0


def cmd_add_note(request, client, fmt):
    result = client.add_note(
        project_id=request.project_id, story_id=request.story_id, text=request.note_text
    )
    if _failed(result, fmt):
        return 1
    output(result.payload, format_note, fmt)
    return 0


COMMANDS = {
    Action.SHOW_PROJECT: cmd_show_project,
    Action.SHOW_STORY: cmd_show_story,
    Action.ALL_STORIES: cmd_all_stories,
    Action.SEARCH: cmd_search,
    Action.ADD_STORY: cmd_add_story,
    Action.UPDATE_STORY: cmd_update_story,
    Action.DELETE_STORY: cmd_delete_story,
    Action.ADD_NOTE: cmd_add_note,
}


def run_request(request, client, fmt="text"):
    """Dispatch a built request to its command. Returns the exit code."""
    return COMMANDS[request.action](request, client, fmt)
