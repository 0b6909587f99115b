"""
TrackerClient — public Python API for the remote story tracker.

One method per remote operation. Every method takes a project ID plus
operation-specific keyword arguments and returns an ApiResult. Failures the
service reports come back as ApiResult.failure; transport failures raise
CliError.
"""

from __future__ import annotations

from typing import Any

from tracker_cli.api import extract_errors, tracker_request
from tracker_cli.exceptions import CliError, HTTPError
from tracker_cli.models import ApiResult, StoryFields

NO_PROJECT_MESSAGE = (
    "No project selected. Use --project or --project-id, "
    "or set DefaultProject in the [General] config section."
)


def _unwrap_object(body, key, operation):
    """Accept either {key: {...}} or a bare object."""
    if isinstance(body, dict):
        inner = body.get(key)
        return inner if isinstance(inner, dict) else body
    raise CliError(
        f"[ERROR] Unexpected {operation} response shape: "
        f"expected JSON object, got {type(body).__name__}."
    )


def _unwrap_list(body, key, operation):
    """Accept either a bare list or {key: [...]}."""
    if isinstance(body, list):
        return body
    if isinstance(body, dict) and isinstance(body.get(key), list):
        return body[key]
    if body is None:
        return []
    raise CliError(
        f"[ERROR] Unexpected {operation} response shape: "
        f"expected JSON list, got {type(body).__name__}."
    )


class TrackerClient:
    """Public API surface for the story tracker.

    All methods use keyword-only arguments and return ApiResult values.
    """

    def __init__(self, settings):
        self.settings = settings

    def _call(self, project_id, path, on_success, *, data=None, method="GET", params=None):
        if project_id is None:
            return ApiResult.failure([NO_PROJECT_MESSAGE])
        try:
            body = tracker_request(
                self.settings, f"/projects/{project_id}{path}", data, method, params
            )
        except HTTPError as e:
            return ApiResult.failure(extract_errors(e))
        return on_success(body)

    # -------------------------------------------------------------------
    # Read operations
    # -------------------------------------------------------------------

    def get_project(self, *, project_id: int | None) -> ApiResult:
        """Fetch project metadata (name, point scale, iteration settings)."""
        return self._call(
            project_id,
            "",
            lambda body: ApiResult.ok(_unwrap_object(body, "project", "project")),
        )

    def list_stories(self, *, project_id: int | None) -> ApiResult:
        """Fetch every story in the project."""
        return self._call(
            project_id,
            "/stories",
            lambda body: ApiResult.ok(_unwrap_list(body, "stories", "stories")),
        )

    def search_stories(self, *, project_id: int | None, filter: str) -> ApiResult:
        """Fetch the stories matching a tracker search filter."""

        def _found(body):
            stories = _unwrap_list(body, "stories", "search")
            noun = "story" if len(stories) == 1 else "stories"
            message = f"Found {len(stories)} {noun} matching '{filter}'."
            return ApiResult.ok(stories, message=message)

        return self._call(project_id, "/stories", _found, params={"filter": filter})

    def get_story(self, *, project_id: int | None, story_id: int) -> ApiResult:
        """Fetch one story, notes included."""
        return self._call(
            project_id,
            f"/stories/{story_id}",
            lambda body: ApiResult.ok(_unwrap_object(body, "story", "story")),
        )

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------

    def create_story(self, *, project_id: int | None, fields: StoryFields) -> ApiResult:
        """Create a story. Only fields that are set are sent."""
        return self._call(
            project_id,
            "/stories",
            lambda body: ApiResult.ok(_unwrap_object(body, "story", "create story")),
            data={"story": fields.to_payload()},
            method="POST",
        )

    def update_story(
        self, *, project_id: int | None, story_id: int, fields: StoryFields
    ) -> ApiResult:
        """Update a story. Only fields that are set are sent."""
        return self._call(
            project_id,
            f"/stories/{story_id}",
            lambda body: ApiResult.ok(_unwrap_object(body, "story", "update story")),
            data={"story": fields.to_payload()},
            method="PUT",
        )

    def delete_story(self, *, project_id: int | None, story_id: int) -> ApiResult:
        """Delete a story. The result carries the service's message."""

        def _deleted(body: Any):
            message = None
            if isinstance(body, dict):
                message = body.get("message")
            return ApiResult.ok(message=message or f"Story {story_id} deleted.")

        return self._call(project_id, f"/stories/{story_id}", _deleted, method="DELETE")

    def add_note(self, *, project_id: int | None, story_id: int, text: str) -> ApiResult:
        """Attach a note to a story."""
        return self._call(
            project_id,
            f"/stories/{story_id}/notes",
            lambda body: ApiResult.ok(_unwrap_object(body, "note", "add note")),
            data={"note": {"text": text}},
            method="POST",
        )
