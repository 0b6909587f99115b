"""
Typed models for parsed options, outgoing requests, and API results.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class StoryType(str, Enum):
    FEATURE = "feature"
    RELEASE = "release"
    BUG = "bug"
    CHORE = "chore"


class StoryState(str, Enum):
    UNSCHEDULED = "unscheduled"
    UNSTARTED = "unstarted"
    STARTED = "started"
    FINISHED = "finished"
    DELIVERED = "delivered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Action(str, Enum):
    LIST_PROJECTS = "list-projects"
    SHOW_PROJECT = "show-project"
    SHOW_STORY = "show-story"
    ALL_STORIES = "all-stories"
    SEARCH = "search"
    ADD_STORY = "add-story"
    UPDATE_STORY = "update-story"
    DELETE_STORY = "delete-story"
    ADD_NOTE = "add-note"

    @property
    def needs_remote(self) -> bool:
        return self is not Action.LIST_PROJECTS


@dataclass(frozen=True)
class ParsedOptions:
    """Parsed command line.

    Value-carrying fields are None when the flag was not given, so a
    supplied "" or 0 stays distinguishable from "not supplied".
    """

    list_projects: bool = False
    show_project: bool = False
    show_story: bool = False
    all_stories: bool = False
    search: str | None = None
    add_story: bool = False
    update_story: bool = False
    delete_story: bool = False
    add_note: str | None = None

    project: str | None = None
    project_id: int | None = None
    story_id: int | None = None

    story: str | None = None
    description: str | None = None
    requested_by: str | None = None
    owned_by: str | None = None
    labels: tuple[str, ...] | None = None
    estimate: int | None = None
    created_at: str | None = None
    deadline: str | None = None
    story_type: StoryType | None = None
    state: StoryState | None = None

    show_notes: bool = False
    format: str = "text"
    verbose: bool = False
    dry_run: bool = False

    @classmethod
    def from_namespace(cls, ns):
        labels = getattr(ns, "labels", None)
        story_type = getattr(ns, "story_type", None)
        state = getattr(ns, "state", None)
        values = {f.name: getattr(ns, f.name) for f in fields(cls) if hasattr(ns, f.name)}
        values["labels"] = tuple(labels) if labels is not None else None
        values["story_type"] = StoryType(story_type) if story_type is not None else None
        values["state"] = StoryState(state) if state is not None else None
        return cls(**values)


@dataclass(frozen=True)
class StoryFields:
    """Story attributes for create/update. None means "do not send"."""

    name: str | None = None
    description: str | None = None
    requested_by: str | None = None
    owned_by: str | None = None
    labels: str | None = None
    estimate: int | None = None
    created_at: str | None = None
    deadline: str | None = None
    story_type: StoryType | None = None
    current_state: StoryState | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            payload[f.name] = value.value if isinstance(value, Enum) else value
        return payload

    def is_empty(self) -> bool:
        return not self.to_payload()


@dataclass(frozen=True)
class TrackerRequest:
    """One fully-built request: the action plus everything it needs."""

    action: Action
    project_id: int | None = None
    story_id: int | None = None
    fields: StoryFields | None = None
    filter: str | None = None
    note_text: str | None = None
    show_notes: bool = False

    def describe(self) -> dict[str, Any]:
        """JSON-friendly view used by --dry-run."""
        out: dict[str, Any] = {"action": self.action.value, "project_id": self.project_id}
        if self.story_id is not None:
            out["story_id"] = self.story_id
        if self.fields is not None:
            out["story"] = self.fields.to_payload()
        if self.filter is not None:
            out["filter"] = self.filter
        if self.note_text is not None:
            out["note"] = {"text": self.note_text}
        return out


@dataclass(frozen=True)
class ApiResult:
    """Uniform result of one remote call."""

    success: bool
    payload: Any = None
    message: str | None = None
    errors: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, payload=None, message=None):
        return cls(success=True, payload=payload, message=message)

    @classmethod
    def failure(cls, errors):
        return cls(success=False, errors=tuple(errors))

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"ok": False, "errors": list(self.errors)}
        out: dict[str, Any] = {"ok": True}
        if self.message is not None:
            out["message"] = self.message
        if self.payload is not None:
            out["data"] = self.payload
        return out
