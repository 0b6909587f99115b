"""
Action selection and request building.

Maps a ParsedOptions record onto exactly one Action and the TrackerRequest
that action needs. Everything here runs before any network call, so every
validation failure is a UsageError.
"""

from tracker_cli.exceptions import UsageError
from tracker_cli.models import Action, StoryFields, TrackerRequest

# First match wins.
_ACTION_CHECKS = (
    (Action.LIST_PROJECTS, lambda o: o.list_projects),
    (Action.SHOW_PROJECT, lambda o: o.show_project),
    (Action.SHOW_STORY, lambda o: o.show_story),
    (Action.SEARCH, lambda o: o.search is not None),
    (Action.ADD_STORY, lambda o: o.add_story),
    (Action.UPDATE_STORY, lambda o: o.update_story),
    (Action.DELETE_STORY, lambda o: o.delete_story),
    (Action.ADD_NOTE, lambda o: o.add_note is not None),
)

# Copied into an update only when supplied.
_UPDATE_KEYS = (
    "created_at",
    "deadline",
    "description",
    "estimate",
    "owned_by",
    "requested_by",
    "story_type",
)


def select_action(options):
    """Return the requested Action, or None when no action flag was given."""
    for action, matches in _ACTION_CHECKS:
        if not matches(options):
            continue
        if action is Action.SHOW_STORY:
            if options.all_stories:
                return Action.ALL_STORIES
            if options.story_id is None:
                raise UsageError("[ERROR] --show-story requires --story-id or --all-stories.")
        return action
    return None


def split_labels(raw_labels):
    """Flatten repeated and comma-separated --label values into "a,b,c".

    Returns None when --label was never given.
    """
    if raw_labels is None:
        return None
    labels = []
    for entry in raw_labels:
        labels.extend(part.strip() for part in entry.split(",") if part.strip())
    return ",".join(labels)


def _require_story_id(options, action):
    if options.story_id is None:
        raise UsageError(f"[ERROR] --{action.value} requires --story-id.")
    return options.story_id


def add_story_fields(options, settings):
    if options.story is None:
        raise UsageError("[ERROR] Cannot add a story without a name. Use --story <name>.")
    requested_by = options.requested_by if options.requested_by is not None else settings.me
    return StoryFields(
        name=options.story,
        description=options.description,
        requested_by=requested_by,
        owned_by=options.owned_by,
        labels=split_labels(options.labels),
        estimate=options.estimate,
        created_at=options.created_at,
        deadline=options.deadline,
        story_type=options.story_type,
        current_state=options.state,
    )


def update_story_fields(options):
    values = {key: getattr(options, key) for key in _UPDATE_KEYS}
    values["name"] = options.story
    values["labels"] = split_labels(options.labels)
    values["current_state"] = options.state
    story_fields = StoryFields(**values)
    if story_fields.is_empty():
        raise UsageError("[ERROR] Cannot update a story, without specifying what to update.")
    return story_fields


def build_request(action, options, settings, project_id):
    """Build the TrackerRequest for *action*. Raises UsageError on missing input."""
    if action is Action.SHOW_STORY:
        return TrackerRequest(
            action,
            project_id=project_id,
            story_id=_require_story_id(options, action),
            show_notes=options.show_notes,
        )
    if action is Action.ALL_STORIES:
        return TrackerRequest(action, project_id=project_id, show_notes=options.show_notes)
    if action is Action.SEARCH:
        if not (options.search or "").strip():
            raise UsageError("[ERROR] --search requires a non-empty filter.")
        return TrackerRequest(
            action, project_id=project_id, filter=options.search, show_notes=options.show_notes
        )
    if action is Action.ADD_STORY:
        return TrackerRequest(
            action, project_id=project_id, fields=add_story_fields(options, settings)
        )
    if action is Action.UPDATE_STORY:
        story_id = _require_story_id(options, action)
        return TrackerRequest(
            action, project_id=project_id, story_id=story_id, fields=update_story_fields(options)
        )
    if action is Action.DELETE_STORY:
        return TrackerRequest(
            action, project_id=project_id, story_id=_require_story_id(options, action)
        )
    if action is Action.ADD_NOTE:
        return TrackerRequest(
            action,
            project_id=project_id,
            story_id=_require_story_id(options, action),
            note_text=options.add_note,
        )
    return TrackerRequest(action, project_id=project_id)
