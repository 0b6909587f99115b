"""Story and note formatters."""

from tracker_cli._utils import _get_field, label_names, person_name
from tracker_cli.formatters._table import _sanitize_str

STORY_LABEL_WIDTH = 15
STORY_DIVIDER = "=" * 50
NOTE_BODY_INDENT = "    "


def _text(value):
    return _sanitize_str("" if value is None else str(value))


def _field(label, value, width=STORY_LABEL_WIDTH):
    return f"{label + ':':<{width}}{_text(value)}"


def _multiline_field(label, text, width=STORY_LABEL_WIDTH):
    """First line inline after the label, later lines aligned under it."""
    body = _text(text).splitlines() or [""]
    lines = [_field(label, body[0], width)]
    lines.extend(" " * width + line for line in body[1:])
    return lines


def _note_lines(note):
    author = person_name(_get_field(note, "author", "person"))
    date = _get_field(note, "noted_at", "created_at") or ""
    lines = [f"Note ({note.get('id', '?')}) {_text(author)} @ {_text(date)}"]
    text = _text(note.get("text"))
    lines.extend(NOTE_BODY_INDENT + line for line in text.splitlines() or [""])
    return lines


def format_note(note):
    """Format a standalone note, as returned by add-note."""
    if not note:
        return "Note not found."
    return "\n".join(_note_lines(note))


def _story_lines(story, show_notes=False):
    lines = [
        f"Story {story.get('id', '?')} ({_text(story.get('story_type', ''))}) "
        f"< {_text(story.get('url', ''))} >"
    ]
    lines.append(_field("Name", story.get("name", "")))
    estimate = story.get("estimate")
    lines.append(_field("Estimate", "-" if estimate is None else estimate))
    lines.append(_field("State", story.get("current_state", "")))
    description = story.get("description")
    if description:
        lines.extend(_multiline_field("Description", description))
    lines.append(_field("Requested By", person_name(story.get("requested_by"))))
    owned_by = person_name(story.get("owned_by"))
    if owned_by:
        lines.append(_field("Owned By", owned_by))
    lines.append(_field("Created", story.get("created_at", "")))
    deadline = story.get("deadline")
    if deadline:
        lines.append(_field("Deadline", deadline))
    labels = label_names(story.get("labels"))
    if labels:
        lines.append(_field("Label(s)", ", ".join(labels)))
    notes = story.get("notes") or []
    if show_notes and notes:
        lines.append("Notes:")
        for i, note in enumerate(notes):
            if i:
                lines.append("")
            lines.extend("  " + line for line in _note_lines(note))
    return lines


def format_story(story, show_notes=False):
    """Format a single story.

    Optional fields (description, owner, deadline, labels) are omitted
    entirely when absent; notes only appear when *show_notes* is set.
    """
    if not story:
        return "Story not found."
    return "\n".join(_story_lines(story, show_notes))


def format_stories(stories, show_notes=False):
    """Format a list of stories separated by a divider line."""
    if not stories:
        return "No stories found."
    lines = []
    for i, story in enumerate(stories):
        if i:
            lines.extend([STORY_DIVIDER, ""])
        lines.extend(_story_lines(story, show_notes))
    return "\n".join(lines)
