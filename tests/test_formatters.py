"""Tests for formatters/ — story, project, note, error, and table output."""

import json

from tracker_cli.formatters import (
    format_errors,
    format_note,
    format_project,
    format_project_list,
    format_stories,
    format_story,
    message_response,
    output,
    print_api_errors,
)
from tracker_cli.formatters._table import _sanitize_str, _table, _trunc

STORY = {
    "id": 7,
    "story_type": "bug",
    "url": "https://tracker.example.com/story/show/7",
    "name": "Fix login",
    "estimate": 2,
    "current_state": "started",
    "requested_by": "Alice",
    "created_at": "2026-01-05",
}


def _f(label, value):
    return f"{label + ':':<15}{value}"


class TestFormatStory:
    def test_minimal_story(self):
        assert format_story(STORY).split("\n") == [
            "Story 7 (bug) < https://tracker.example.com/story/show/7 >",
            _f("Name", "Fix login"),
            _f("Estimate", 2),
            _f("State", "started"),
            _f("Requested By", "Alice"),
            _f("Created", "2026-01-05"),
        ]

    def test_absent_description_omitted(self):
        assert "Description:" not in format_story(STORY)
        assert "Description:" not in format_story({**STORY, "description": ""})

    def test_multiline_description_indented(self):
        story = {**STORY, "description": "first\nsecond\nthird"}
        lines = format_story(story).split("\n")
        idx = lines.index(_f("Description", "first"))
        assert lines[idx + 1] == " " * 15 + "second"
        assert lines[idx + 2] == " " * 15 + "third"

    def test_crlf_description_has_no_carriage_returns(self):
        story = {**STORY, "description": "first\r\nsecond\r\n"}
        out = format_story(story)
        assert "\r" not in out
        lines = out.split("\n")
        idx = lines.index(_f("Description", "first"))
        assert lines[idx + 1] == " " * 15 + "second"
        assert lines[idx + 2] == _f("Requested By", "Alice")

    def test_optional_fields_in_order(self):
        story = {
            **STORY,
            "owned_by": {"name": "Bob", "initials": "BB"},
            "deadline": "2026-03-01",
            "labels": [{"name": "ui"}, {"name": "auth"}],
        }
        lines = format_story(story).split("\n")
        assert lines[4:] == [
            _f("Requested By", "Alice"),
            _f("Owned By", "Bob"),
            _f("Created", "2026-01-05"),
            _f("Deadline", "2026-03-01"),
            _f("Label(s)", "ui, auth"),
        ]

    def test_unestimated(self):
        story = {**STORY, "estimate": None}
        assert _f("Estimate", "-") in format_story(story).split("\n")

    def test_labels_from_string(self):
        assert _f("Label(s)", "a, b") in format_story({**STORY, "labels": "a,b"}).split("\n")

    def test_notes_hidden_by_default(self):
        story = {**STORY, "notes": [{"id": 1, "text": "hi"}]}
        assert "Notes:" not in format_story(story)

    def test_notes_block(self):
        story = {
            **STORY,
            "notes": [
                {"id": 1, "author": "Alice", "noted_at": "2026-01-06", "text": "one\ntwo"},
                {"id": 2, "person": {"name": "Bob"}, "created_at": "2026-01-07", "text": "three"},
            ],
        }
        lines = format_story(story, show_notes=True).split("\n")
        start = lines.index("Notes:")
        assert lines[start + 1 :] == [
            "  Note (1) Alice @ 2026-01-06",
            "      one",
            "      two",
            "",
            "  Note (2) Bob @ 2026-01-07",
            "      three",
        ]

    def test_notes_flag_without_notes(self):
        assert "Notes:" not in format_story(STORY, show_notes=True)

    def test_empty(self):
        assert format_story(None) == "Story not found."

    def test_control_chars_stripped(self):
        assert "\x1b" not in format_story({**STORY, "name": "\x1b[31mred\x1b[0m"})


class TestFormatStories:
    def test_divider_between_stories_only(self):
        out = format_stories([STORY, {**STORY, "id": 8}])
        lines = out.split("\n")
        assert lines[0].startswith("Story 7")
        assert lines.count("=" * 50) == 1
        divider = lines.index("=" * 50)
        assert lines[divider + 1] == ""
        assert lines[divider + 2].startswith("Story 8")
        assert not out.endswith("\n")

    def test_single_story_has_no_divider(self):
        assert "=" * 50 not in format_stories([STORY])

    def test_empty(self):
        assert format_stories([]) == "No stories found."


class TestFormatNote:
    def test_note(self):
        note = {"id": 3, "person": {"initials": "AL"}, "noted_at": "2026-01-02", "text": "a\nb"}
        assert format_note(note) == "Note (3) AL @ 2026-01-02\n    a\n    b"

    def test_crlf_note_body(self):
        note = {"id": 4, "author": "Bob", "noted_at": "2026-01-03", "text": "a\r\nb"}
        assert format_note(note) == "Note (4) Bob @ 2026-01-03\n    a\n    b"

    def test_empty(self):
        assert format_note({}) == "Note not found."


class TestFormatProject:
    def test_full(self):
        project = {
            "name": "Testing",
            "point_scale": "0,1,2,3",
            "first_iteration_start_time": "2026-01-01",
            "iteration_length": 2,
        }
        assert format_project(project) == "\n".join(
            [
                f"{'Name:':<22}Testing",
                f"{'Point Scale:':<22}0,1,2,3",
                f"{'Iterations Start:':<22}2026-01-01",
                f"{'Weeks per Iteration:':<22}2",
                "",
            ]
        )

    def test_without_start_and_list_scale(self):
        project = {"name": "T", "point_scale": [0, 1, 2], "weeks_per_iteration": 1}
        lines = format_project(project).split("\n")
        assert lines == [
            f"{'Name:':<22}T",
            f"{'Point Scale:':<22}0,1,2",
            f"{'Weeks per Iteration:':<22}1",
            "",
        ]

    def test_empty(self):
        assert format_project({}) == "Project not found."


class TestFormatProjectList:
    def test_sorted_table(self):
        out = format_project_list({"Mobile": 2, "Testing": 1})
        lines = out.split("\n")
        assert lines[0].startswith("Project")
        assert lines[1].startswith("---")
        assert lines[2].startswith("Mobile") and lines[2].endswith("2")
        assert lines[3].startswith("Testing") and lines[3].endswith("1")
        assert out.endswith("Total: 2 projects")

    def test_empty(self):
        assert format_project_list({}) == "No named projects found."


class TestErrors:
    def test_format_errors(self):
        assert format_errors(["Story not found"]) == "Unable to process request:\n  Story not found"

    def test_print_api_errors_to_stderr(self, capsys):
        print_api_errors(["a", "b"])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Unable to process request:\n  a\n  b\n"

    def test_print_api_errors_json(self, capsys):
        print_api_errors(["a"], fmt="json")
        payload = json.loads(capsys.readouterr().err)
        assert payload["ok"] is False
        assert payload["errors"] == ["a"]
        assert payload["schema_version"] == "1.0"


class TestOutput:
    def test_text_uses_formatter(self, capsys):
        output({"id": 1}, lambda d: f"id={d['id']}")
        assert capsys.readouterr().out == "id=1\n"

    def test_json_ignores_formatter(self, capsys):
        output({"id": 1}, lambda d: "nope", fmt="json")
        assert json.loads(capsys.readouterr().out) == {"id": 1}

    def test_message_response(self, capsys):
        message_response("Story 5 deleted.")
        assert capsys.readouterr().out == "Story 5 deleted.\n"

    def test_message_response_json(self, capsys):
        message_response("done", fmt="json")
        assert json.loads(capsys.readouterr().out) == {"ok": True, "message": "done"}


class TestTableHelpers:
    def test_trunc(self):
        assert _trunc("abcdef", 4) == "abc…"
        assert _trunc("ab", 4) == "ab"
        assert _trunc(None, 4) == ""

    def test_sanitize_keeps_newlines(self):
        assert _sanitize_str("a\x07b\nc\td") == "ab\nc\td"

    def test_table_separator_spans_widest_line(self):
        out = _table([("A", 3), ("B", 0)], [("x", "long value")])
        header, sep, row = out.split("\n")
        assert len(sep) == len(row)
