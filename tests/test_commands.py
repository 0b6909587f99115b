"""Tests for commands.py — cmd_* dispatch and rendering of ApiResults."""

import json
from unittest.mock import MagicMock

import pytest

from tracker_cli.commands import COMMANDS, cmd_list_projects, run_request
from tracker_cli.config import Settings
from tracker_cli.models import Action, ApiResult, StoryFields, TrackerRequest

STORY = {"id": 7, "story_type": "bug", "url": "u", "name": "Fix login", "current_state": "started"}


@pytest.fixture
def client():
    return MagicMock()


class TestListProjects:
    def test_text(self, capsys):
        code = cmd_list_projects(Settings(projects={"Testing": 1}), "text")
        assert code == 0
        out = capsys.readouterr().out
        assert "Testing" in out
        assert "Total: 1 projects" in out

    def test_no_settings(self, capsys):
        assert cmd_list_projects(None, "text") == 0
        assert capsys.readouterr().out == "No named projects found.\n"

    def test_json(self, capsys):
        cmd_list_projects(Settings(projects={"Testing": 1}), "json")
        assert json.loads(capsys.readouterr().out) == {"Testing": 1}


class TestDispatchTable:
    def test_every_remote_action_has_a_command(self):
        assert set(COMMANDS) == {a for a in Action if a.needs_remote}


class TestShowStory:
    def test_success(self, client, capsys):
        client.get_story.return_value = ApiResult.ok(STORY)
        request = TrackerRequest(Action.SHOW_STORY, project_id=1, story_id=7)
        assert run_request(request, client) == 0
        client.get_story.assert_called_once_with(project_id=1, story_id=7)
        assert capsys.readouterr().out.startswith("Story 7 (bug) < u >")

    def test_not_found(self, client, capsys):
        client.get_story.return_value = ApiResult.failure(["Story not found"])
        request = TrackerRequest(Action.SHOW_STORY, project_id=1, story_id=7)
        assert run_request(request, client) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Unable to process request:\n  Story not found\n"

    def test_notes_passed_to_renderer(self, client, capsys):
        story = {**STORY, "notes": [{"id": 1, "author": "A", "text": "hi"}]}
        client.get_story.return_value = ApiResult.ok(story)
        request = TrackerRequest(Action.SHOW_STORY, project_id=1, story_id=7, show_notes=True)
        run_request(request, client)
        assert "Notes:" in capsys.readouterr().out

    def test_json(self, client, capsys):
        client.get_story.return_value = ApiResult.ok(STORY)
        request = TrackerRequest(Action.SHOW_STORY, project_id=1, story_id=7)
        run_request(request, client, "json")
        assert json.loads(capsys.readouterr().out)["id"] == 7


class TestReads:
    def test_show_project(self, client, capsys):
        client.get_project.return_value = ApiResult.ok({"name": "Testing", "point_scale": "1,2"})
        assert run_request(TrackerRequest(Action.SHOW_PROJECT, project_id=1), client) == 0
        assert "Testing" in capsys.readouterr().out

    def test_all_stories(self, client, capsys):
        client.list_stories.return_value = ApiResult.ok([STORY, {**STORY, "id": 8}])
        assert run_request(TrackerRequest(Action.ALL_STORIES, project_id=1), client) == 0
        assert "=" * 50 in capsys.readouterr().out

    def test_search_message_then_stories(self, client, capsys):
        client.search_stories.return_value = ApiResult.ok(
            [STORY], message="Found 1 story matching 'x'."
        )
        request = TrackerRequest(Action.SEARCH, project_id=1, filter="x")
        assert run_request(request, client) == 0
        client.search_stories.assert_called_once_with(project_id=1, filter="x")
        lines = capsys.readouterr().out.split("\n")
        assert lines[0] == "Found 1 story matching 'x'."
        assert lines[1].startswith("Story 7")

    def test_search_json(self, client, capsys):
        client.search_stories.return_value = ApiResult.ok([], message="Found 0 stories.")
        run_request(TrackerRequest(Action.SEARCH, project_id=1, filter="x"), client, "json")
        assert json.loads(capsys.readouterr().out) == {
            "message": "Found 0 stories.",
            "stories": [],
        }

    def test_failure_json(self, client, capsys):
        client.get_project.return_value = ApiResult.failure(["Forbidden"])
        code = run_request(TrackerRequest(Action.SHOW_PROJECT, project_id=1), client, "json")
        assert code == 1
        assert json.loads(capsys.readouterr().err)["errors"] == ["Forbidden"]


class TestMutations:
    def test_add_story(self, client, capsys):
        fields = StoryFields(name="Fix login")
        client.create_story.return_value = ApiResult.ok(STORY)
        request = TrackerRequest(Action.ADD_STORY, project_id=1, fields=fields)
        assert run_request(request, client) == 0
        client.create_story.assert_called_once_with(project_id=1, fields=fields)
        assert "Fix login" in capsys.readouterr().out

    def test_update_story(self, client):
        fields = StoryFields(estimate=3)
        client.update_story.return_value = ApiResult.ok(STORY)
        request = TrackerRequest(Action.UPDATE_STORY, project_id=1, story_id=7, fields=fields)
        assert run_request(request, client) == 0
        client.update_story.assert_called_once_with(project_id=1, story_id=7, fields=fields)

    def test_update_failure(self, client, capsys):
        client.update_story.return_value = ApiResult.failure(["a", "b"])
        request = TrackerRequest(
            Action.UPDATE_STORY, project_id=1, story_id=7, fields=StoryFields(estimate=3)
        )
        assert run_request(request, client) == 1
        assert capsys.readouterr().err == "Unable to process request:\n  a\n  b\n"

    def test_delete_prints_message(self, client, capsys):
        client.delete_story.return_value = ApiResult.ok(message="Story 7 deleted.")
        request = TrackerRequest(Action.DELETE_STORY, project_id=1, story_id=7)
        assert run_request(request, client) == 0
        assert capsys.readouterr().out == "Story 7 deleted.\n"

    def test_add_note(self, client, capsys):
        client.add_note.return_value = ApiResult.ok(
            {"id": 3, "author": "Alice", "noted_at": "2026-01-02", "text": "done"}
        )
        request = TrackerRequest(Action.ADD_NOTE, project_id=1, story_id=7, note_text="done")
        assert run_request(request, client) == 0
        client.add_note.assert_called_once_with(project_id=1, story_id=7, text="done")
        assert capsys.readouterr().out == "Note (3) Alice @ 2026-01-02\n    done\n"
