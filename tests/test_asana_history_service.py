import pytest

from domains.asana.asana_history_service import AsanaHistoryService, parse_section_changed
from domains.asana.errors import AsanaSnapshotError


def _story(created_at, text, subtype="section_changed"):
    return {"created_at": created_at, "resource_subtype": subtype, "text": text}


def _snapshot():
    return {
        "users": [],
        "projects": [{"gid": "p1", "name": "Board", "created_at": "2023-01-01T00:00:00Z"}],
        "project_sections": [
            {
                "project_gid": "p1",
                "sections": [
                    {"gid": "s1", "name": "Backlog"},
                    {"gid": "s2", "name": "Doing"},
                    {"gid": "s3", "name": "Done"},
                ],
            }
        ],
        "project_task_gids": [{"project_gid": "p1", "task_gids": ["t1", "t2", "t3"]}],
        "tasks": [
            {
                "gid": "t1",
                "created_at": "2024-01-01T09:00:00Z",
                "memberships": [{"section": {"gid": "s3"}}, {"section": {"gid": "elsewhere"}}],
            },
            {"gid": "t2", "created_at": "2024-01-02T09:00:00Z", "memberships": [{"section": {"gid": "s1"}}]},
            {"gid": "t3", "created_at": "2024-01-03T09:00:00Z", "memberships": [{"section": {"gid": "s2"}}]},
        ],
        "task_stories": [
            {
                "task_gid": "t1",
                "stories": [
                    _story("2024-01-01T10:00:00Z", "added a comment", subtype="comment_added"),
                    _story("2024-01-03T00:00:00Z", 'moved this Task from "Backlog" to "Doing" in Board'),
                    _story("2024-01-04T00:00:00Z", "moved this Task somewhere odd"),
                    _story("2024-01-05T00:00:00Z", 'moved this Task from "Doing" to "Done" in Board'),
                ],
            },
            {"task_gid": "t2", "stories": []},
            {
                "task_gid": "t3",
                "stories": [_story("2024-01-04T00:00:00Z", 'moved this Task from "A" to "B" in Other Board')],
            },
        ],
    }


def test_parse_section_changed():
    assert parse_section_changed('moved this Task from "To Do" to "In Review" in Team "X" Board') == (
        "To Do",
        "In Review",
        'Team "X" Board',
    )
    assert parse_section_changed("moved this Task") is None


def test_section_changes_become_move_events():
    items = AsanaHistoryService().project_items(_snapshot())

    assert items["Board"]["t1"] == [
        ("2024-01-01T09:00:00Z", "Backlog"),
        ("2024-01-03T00:00:00Z", "Doing"),
        ("2024-01-05T00:00:00Z", "Done"),
    ]


def test_every_unmoved_task_gets_a_creation_event():
    items = AsanaHistoryService().project_items(_snapshot())

    assert items["Board"]["t2"] == [("2024-01-02T09:00:00Z", "Backlog")]
    assert items["Board"]["t3"] == [("2024-01-03T09:00:00Z", "Doing")]


def test_stories_of_other_projects_are_ignored():
    items = AsanaHistoryService().project_items(_snapshot())

    assert set(items) == {"Board"}


def test_missing_sections_are_reported():
    snapshot = _snapshot()
    del snapshot["task_stories"]

    with pytest.raises(AsanaSnapshotError) as exc_info:
        AsanaHistoryService().project_items(snapshot)
    assert "task_stories" in str(exc_info.value)


def test_records_without_created_at_are_skipped():
    snapshot = _snapshot()
    del snapshot["tasks"][1]["created_at"]
    del snapshot["task_stories"][0]["stories"][3]["created_at"]

    items = AsanaHistoryService().project_items(snapshot)

    assert "t2" not in items["Board"]
    assert items["Board"]["t1"] == [
        ("2024-01-01T09:00:00Z", "Backlog"),
        ("2024-01-03T00:00:00Z", "Doing"),
    ]
    assert items["Board"]["t3"] == [("2024-01-03T09:00:00Z", "Doing")]
