from datetime import UTC, datetime

import pytest

from domains.kanban.errors import MalformedEvent
from domains.kanban.event_normalizer import EventNormalizer


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


@pytest.fixture
def normalizer() -> EventNormalizer:
    return EventNormalizer()


def test_events_are_sorted_by_timestamp(normalizer):
    events = normalizer.normalize(
        "t1",
        [("2024-01-03T00:00:00Z", "Doing"), ("2024-01-01T00:00:00Z", "Backlog"), ("2024-01-05T00:00:00Z", "Done")],
    )
    assert [event.stage for event in events] == ["Backlog", "Doing", "Done"]
    assert events[0].at == utc(2024, 1, 1)


def test_equal_timestamps_keep_last_in_input_order(normalizer):
    events = normalizer.normalize(
        "t1",
        [("2024-01-01T00:00:00Z", "Backlog"), ("2024-01-02T00:00:00Z", "Doing"), ("2024-01-02T00:00:00Z", "Review")],
    )
    assert [(event.at, event.stage) for event in events] == [
        (utc(2024, 1, 1), "Backlog"),
        (utc(2024, 1, 2), "Review"),
    ]


def test_consecutive_moves_into_same_stage_keep_the_earliest(normalizer):
    events = normalizer.normalize(
        "t1",
        [
            ("2024-01-01T00:00:00Z", "Doing"),
            ("2024-01-02T00:00:00Z", "Doing"),
            ("2024-01-03T00:00:00Z", "Review"),
            ("2024-01-04T00:00:00Z", "Doing"),
        ],
    )
    assert [(event.at.day, event.stage) for event in events] == [(1, "Doing"), (3, "Review"), (4, "Doing")]


def test_timestamps_end_up_strictly_increasing(normalizer):
    events = normalizer.normalize(
        "t1",
        [("2024-01-02T00:00:00Z", "A"), ("2024-01-02T00:00:00Z", "B"), ("2024-01-01T00:00:00Z", "C")],
    )
    assert all(earlier.at < later.at for earlier, later in zip(events, events[1:]))


def test_mapping_events_and_datetimes_are_accepted(normalizer):
    events = normalizer.normalize("t1", [{"at": utc(2024, 1, 1, 12), "stage": "Backlog"}])
    assert events[0].at == utc(2024, 1, 1, 12)
    assert events[0].stage == "Backlog"


def test_offsets_are_converted_to_utc(normalizer):
    events = normalizer.normalize("t1", [("2024-01-01T10:00:00+0200", "Backlog")])
    assert events[0].at == utc(2024, 1, 1, 8)


def test_no_events_yields_empty_tuple(normalizer):
    assert normalizer.normalize("t1", []) == ()


@pytest.mark.parametrize(
    "raw",
    [
        [("2024-01-01T00:00:00Z", "")],
        [("2024-01-01T00:00:00Z", None)],
        [("not a date", "Backlog")],
        [("2024-01-01T00:00:00Z",)],
        ["2024-01-01T00:00:00Z"],
    ],
)
def test_malformed_events_are_rejected(normalizer, raw):
    with pytest.raises(MalformedEvent) as exc_info:
        normalizer.normalize("t9", raw)
    assert exc_info.value.metadata["item_id"] == "t9"


@pytest.mark.parametrize("raw", [None, 3, "Backlog"])
def test_events_that_are_not_a_list_are_rejected(normalizer, raw):
    with pytest.raises(MalformedEvent) as exc_info:
        normalizer.normalize("t9", raw)
    assert exc_info.value.message == "Events are not a list"
