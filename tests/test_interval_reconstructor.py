from datetime import UTC, datetime

from domains.kanban.interval_reconstructor import IntervalReconstructor
from domains.kanban.models import MoveEvent


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


def _timeline():
    events = (
        MoveEvent(utc(2024, 1, 1), "Backlog"),
        MoveEvent(utc(2024, 1, 4), "Doing"),
        MoveEvent(utc(2024, 1, 10), "Done"),
    )
    return IntervalReconstructor().reconstruct("t1", events)


def test_intervals_are_contiguous_and_last_is_open():
    timeline = _timeline()
    intervals = timeline.intervals

    assert [interval.stage for interval in intervals] == ["Backlog", "Doing", "Done"]
    for current, following in zip(intervals, intervals[1:]):
        assert current.exit == following.enter
    assert intervals[-1].is_open
    assert all(not interval.is_open for interval in intervals[:-1])


def test_interval_contains_is_half_open():
    backlog = _timeline().intervals[0]
    assert backlog.contains(utc(2024, 1, 1))
    assert backlog.contains(utc(2024, 1, 3, 23, 59))
    assert not backlog.contains(utc(2024, 1, 4))


def test_empty_events_give_empty_timeline():
    timeline = IntervalReconstructor().reconstruct("t1", ())
    assert timeline.intervals == ()
    assert IntervalReconstructor.covered_span(timeline) is None


def test_advance_cursor_skips_closed_intervals():
    timeline = _timeline()
    assert IntervalReconstructor.advance_cursor(timeline, utc(2023, 12, 1)) == 0
    assert IntervalReconstructor.advance_cursor(timeline, utc(2024, 1, 4)) == 1
    assert IntervalReconstructor.advance_cursor(timeline, utc(2024, 1, 9), cursor=1) == 1
    assert IntervalReconstructor.advance_cursor(timeline, utc(2030, 1, 1), cursor=1) == 2


def test_covered_span():
    assert IntervalReconstructor.covered_span(_timeline()) == (utc(2024, 1, 1), None)
