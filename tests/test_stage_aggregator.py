from datetime import UTC, datetime, timedelta

import pytest

from domains.kanban.models import StageSnapshot
from domains.kanban.stage_aggregator import StageAggregator, nearest_rank_percentile

WEEK0 = datetime(2024, 1, 1, tzinfo=UTC)
WEEK1 = datetime(2024, 1, 8, tzinfo=UTC)


def days(*values):
    return [timedelta(days=value) for value in values]


def test_percentile_of_empty_sample_is_absent():
    assert nearest_rank_percentile([]) is None


def test_percentile_of_single_value_is_that_value():
    assert nearest_rank_percentile(days(3)) == timedelta(days=3)


@pytest.mark.parametrize(
    "values, expected",
    [
        ((1, 2, 3), 3),
        ((4, 1, 3, 2), 4),
        ((1, 2, 3, 4, 5, 6, 7, 8, 9, 10), 9),
        ((1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11), 10),
        (tuple(range(1, 21)), 18),
        (tuple(range(1, 31)), 27),
    ],
)
def test_nearest_rank_index(values, expected):
    assert nearest_rank_percentile(days(*values)) == timedelta(days=expected)


def test_percentile_does_not_decrease_when_a_larger_value_is_added():
    sample = days(5, 1, 9, 2, 7)
    before = nearest_rank_percentile(sample)
    assert nearest_rank_percentile(sample + days(10)) >= before


def test_aggregate_fills_every_configured_stage():
    snapshots = [
        StageSnapshot(WEEK0, "t1", "Backlog", timedelta(0)),
        StageSnapshot(WEEK0, "t2", "Backlog", timedelta(days=2)),
        StageSnapshot(WEEK1, "t1", "Doing", timedelta(days=1)),
        StageSnapshot(WEEK1, "t3", "Ignored", timedelta(days=1)),
    ]

    result = StageAggregator(("Backlog", "Doing")).aggregate((WEEK0, WEEK1), snapshots)

    assert result[WEEK0] == ({"Backlog": 2, "Doing": 0}, {"Backlog": timedelta(days=2), "Doing": None})
    assert result[WEEK1] == ({"Backlog": 0, "Doing": 1}, {"Backlog": None, "Doing": timedelta(days=1)})
