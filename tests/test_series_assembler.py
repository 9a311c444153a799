from datetime import UTC, datetime, timedelta

from domains.kanban.series_assembler import assemble_series

WEEKS = (datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 8, tzinfo=UTC))


def test_one_record_per_week_in_order():
    stage_metrics = {WEEKS[0]: ({"Doing": 2}, {"Doing": timedelta(days=1)})}
    throughput = {WEEKS[1]: 3}

    series = assemble_series(WEEKS, ("Backlog", "Doing"), stage_metrics, throughput)

    assert [record.week for record in series] == list(WEEKS)
    assert series[0].counts_by_stage == {"Backlog": 0, "Doing": 2}
    assert series[0].p90_age_by_stage == {"Backlog": None, "Doing": timedelta(days=1)}
    assert series[0].throughput == 0
    assert series[1].counts_by_stage == {"Backlog": 0, "Doing": 0}
    assert series[1].p90_age_by_stage == {"Backlog": None, "Doing": None}
    assert series[1].throughput == 3


def test_empty_grid_gives_empty_series():
    assert assemble_series((), ("Backlog",), {}, {}) == []
