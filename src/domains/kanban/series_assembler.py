from datetime import datetime, timedelta

from domains.kanban.models import WeeklyMetrics


def assemble_series(
    grid: tuple[datetime, ...],
    cfd_states: tuple[str, ...],
    stage_metrics: dict[datetime, tuple[dict[str, int], dict[str, timedelta | None]]],
    throughput: dict[datetime, int],
) -> list[WeeklyMetrics]:
    """Join stage metrics and throughput into one record per grid week, ascending.

    Weeks missing from either input are zero-filled; absent ages stay None.
    """
    series = []
    for week in grid:
        counts, p90s = stage_metrics.get(week, ({}, {}))
        series.append(
            WeeklyMetrics(
                week=week,
                counts_by_stage={stage: counts.get(stage, 0) for stage in cfd_states},
                p90_age_by_stage={stage: p90s.get(stage) for stage in cfd_states},
                throughput=throughput.get(week, 0),
            )
        )
    return series
