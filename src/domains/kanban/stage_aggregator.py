import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from domains.kanban.models import StageSnapshot

P90 = 0.9


def nearest_rank_percentile(values: Sequence[timedelta], fraction: float = P90) -> timedelta | None:
    """Nearest-rank percentile: the value at 0-based index ``ceil(fraction * n) - 1`` of the
    ascending sort, clamped to ``[0, n - 1]``. None for an empty sample.

    Interpolating methods (numpy's default among them) report different values for
    small samples, so this rank rule is fixed.
    """
    if not values:
        return None
    ordered = sorted(values)
    # Rounded first: 0.9 * 30 is 27.000000000000004 in floating point
    index = math.ceil(round(fraction * len(ordered), 9)) - 1
    index = min(max(index, 0), len(ordered) - 1)
    return ordered[index]


class StageAggregator:
    """Reduces snapshots into per-week, per-stage counts and P90 ages."""

    def __init__(self, cfd_states: Sequence[str]):
        self.cfd_states = tuple(cfd_states)

    def aggregate(
        self, grid: tuple[datetime, ...], snapshots: Iterable[StageSnapshot]
    ) -> dict[datetime, tuple[dict[str, int], dict[str, timedelta | None]]]:
        """Return ``{week: (counts_by_stage, p90_by_stage)}`` for every week in the grid.

        Every configured stage appears in both mappings: counts default to 0 and
        P90 to None when no item occupied the stage that week.
        """
        ages: dict[tuple[datetime, str], list[timedelta]] = defaultdict(list)
        for snapshot in snapshots:
            ages[(snapshot.week, snapshot.stage)].append(snapshot.age)

        result = {}
        for week in grid:
            counts = {}
            p90s = {}
            for stage in self.cfd_states:
                stage_ages = ages.get((week, stage), [])
                counts[stage] = len(stage_ages)
                p90s[stage] = nearest_rank_percentile(stage_ages)
            result[week] = (counts, p90s)
        return result
