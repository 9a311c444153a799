from collections.abc import Iterable
from datetime import datetime

from domains.kanban.models import ItemTimeline
from domains.kanban.week_grid import week_index


class ThroughputCounter:
    """Counts, per week window ``[w, w + 7d)``, the distinct items that moved into a done stage."""

    def __init__(self, done_states: Iterable[str]):
        self.done_states = frozenset(done_states)

    def count(self, grid: tuple[datetime, ...], timelines: Iterable[ItemTimeline]) -> dict[datetime, int]:
        """Throughput for every week in the grid (0 for weeks without completions).

        An item moving between two done stages in one window counts once.
        """
        completed: set[tuple[int, str]] = set()
        for timeline in timelines:
            for event in timeline.events:
                if event.stage not in self.done_states:
                    continue
                index = week_index(grid, event.at)
                if index is not None:
                    completed.add((index, timeline.item_id))

        totals = [0] * len(grid)
        for index, _ in completed:
            totals[index] += 1
        return dict(zip(grid, totals))
