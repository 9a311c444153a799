from collections.abc import Iterable
from datetime import datetime

from domains.kanban.interval_reconstructor import IntervalReconstructor
from domains.kanban.models import ItemTimeline, StageSnapshot


class SnapshotSampler:
    """Samples which tracked stage each item occupies at every week boundary.

    The age reported is measured from ``max(enter, horizon)`` so that history before
    the observation window does not inflate it.
    """

    def __init__(self, grid: tuple[datetime, ...], horizon: datetime, tracked_states: Iterable[str]):
        self.grid = grid
        self.horizon = horizon
        self.tracked_states = frozenset(tracked_states)

    def sample(self, timeline: ItemTimeline) -> tuple[StageSnapshot, ...]:
        """Snapshots of one item, in week order.

        Grid and intervals are both time-ordered, so a single cursor walks the
        intervals once while the weeks advance.
        """
        snapshots = []
        cursor = 0
        intervals = timeline.intervals
        for week in self.grid:
            cursor = IntervalReconstructor.advance_cursor(timeline, week, cursor)
            if cursor >= len(intervals):
                break
            interval = intervals[cursor]
            if not interval.contains(week) or interval.stage not in self.tracked_states:
                continue
            snapshots.append(
                StageSnapshot(
                    week=week,
                    item_id=timeline.item_id,
                    stage=interval.stage,
                    age=week - max(interval.enter, self.horizon),
                )
            )
        return tuple(snapshots)

    def sample_all(self, timelines: Iterable[ItemTimeline]) -> list[StageSnapshot]:
        snapshots: list[StageSnapshot] = []
        for timeline in timelines:
            snapshots.extend(self.sample(timeline))
        return snapshots
