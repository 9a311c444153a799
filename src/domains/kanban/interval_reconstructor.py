from datetime import datetime

from domains.kanban.models import ItemTimeline, MoveEvent, StageInterval


class IntervalReconstructor:
    """Chains an item's normalized events into stage-occupancy intervals.

    The first event is the entry into its destination stage; nothing is assumed
    before it. Every later event closes the current interval and opens the next, so
    the intervals of one item never overlap and leave no gaps. The last interval
    stays open, including for done stages.
    """

    def reconstruct(self, item_id: str, events: tuple[MoveEvent, ...]) -> ItemTimeline:
        """Build the timeline of one item from events already in strictly increasing order.

        An item without events yields an empty timeline.
        """
        intervals = []
        for index, event in enumerate(events):
            exit_at = events[index + 1].at if index + 1 < len(events) else None
            intervals.append(StageInterval(item_id=item_id, stage=event.stage, enter=event.at, exit=exit_at))
        return ItemTimeline(item_id=item_id, events=events, intervals=tuple(intervals))

    @staticmethod
    def advance_cursor(timeline: ItemTimeline, instant: datetime, cursor: int = 0) -> int:
        """Move ``cursor`` past every interval that ended at or before ``instant``.

        Instants must be visited in ascending order. The interval at the returned index
        contains ``instant`` unless the item did not exist yet (or the index is past
        the end, which cannot happen because the last interval is open).
        """
        intervals = timeline.intervals
        while cursor < len(intervals) and not intervals[cursor].is_open and intervals[cursor].exit <= instant:
            cursor += 1
        return cursor

    @staticmethod
    def covered_span(timeline: ItemTimeline) -> tuple[datetime, datetime | None] | None:
        """(first enter, last exit) of the timeline; the exit is None while the item is still open."""
        if not timeline.intervals:
            return None
        return timeline.intervals[0].enter, timeline.intervals[-1].exit
