from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class MoveEvent:
    """An item entering ``stage`` at ``at`` (timezone-aware UTC)."""

    at: datetime
    stage: str


@dataclass(frozen=True)
class StageInterval:
    """Occupancy of one stage by one item; ``exit`` is None while the interval is open."""

    item_id: str
    stage: str
    enter: datetime
    exit: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.exit is None

    def contains(self, instant: datetime) -> bool:
        """True when ``instant`` lies in ``[enter, exit)``; an open exit never ends."""
        return self.enter <= instant and (self.exit is None or instant < self.exit)


@dataclass(frozen=True)
class ItemTimeline:
    """Normalized events of one item and the intervals reconstructed from them.

    ``intervals[k]`` is the interval opened by ``events[k]``.
    """

    item_id: str
    events: tuple[MoveEvent, ...]
    intervals: tuple[StageInterval, ...]


@dataclass(frozen=True)
class StageSnapshot:
    """Stage occupied by an item at a week boundary and how long it has been there."""

    week: datetime
    item_id: str
    stage: str
    age: timedelta


@dataclass(frozen=True)
class WeeklyMetrics:
    """Final per-week record handed to the renderer.

    ``p90_age_by_stage`` holds None for a stage with no items that week.
    """

    week: datetime
    counts_by_stage: dict[str, int] = field(default_factory=dict)
    p90_age_by_stage: dict[str, timedelta | None] = field(default_factory=dict)
    throughput: int = 0


@dataclass(frozen=True)
class ProjectSettings:
    """Per-project settings consumed by the engine once the horizon has been parsed."""

    label: str
    horizon: datetime
    cfd_states: tuple[str, ...]
    done_states: frozenset[str]
    name: str = ""
    align_weeks: bool = False

    @property
    def tracked_states(self) -> frozenset[str]:
        return frozenset(self.cfd_states)
