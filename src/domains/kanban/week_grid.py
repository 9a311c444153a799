from datetime import datetime, timedelta

from domains.kanban.errors import InvalidHorizon

WEEK = timedelta(weeks=1)


def build_week_grid(horizon: datetime, now: datetime, align_weeks: bool = False) -> tuple[datetime, ...]:
    """Return the week boundaries ``[start, start+7d, ...]`` up to the last one not after ``now``.

    ``start`` is the horizon itself, or with ``align_weeks`` the first Monday 00:00
    (in the horizon's timezone) at or after it.

    Raises:
        InvalidHorizon: If the horizon lies after ``now``.
    """
    if horizon > now:
        raise InvalidHorizon("Horizon is after the current time", horizon=horizon.isoformat(), now=now.isoformat())

    start = first_monday_on_or_after(horizon) if align_weeks else horizon
    if start > now:
        return ()

    weeks = (now - start) // WEEK
    return tuple(start + index * WEEK for index in range(weeks + 1))


def first_monday_on_or_after(instant: datetime) -> datetime:
    midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
    days_ahead = (7 - midnight.weekday()) % 7
    monday = midnight + timedelta(days=days_ahead)
    if monday < instant:
        monday += WEEK
    return monday


def week_index(grid: tuple[datetime, ...], instant: datetime) -> int | None:
    """Index of the week window ``[grid[i], grid[i] + 7d)`` holding ``instant``, if any."""
    if not grid or instant < grid[0]:
        return None
    index = (instant - grid[0]) // WEEK
    return index if index < len(grid) else None
