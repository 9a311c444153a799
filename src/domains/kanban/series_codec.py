"""Delimited text form of a weekly metrics series.

One header row, then one row per week::

    week_start,count:Backlog,count:Doing,p90_seconds:Backlog,p90_seconds:Doing,throughput
    2024-01-01T00:00:00+00:00,3,1,86400,,0

P90 ages are seconds with an optional six-digit microsecond fraction. An absent
P90 is an empty field, never zero.
"""

import csv
import io
from collections.abc import Sequence
from datetime import timedelta

from domains.kanban.models import WeeklyMetrics
from domains.kanban.timestamps import format_timestamp, parse_timestamp

WEEK_COLUMN = "week_start"
COUNT_PREFIX = "count:"
P90_PREFIX = "p90_seconds:"
THROUGHPUT_COLUMN = "throughput"


class SeriesFormatError(ValueError):
    """Raised when a series file does not follow the expected layout."""


def format_age(age: timedelta | None) -> str:
    if age is None:
        return ""
    whole_seconds = age.days * 86400 + age.seconds
    if age.microseconds:
        return f"{whole_seconds}.{age.microseconds:06d}"
    return str(whole_seconds)


def parse_age(text: str) -> timedelta | None:
    if text == "":
        return None
    whole, _, fraction = text.partition(".")
    if not whole.isdigit() or (fraction and not fraction.isdigit()):
        raise SeriesFormatError(f"Invalid age value: {text!r}")
    return timedelta(seconds=int(whole), microseconds=int(fraction.ljust(6, "0")[:6]) if fraction else 0)


def header(cfd_states: Sequence[str]) -> list[str]:
    return (
        [WEEK_COLUMN]
        + [f"{COUNT_PREFIX}{stage}" for stage in cfd_states]
        + [f"{P90_PREFIX}{stage}" for stage in cfd_states]
        + [THROUGHPUT_COLUMN]
    )


def dumps(series: Sequence[WeeklyMetrics], cfd_states: Sequence[str], delimiter: str = ",") -> str:
    """Serialize a series; stage columns follow ``cfd_states`` order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    writer.writerow(header(cfd_states))
    for record in series:
        writer.writerow(
            [format_timestamp(record.week)]
            + [record.counts_by_stage.get(stage, 0) for stage in cfd_states]
            + [format_age(record.p90_age_by_stage.get(stage)) for stage in cfd_states]
            + [record.throughput]
        )
    return buffer.getvalue()


def loads(text: str, delimiter: str = ",") -> tuple[list[str], list[WeeklyMetrics]]:
    """Parse a serialized series back into ``(cfd_states, records)``.

    Raises:
        SeriesFormatError: On a missing or malformed header or row.
    """
    rows = list(csv.reader(io.StringIO(text), delimiter=delimiter))
    if not rows:
        raise SeriesFormatError("Series is empty; a header row is required")

    columns = rows[0]
    if len(columns) < 2 or columns[0] != WEEK_COLUMN or columns[-1] != THROUGHPUT_COLUMN:
        raise SeriesFormatError(f"Unexpected header: {columns}")
    stage_columns = columns[1:-1]
    if len(stage_columns) % 2:
        raise SeriesFormatError(f"Unbalanced stage columns: {stage_columns}")
    half = len(stage_columns) // 2
    count_columns, p90_columns = stage_columns[:half], stage_columns[half:]
    if not all(c.startswith(COUNT_PREFIX) for c in count_columns) or not all(
        c.startswith(P90_PREFIX) for c in p90_columns
    ):
        raise SeriesFormatError(f"Unexpected stage columns: {stage_columns}")
    cfd_states = [c[len(COUNT_PREFIX):] for c in count_columns]
    if cfd_states != [c[len(P90_PREFIX):] for c in p90_columns]:
        raise SeriesFormatError("Count and P90 columns name different stages")

    records = []
    for line_number, row in enumerate(rows[1:], start=2):
        if not row:
            continue
        if len(row) != len(columns):
            raise SeriesFormatError(f"Line {line_number}: expected {len(columns)} fields, got {len(row)}")
        try:
            week = parse_timestamp(row[0])
            counts = [int(value) for value in row[1 : 1 + half]]
            throughput = int(row[-1])
        except ValueError as e:
            raise SeriesFormatError(f"Line {line_number}: {e}") from e
        ages = [parse_age(value) for value in row[1 + half : -1]]
        records.append(
            WeeklyMetrics(
                week=week,
                counts_by_stage=dict(zip(cfd_states, counts)),
                p90_age_by_stage=dict(zip(cfd_states, ages)),
                throughput=throughput,
            )
        )
    return cfd_states, records
