import re
from datetime import UTC, datetime


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp (or pass through a datetime) as an aware UTC datetime.

    Accepts a trailing ``Z``, offsets without colon (``+0000``) and fractions longer
    than microseconds. Naive values are taken to be UTC.

    Raises:
        ValueError: If the value is empty, not a string/datetime, or unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        parsed = _parse_iso(value.strip())
    else:
        raise ValueError(f"Not a timestamp: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _parse_iso(text: str) -> datetime:
    ts = text
    if ts.endswith(("Z", "z")):
        ts = ts[:-1] + "+00:00"

    match = re.search(r"([+-]\d{2})(\d{2})$", ts)
    if match and "T" in ts:
        ts = f"{ts[: match.start()]}{match.group(1)}:{match.group(2)}"

    # fromisoformat only takes up to six fraction digits
    match = re.search(r"\.(\d+)", ts)
    if match and len(match.group(1)) > 6:
        ts = f"{ts[: match.start(1)]}{match.group(1)[:6]}{ts[match.end(1):]}"

    try:
        return datetime.fromisoformat(ts)
    except ValueError as e:
        raise ValueError(f"Unparseable timestamp: {text!r}") from e


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with explicit UTC offset, second precision unless microseconds are set."""
    return value.astimezone(UTC).isoformat()
