from datetime import UTC, datetime, timedelta, timezone

import pytest

from domains.kanban.timestamps import format_timestamp, parse_timestamp


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-01-01T00:00:00Z", datetime(2024, 1, 1, tzinfo=UTC)),
        ("2024-01-01T00:00:00.123Z", datetime(2024, 1, 1, 0, 0, 0, 123000, tzinfo=UTC)),
        ("2024-01-01T00:00:00.123456789Z", datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=UTC)),
        ("2024-01-01T03:00:00+03:00", datetime(2024, 1, 1, tzinfo=UTC)),
        ("2024-01-01T03:00:00+0300", datetime(2024, 1, 1, tzinfo=UTC)),
        ("2024-01-01T00:00:00", datetime(2024, 1, 1, tzinfo=UTC)),
        ("2024-01-01", datetime(2024, 1, 1, tzinfo=UTC)),
    ],
)
def test_parse_timestamp(text, expected):
    parsed = parse_timestamp(text)
    assert parsed == expected
    assert parsed.utcoffset() == timedelta(0)


def test_datetimes_are_converted_to_utc():
    local = datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=-5)))
    assert parse_timestamp(local) == datetime(2024, 1, 1, 17, tzinfo=UTC)
    assert parse_timestamp(datetime(2024, 1, 1)).tzinfo is not None


@pytest.mark.parametrize("value", [None, "", "   ", "2024-13-01T00:00:00Z", 1704067200])
def test_invalid_timestamps(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 1, 1, tzinfo=UTC)) == "2024-01-01T00:00:00+00:00"
