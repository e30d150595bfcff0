"""
Tests for timestamp helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.utils.ids import new_record_id
from src.utils.timeutils import format_relative, parse_timestamp, to_timestamp

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def test_timestamp_format():
    assert to_timestamp(NOW) == "2024-06-15T12:00:00.000Z"
    assert to_timestamp(datetime(2024, 6, 15, 12, 0, 0, 123456)) == "2024-06-15T12:00:00.123Z"

    offset = datetime(2024, 6, 15, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_timestamp(offset) == "2024-06-15T12:00:00.000Z"


def test_parse_timestamp():
    assert parse_timestamp("2024-06-15T12:00:00.000Z") == NOW
    assert parse_timestamp("2024-06-15T14:00:00+02:00") == NOW

    with pytest.raises(ValueError):
        parse_timestamp("yesterday")


@pytest.mark.parametrize("delta, expected", [
    (timedelta(seconds=30), "just now"),
    (timedelta(minutes=5), "5 minutes ago"),
    (timedelta(hours=3), "3 hours ago"),
    (timedelta(days=2), "2 days ago"),
    (timedelta(days=15), "2 weeks ago"),
    (timedelta(days=65), "2 months ago"),
])
def test_format_relative(delta, expected):
    assert format_relative(to_timestamp(NOW - delta), NOW) == expected


def test_record_id():
    record_id = new_record_id("comment", NOW)
    prefix, millis, suffix = record_id.split("_")

    assert prefix == "comment"
    assert int(millis) == int(NOW.timestamp() * 1000)
    assert len(suffix) == 9
