# bontemp/utils/test_datetime_utils.py
"""
Date/time utility tests

Usage: python -m pytest bontemp/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, timedelta, timezone
from bontemp.utils.datetime_utils import DateTimeUtils


def test_parse_iso_datetime():
    """Every accepted format is normalized to UTC"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+01:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc

    assert DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+01:00").hour == 9


def test_window_start():
    """The trailing window ends at 'now' and spans the given hours"""
    now = datetime(2024, 5, 2, 21, 59, tzinfo=timezone.utc)
    assert DateTimeUtils.window_start(24, now) == datetime(2024, 5, 1, 21, 59, tzinfo=timezone.utc)

    # naive 'now' is read as UTC
    assert DateTimeUtils.window_start(24, datetime(2024, 5, 2, 12, 0)).tzinfo == timezone.utc

    start = DateTimeUtils.window_start(24)
    assert DateTimeUtils.now() - start >= timedelta(hours=24)


def test_to_iso_string():
    rome = timezone(timedelta(hours=2))
    assert DateTimeUtils.to_iso_string(datetime(2024, 5, 2, 23, 59, tzinfo=rome)) == "2024-05-02T21:59:00Z"


def test_from_firestore_and_json_safe():
    data = {
        'timestamp': datetime(2024, 1, 15, 10, 30),
        'nested': {'calculatedAt': datetime(2024, 1, 15, 11, 0, tzinfo=timezone.utc)},
        'likes': 3
    }

    converted = DateTimeUtils.from_firestore(data)
    assert converted['timestamp'].tzinfo == timezone.utc
    assert converted['likes'] == 3

    safe = DateTimeUtils.to_json_safe(converted)
    assert safe['timestamp'] == "2024-01-15T10:30:00Z"
    assert safe['nested']['calculatedAt'] == "2024-01-15T11:00:00Z"


def test_error_handling():
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
