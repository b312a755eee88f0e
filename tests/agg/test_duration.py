from datetime import datetime, timedelta, timezone

import pytest

from gymtracker.agg import format_duration
from gymtracker.models import INVALID_TIMESTAMP

START = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (timedelta(minutes=45), "45m"),
        (timedelta(hours=2, minutes=30), "2h 30m"),
        (timedelta(hours=1), "1h 0m"),
        (timedelta(seconds=59), "0m"),
    ],
)
def test_format_duration(elapsed, expected):
    assert format_duration(START, START + elapsed) == expected


def test_missing_end():
    assert format_duration(START, None) == "N/A"


def test_invalid_timestamps():
    assert format_duration(INVALID_TIMESTAMP, START) == "N/A"
    assert format_duration(START, INVALID_TIMESTAMP) == "N/A"
