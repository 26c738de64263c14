import datetime as _dt

import pytest

from common.datetime import file_stamp, iso_millis, parse_iso8601, utcnow


@pytest.mark.parametrize(
    "s,expected",
    [
        ("2025-08-27T12:00:00Z", _dt.datetime(2025, 8, 27, 12, 0, 0, tzinfo=_dt.timezone.utc)),
        ("2025-08-27T12:00:00+00:00", _dt.datetime(2025, 8, 27, 12, 0, 0, tzinfo=_dt.timezone.utc)),
        ("2025-08-27T07:00:00-05:00", _dt.datetime(2025, 8, 27, 12, 0, 0, tzinfo=_dt.timezone.utc)),
        ("2025-08-27T12:00:00.000+0000", _dt.datetime(2025, 8, 27, 12, 0, 0, tzinfo=_dt.timezone.utc)),
    ],
)
def test_parse_iso8601(s, expected):
    assert parse_iso8601(s) == expected


def test_iso_millis_matches_javascript_style():
    dt = _dt.datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=_dt.timezone.utc)
    assert iso_millis(dt) == "2024-05-01T10:20:30.123Z"


def test_iso_millis_converts_offsets_to_utc():
    tz = _dt.timezone(_dt.timedelta(hours=2))
    dt = _dt.datetime(2024, 5, 1, 12, 0, 0, tzinfo=tz)
    assert iso_millis(dt) == "2024-05-01T10:00:00.000Z"


def test_file_stamp_has_no_colons_or_dots():
    dt = _dt.datetime(2024, 5, 1, 10, 20, 30, 5000, tzinfo=_dt.timezone.utc)
    stamp = file_stamp(dt)
    assert stamp == "2024-05-01T10-20-30-005Z"
    assert ":" not in stamp and "." not in stamp


def test_utcnow_is_aware():
    assert utcnow().tzinfo is not None
