from datetime import datetime, timedelta, timezone

from farmwatch.utils.time import coerce_datetime, format_datetime, to_iso, utc_now


def test_coerce_datetime_parses_z_suffix():
    dt = coerce_datetime("2026-01-01T00:00:00Z")
    assert dt is not None
    assert dt.tzinfo is not None
    assert dt.utcoffset() == timedelta(0)
    assert dt.isoformat().endswith("+00:00")


def test_coerce_datetime_parses_offset():
    dt = coerce_datetime("2026-01-01T02:00:00+02:00")
    assert dt is not None
    assert dt.utcoffset() == timedelta(0)
    assert dt.hour == 0


def test_coerce_datetime_parses_naive_as_utc():
    dt = coerce_datetime("2026-01-01T00:00:00")
    assert dt is not None
    assert dt.utcoffset() == timedelta(0)
    assert isinstance(utc_now() - dt, timedelta)


def test_coerce_datetime_rejects_garbage():
    assert coerce_datetime("not a date") is None
    assert coerce_datetime(12345) is None
    assert coerce_datetime(None) is None


def test_to_iso_normalises_naive_values():
    assert to_iso(datetime(2026, 1, 1, 8, 30)) == "2026-01-01T08:30:00+00:00"
    assert to_iso(None) is None


def test_format_datetime_uses_french_layout():
    dt = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    assert format_datetime(dt) == "04/03/2026 05:06:07"
