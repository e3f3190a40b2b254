from datetime import date, datetime, timezone

import pytest

from services import formatting


@pytest.mark.parametrize("value", [
    "2026-10-19T10:30:00Z",
    "2026-10-19T10:30:00+00:00",
    1792405800,
    1792405800000,
    "1792405800000",
])
def test_parse_timestamp_formats(value):
    assert formatting.parse_timestamp(value) == datetime(2026, 10, 19, 10, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, "", "yesterday", True, object()])
def test_unparseable_timestamps(value):
    assert formatting.parse_timestamp(value) is None
    assert formatting.format_date(value) == ""


def test_naive_values_are_utc():
    assert formatting.parse_timestamp("2026-10-19T10:30:00").tzinfo == timezone.utc
    assert formatting.parse_timestamp(datetime(2026, 10, 19)).tzinfo == timezone.utc


def test_format_date():
    assert formatting.format_date("2026-10-19T10:30:00Z") == "19 Oct 2026, 10:30"


def test_is_on_day():
    assert formatting.is_on_day("2026-10-19T23:59:00Z", date(2026, 10, 19))
    assert not formatting.is_on_day("2026-10-20T00:00:00Z", date(2026, 10, 19))
    assert not formatting.is_on_day(None, date(2026, 10, 19))


def test_labels_fall_back_to_raw_value():
    assert formatting.format_reason("fake") == "Fake / Misleading"
    assert formatting.format_reason("brigading") == "brigading"
    assert formatting.format_status("resolved_invalid") == "Invalid"
    assert formatting.format_appeal_status("approved") == "✅ Approved"
    assert formatting.format_status(None) == ""
