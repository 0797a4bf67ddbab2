"""Tests for DateWindow and timestamp parsing."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from analytics.window import DateWindow, parse_timestamp


class TestParseTimestamp:
    def test_offset_timestamp(self):
        parsed = parse_timestamp("2024-01-04T10:15:00-05:00")
        assert parsed == datetime(2024, 1, 4, 15, 15, tzinfo=UTC)
        assert parsed.utcoffset() == timedelta(hours=-5)

    def test_zulu_timestamp(self):
        assert parse_timestamp("2024-01-04T10:15:00Z") == datetime(2024, 1, 4, 10, 15, tzinfo=UTC)

    def test_date_only_is_utc_midnight(self):
        assert parse_timestamp("2024-01-04") == datetime(2024, 1, 4, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "yesterday", "2024-13-45"])
    def test_unparsable_is_none(self, value):
        assert parse_timestamp(value) is None

    def test_datetime_passthrough_gets_utc(self):
        assert parse_timestamp(datetime(2024, 1, 4)) == datetime(2024, 1, 4, tzinfo=UTC)


class TestDateWindow:
    def test_from_dates_covers_whole_days(self):
        window = DateWindow.from_bounds(date(2024, 1, 1), date(2024, 1, 31))
        assert window.start == datetime(2024, 1, 1, tzinfo=UTC)
        assert window.end == datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=UTC)
        assert window.days == 31

    def test_keeps_viewer_timezone(self):
        tz = timezone(timedelta(hours=2))
        window = DateWindow.from_bounds(datetime(2024, 3, 10, 14, tzinfo=tz), datetime(2024, 3, 11, 1, tzinfo=tz))
        assert window.start == datetime(2024, 3, 10, tzinfo=tz)
        assert window.end == datetime(2024, 3, 11, 23, 59, 59, 999999, tzinfo=tz)

    def test_contains_is_inclusive(self):
        window = DateWindow.from_bounds(date(2024, 1, 1), date(2024, 1, 1))
        assert window.contains(datetime(2024, 1, 1, tzinfo=UTC))
        assert window.contains(datetime(2024, 1, 1, 23, 59, 59, tzinfo=UTC))
        assert not window.contains(datetime(2024, 1, 2, tzinfo=UTC))
        assert not window.contains(None)

    def test_start_after_end_is_rejected(self):
        with pytest.raises(ValueError):
            DateWindow.from_bounds(date(2024, 2, 1), date(2024, 1, 1))

    def test_widened_moves_start_back_one_year(self):
        window = DateWindow.from_bounds(date(2024, 3, 1), date(2024, 3, 31))
        widened = window.widened(years=1)
        assert widened.start == datetime(2023, 3, 1, tzinfo=UTC)
        assert widened.end == window.end

    def test_widened_from_leap_day(self):
        window = DateWindow.from_bounds(date(2024, 2, 29), date(2024, 3, 1))
        assert window.widened().start == datetime(2023, 2, 28, tzinfo=UTC)

    def test_str(self):
        assert str(DateWindow.from_bounds(date(2024, 1, 1), date(2024, 1, 7))) == "2024-01-01..2024-01-07"
