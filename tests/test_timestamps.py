"""Unit tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

from repo_norms.utils.timestamps import (
    ensure_utc,
    format_display_timestamp,
    format_report_date,
    format_timestamp,
    utc_now,
)


class TestUtcNow:
    """Tests for utc_now function."""

    def test_returns_utc_datetime(self):
        """Test that utc_now returns a timezone-aware UTC datetime."""
        now = utc_now()

        assert isinstance(now, datetime)
        assert now.tzinfo == timezone.utc


class TestEnsureUtc:
    """Tests for ensure_utc function."""

    def test_none_input(self):
        assert ensure_utc(None) is None

    def test_naive_datetime_assumed_utc(self):
        naive = datetime(2025, 11, 4, 12, 0, 0)

        result = ensure_utc(naive)

        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_other_timezone_converted(self):
        """Test that aware datetimes are converted to UTC."""
        eastern = timezone(timedelta(hours=-5))
        dt = datetime(2025, 11, 4, 7, 0, 0, tzinfo=eastern)

        result = ensure_utc(dt)

        assert result.tzinfo == timezone.utc
        assert result.hour == 12


class TestFormatting:
    """Tests for the timestamp formatters."""

    def test_format_timestamp(self):
        dt = datetime(2025, 11, 4, 12, 30, 45, tzinfo=timezone.utc)

        assert format_timestamp(dt) == "2025-11-04T12:30:45Z"

    def test_format_timestamp_converts_to_utc(self):
        dt = datetime(2025, 11, 4, 20, 0, 0, tzinfo=timezone(timedelta(hours=8)))

        assert format_timestamp(dt) == "2025-11-04T12:00:00Z"

    def test_report_date(self):
        """Test the report date follows UTC, not the local offset."""
        dt = datetime(2025, 11, 4, 23, 30, tzinfo=timezone(timedelta(hours=-2)))

        assert format_report_date(dt) == "2025-11-05"

    def test_report_date_defaults_to_today(self):
        assert format_report_date() == utc_now().strftime("%Y-%m-%d")

    def test_display_timestamp(self):
        dt = datetime(2025, 11, 4, 9, 5, tzinfo=timezone.utc)

        assert format_display_timestamp(dt) == "2025-11-04 09:05 UTC"
