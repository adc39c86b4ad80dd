"""Tests for timestamp formatting."""

from datetime import datetime, timedelta, timezone

from mod_catalog.ingestion.utils import format_timestamp


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_seconds(self) -> None:
        """Test the default second precision with a Z suffix."""
        value = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)

        assert format_timestamp(value) == "2024-01-02T03:04:05Z"

    def test_milliseconds(self) -> None:
        """Test millisecond precision for lastUpdated."""
        value = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)

        assert format_timestamp(value, timespec="milliseconds") == "2024-01-02T03:04:05.678Z"

    def test_converts_to_utc(self) -> None:
        """Test that offsets are normalized to UTC."""
        value = datetime(2024, 1, 2, 5, 0, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(value) == "2024-01-02T03:00:00Z"

    def test_naive_is_utc(self) -> None:
        """Test that naive datetimes are taken as UTC."""
        assert format_timestamp(datetime(2024, 1, 2)) == "2024-01-02T00:00:00Z"
