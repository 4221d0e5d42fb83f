"""Tests for datetime normalization."""

from datetime import datetime, timedelta, timezone

from pocketlog.domain.services.datetimes import normalize_to_utc


class TestNormalizeToUtc:
    """normalize_to_utc tests."""

    def test_naive_is_treated_as_utc(self) -> None:
        """Test naive datetimes."""
        result = normalize_to_utc(datetime(2024, 1, 1, 12, 0))

        assert result == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_aware_is_converted(self) -> None:
        """Test offset conversion."""
        tokyo = timezone(timedelta(hours=9))

        result = normalize_to_utc(datetime(2024, 1, 1, 21, 0, tzinfo=tokyo))

        assert result == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc
