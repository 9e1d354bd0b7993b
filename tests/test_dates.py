"""Tests for calendar-day normalization and review date parsing."""

from datetime import date, datetime, timedelta, timezone

from backend.srs.dates import (
    align_to,
    is_same_day_or_earlier,
    local_midnight,
    midnight_after,
    parse_review_date,
)


class TestMidnight:
    def test_local_midnight_strips_time(self) -> None:
        assert local_midnight(datetime(2026, 1, 24, 23, 59, 59, 999999)) == datetime(2026, 1, 24)

    def test_local_midnight_keeps_tzinfo(self) -> None:
        tz = timezone(timedelta(hours=5, minutes=30))
        result = local_midnight(datetime(2026, 1, 24, 6, 0, tzinfo=tz))
        assert result == datetime(2026, 1, 24, tzinfo=tz)

    def test_midnight_after(self) -> None:
        assert midnight_after(datetime(2026, 1, 31, 17, 0), 1) == datetime(2026, 2, 1)
        assert midnight_after(datetime(2026, 12, 30, 1, 0), 3) == datetime(2027, 1, 2)

    def test_midnight_after_zero_days(self) -> None:
        assert midnight_after(datetime(2026, 1, 24, 12, 0), 0) == datetime(2026, 1, 24)


class TestParseReviewDate:
    def test_datetime_passthrough(self) -> None:
        value = datetime(2026, 1, 24, 15, 0)
        assert parse_review_date(value) is value

    def test_date(self) -> None:
        assert parse_review_date(date(2026, 1, 24)) == datetime(2026, 1, 24)

    def test_iso_string(self) -> None:
        assert parse_review_date("2026-01-24T15:00:00") == datetime(2026, 1, 24, 15, 0)

    def test_iso_string_with_z(self) -> None:
        parsed = parse_review_date("2026-01-24T00:00:00.000Z")
        assert parsed == datetime(2026, 1, 24, tzinfo=timezone.utc)

    def test_date_only_string(self) -> None:
        assert parse_review_date("2026-01-24") == datetime(2026, 1, 24)

    def test_epoch_milliseconds(self) -> None:
        expected = datetime(2026, 1, 24, 12, 0)
        millis = expected.timestamp() * 1000
        assert parse_review_date(millis) == expected

    def test_invalid_values(self) -> None:
        assert parse_review_date("invalid-date") is None
        assert parse_review_date("") is None
        assert parse_review_date("   ") is None
        assert parse_review_date(None) is None
        assert parse_review_date(True) is None
        assert parse_review_date(float("nan")) is None
        assert parse_review_date(10**20) is None
        assert parse_review_date(["2026-01-24"]) is None


class TestDayComparison:
    def test_same_day_any_hour(self) -> None:
        assert is_same_day_or_earlier(datetime(2026, 1, 24, 15, 0), datetime(2026, 1, 24, 8, 0))

    def test_earlier_day(self) -> None:
        assert is_same_day_or_earlier(datetime(2026, 1, 23, 23, 59), datetime(2026, 1, 24, 0, 1))

    def test_later_day(self) -> None:
        assert not is_same_day_or_earlier(datetime(2026, 1, 25), datetime(2026, 1, 24, 23, 59))

    def test_aware_value_against_aware_reference(self) -> None:
        # 02:00 UTC on the 25th is still the 24th in UTC-5
        tz = timezone(timedelta(hours=-5))
        moment = datetime(2026, 1, 25, 2, 0, tzinfo=timezone.utc)
        assert is_same_day_or_earlier(moment, datetime(2026, 1, 24, 12, 0, tzinfo=tz))

    def test_naive_value_against_aware_reference(self) -> None:
        tz = timezone(timedelta(hours=9))
        aligned = align_to(datetime(2026, 1, 24, 10, 0), datetime(2026, 1, 24, tzinfo=tz))
        assert aligned == datetime(2026, 1, 24, 10, 0, tzinfo=tz)

    def test_aware_value_against_naive_reference(self) -> None:
        value = datetime(2026, 1, 24, 10, 0, tzinfo=timezone.utc)
        aligned = align_to(value, datetime(2026, 1, 24))
        assert aligned.tzinfo is None
        assert aligned == value.astimezone().replace(tzinfo=None)
