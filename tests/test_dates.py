"""Tests for SigV4 date snapshots."""

from datetime import datetime, timedelta, timezone

import pytest

from s3signer.dates import Dates


class TestDates:
    """Tests for Dates."""

    def test_from_utc_datetime(self):
        dates = Dates.from_datetime(datetime(2013, 5, 24, tzinfo=timezone.utc))
        assert dates.long == "20130524T000000Z"
        assert dates.short == "20130524"

    def test_time_fields(self):
        dates = Dates.from_datetime(datetime(2026, 2, 22, 9, 5, 7, tzinfo=timezone.utc))
        assert dates.long == "20260222T090507Z"

    def test_naive_datetime_taken_as_utc(self):
        dates = Dates.from_datetime(datetime(2013, 5, 24, 23, 59, 59))
        assert dates.long == "20130524T235959Z"

    def test_aware_datetime_converted_to_utc(self):
        """Conversion can move the short date back across midnight."""
        plus_two = timezone(timedelta(hours=2))
        dates = Dates.from_datetime(datetime(2013, 5, 24, 1, 30, tzinfo=plus_two))
        assert dates.long == "20130523T233000Z"
        assert dates.short == "20130523"

    def test_fixed_width_years(self):
        dates = Dates.from_datetime(datetime(999, 1, 2, tzinfo=timezone.utc))
        assert dates.long == "09990102T000000Z"
        assert dates.short == "09990102"

    def test_short_is_prefix_of_long(self):
        dates = Dates.from_datetime(datetime(2020, 12, 31, 23, 59, 59, tzinfo=timezone.utc))
        assert dates.long.startswith(dates.short)

    def test_from_long_date(self):
        dates = Dates.from_long_date("20130524T000000Z")
        assert dates == Dates(long="20130524T000000Z", short="20130524")

    def test_from_long_date_invalid(self):
        with pytest.raises(ValueError):
            Dates.from_long_date("2013-05-24")

    def test_now_reads_clock_once(self):
        calls = []

        def clock():
            calls.append(1)
            return datetime(2013, 5, 24, tzinfo=timezone.utc)

        dates = Dates.now(clock)
        assert dates.short == "20130524"
        assert len(calls) == 1
