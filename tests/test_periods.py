from datetime import date

import pytest

from propdesk.errors import ValidationError
from propdesk.reporting.periods import (
    PeriodGranularity,
    ReportRange,
    default_range,
    format_period_label,
    iter_periods,
    next_period_start,
    parse_date_bound,
    parse_granularity,
    parse_period_key,
    period_end,
    period_key,
    period_start,
    week_number,
)


@pytest.mark.parametrize("d, expected", [
    (date(2024, 1, 1), 1),    # Monday; week 1 started Sunday 31 Dec
    (date(2024, 1, 6), 1),
    (date(2024, 1, 7), 2),    # first full Sunday
    (date(2024, 1, 17), 3),
    (date(2024, 12, 31), 53),
    (date(2025, 1, 1), 1),
    (date(2000, 12, 31), 54),  # leap year starting on Saturday
])
def test_week_number(d, expected):
    assert week_number(d) == expected


def test_period_keys():
    d = date(2024, 3, 9)
    assert period_key(d, PeriodGranularity.WEEK) == "2024-W10"
    assert period_key(d, "MONTH") == "2024-03"
    assert period_key(d, "year") == "2024"


def test_week_spanning_new_year_is_split():
    assert period_key(date(2024, 12, 31), "WEEK") == "2024-W53"
    assert period_key(date(2025, 1, 1), "WEEK") == "2025-W01"


def test_parse_period_key_round_trip():
    assert parse_period_key("2024-03") == (PeriodGranularity.MONTH, 2024, 3)
    assert parse_period_key(period_key(date(2024, 3, 20), "MONTH"))[1:] == (2024, 3)
    assert parse_period_key("2024-W03") == (PeriodGranularity.WEEK, 2024, 3)
    assert parse_period_key("2024") == (PeriodGranularity.YEAR, 2024, None)


@pytest.mark.parametrize("key", ["2024-13", "2024-W55", "24-01", "", "March"])
def test_parse_period_key_rejects_bad_keys(key):
    with pytest.raises(ValueError):
        parse_period_key(key)


def test_period_bounds():
    assert period_start("2024-W01") == date(2024, 1, 1)
    assert period_end("2024-W01") == date(2024, 1, 6)
    assert period_start("2024-W02") == date(2024, 1, 7)
    assert period_end("2024-W53") == date(2024, 12, 31)
    assert period_start("2024-02") == date(2024, 2, 1)
    assert period_end("2024-02") == date(2024, 2, 29)
    assert period_end("2023") == date(2023, 12, 31)


def test_next_period_start():
    assert next_period_start(date(2024, 1, 31), "MONTH") == date(2024, 2, 1)
    assert next_period_start(date(2024, 12, 30), "WEEK") == date(2025, 1, 1)
    assert next_period_start(date(2024, 6, 1), "YEAR") == date(2025, 1, 1)


def test_iter_periods_is_contiguous():
    assert list(iter_periods(date(2024, 1, 15), date(2024, 4, 2), "MONTH")) == [
        "2024-01", "2024-02", "2024-03", "2024-04",
    ]
    assert list(iter_periods(date(2024, 12, 25), date(2025, 1, 10), "WEEK")) == [
        "2024-W52", "2024-W53", "2025-W01", "2025-W02",
    ]
    assert list(iter_periods(date(2022, 5, 1), date(2024, 1, 1), "YEAR")) == ["2022", "2023", "2024"]
    assert list(iter_periods(date(2024, 2, 1), date(2024, 1, 1), "MONTH")) == []


def test_format_period_label():
    assert format_period_label("2024-W03") == "Week 3, 2024"
    assert format_period_label("2024-03") == "March 2024"
    assert format_period_label("2024") == "2024"
    assert format_period_label("not-a-period") == "not-a-period"


def test_default_ranges():
    today = date(2024, 6, 15)
    assert default_range("WEEK", today) == (date(2024, 3, 24), today)
    assert default_range("MONTH", today) == (date(2023, 7, 1), today)
    assert default_range("YEAR", today) == (date(2024, 1, 1), today)


def test_parse_date_bound():
    assert parse_date_bound("2024") == date(2024, 1, 1)
    assert parse_date_bound("2024", end=True) == date(2024, 12, 31)
    assert parse_date_bound("2024-02", end=True) == date(2024, 2, 29)
    assert parse_date_bound("2024-02-10", end=True) == date(2024, 2, 10)
    assert parse_date_bound("") is None
    assert parse_date_bound(None) is None


@pytest.mark.parametrize("value", ["bogus", "2024-13", "2024-02-30"])
def test_parse_date_bound_rejects_garbage(value):
    with pytest.raises(ValidationError):
        parse_date_bound(value)


def test_parse_granularity():
    assert parse_granularity(None) is PeriodGranularity.MONTH
    assert parse_granularity("week") is PeriodGranularity.WEEK
    with pytest.raises(ValidationError):
        parse_granularity("DAY")


class TestReportRange:
    today = date(2024, 6, 15)

    def test_default_range_follows_granularity(self):
        rng = ReportRange.resolve("MONTH", today=self.today)
        assert not rng.explicit
        assert (rng.date_from, rng.date_to) == (date(2023, 7, 1), self.today)

        yearly = rng.with_granularity("YEAR")
        assert (yearly.date_from, yearly.date_to) == (date(2024, 1, 1), self.today)
        assert yearly.granularity is PeriodGranularity.YEAR

    def test_explicit_range_survives_granularity_change(self):
        rng = ReportRange.resolve("MONTH", "2024-01", "2024-03", today=self.today)
        assert rng.explicit
        assert (rng.date_from, rng.date_to) == (date(2024, 1, 1), date(2024, 3, 31))

        weekly = rng.with_granularity("WEEK")
        assert (weekly.date_from, weekly.date_to) == (date(2024, 1, 1), date(2024, 3, 31))
        assert weekly.granularity is PeriodGranularity.WEEK
        assert weekly.periods()[0] == "2024-W01"

    def test_single_bound_takes_other_from_default(self):
        rng = ReportRange.resolve("MONTH", "2024-02-01", None, today=self.today)
        assert (rng.date_from, rng.date_to) == (date(2024, 2, 1), self.today)

    def test_lone_upper_bound_is_never_exceeded(self):
        rng = ReportRange.resolve("MONTH", None, "2024-03", today=date(2026, 10, 19))
        assert rng.explicit
        assert (rng.date_from, rng.date_to) == (date(2023, 4, 1), date(2024, 3, 31))

        weekly = ReportRange.resolve("WEEK", None, "2024-03-31", today=self.today)
        assert (weekly.date_from, weekly.date_to) == (date(2024, 1, 8), date(2024, 3, 31))

    def test_future_lower_bound_covers_that_day(self):
        rng = ReportRange.resolve("MONTH", "2024-09", None, today=self.today)
        assert (rng.date_from, rng.date_to) == (date(2024, 9, 1), date(2024, 9, 1))

    def test_reversed_range_is_swapped(self):
        rng = ReportRange.resolve("MONTH", "2024-05-01", "2024-02-01", today=self.today)
        assert (rng.date_from, rng.date_to) == (date(2024, 2, 1), date(2024, 5, 1))

    def test_to_dict(self):
        rng = ReportRange.resolve("YEAR", "2023", "2024", today=self.today)
        assert rng.to_dict() == {
            "from": "2023-01-01",
            "to": "2024-12-31",
            "granularity": "YEAR",
            "explicit": True,
        }
