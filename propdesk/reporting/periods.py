"""
Report periods and date ranges.

Canonical period keys:

* ``WEEK``  -> ``YYYY-Www``. Weeks start on Sunday and week 1 is the
  (possibly partial) week holding 1 January, so a Sunday-Saturday span that
  crosses New Year is split into two keys. Week numbers run 1..54.
* ``MONTH`` -> ``YYYY-MM``
* ``YEAR``  -> ``YYYY``
"""
from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterator, Optional

from dateutil.relativedelta import relativedelta

from ..errors import ValidationError


class PeriodGranularity(str, Enum):
    WEEK = "WEEK"
    MONTH = "MONTH"
    YEAR = "YEAR"


DEFAULT_GRANULARITY = PeriodGranularity.MONTH

_WEEK_KEY = re.compile(r"^(\d{4})-W(\d{2})$")
_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")
_YEAR_KEY = re.compile(r"^(\d{4})$")
_DAY_BOUND = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_granularity(value, default=DEFAULT_GRANULARITY) -> PeriodGranularity:
    if value is None or value == "":
        return default
    if isinstance(value, PeriodGranularity):
        return value
    try:
        return PeriodGranularity(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid granularity '{value}'; expected WEEK, MONTH or YEAR")


def _sunday_offset(year: int) -> int:
    """Weekday of 1 January counted from Sunday = 0."""
    return (date(year, 1, 1).weekday() + 1) % 7


def week_number(d: date) -> int:
    day_of_year0 = d.timetuple().tm_yday - 1
    return (day_of_year0 + _sunday_offset(d.year)) // 7 + 1


def period_key(d: date, granularity) -> str:
    granularity = parse_granularity(granularity)
    if granularity is PeriodGranularity.WEEK:
        return f"{d.year}-W{week_number(d):02d}"
    if granularity is PeriodGranularity.MONTH:
        return f"{d.year}-{d.month:02d}"
    return str(d.year)


def parse_period_key(key: str):
    """Return ``(granularity, year, number)``; number is None for years."""
    key = (key or "").strip()
    m = _WEEK_KEY.match(key)
    if m:
        year, week = int(m.group(1)), int(m.group(2))
        if not 1 <= week <= 54:
            raise ValueError(f"Week out of range in period key: {key}")
        return PeriodGranularity.WEEK, year, week
    m = _MONTH_KEY.match(key)
    if m:
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Month out of range in period key: {key}")
        return PeriodGranularity.MONTH, year, month
    m = _YEAR_KEY.match(key)
    if m:
        return PeriodGranularity.YEAR, int(m.group(1)), None
    raise ValueError(f"Unrecognised period key: {key!r}")


def period_start(key: str) -> date:
    granularity, year, number = parse_period_key(key)
    if granularity is PeriodGranularity.WEEK:
        start = date(year, 1, 1) + timedelta(days=(number - 1) * 7 - _sunday_offset(year))
        return max(start, date(year, 1, 1))
    if granularity is PeriodGranularity.MONTH:
        return date(year, number, 1)
    return date(year, 1, 1)


def period_end(key: str) -> date:
    granularity, year, number = parse_period_key(key)
    if granularity is PeriodGranularity.WEEK:
        end = date(year, 1, 1) + timedelta(days=number * 7 - _sunday_offset(year) - 1)
        return min(end, date(year, 12, 31))
    if granularity is PeriodGranularity.MONTH:
        return date(year, number, calendar.monthrange(year, number)[1])
    return date(year, 12, 31)


def next_period_start(d: date, granularity) -> date:
    return period_end(period_key(d, granularity)) + timedelta(days=1)


def iter_periods(date_from: date, date_to: date, granularity) -> Iterator[str]:
    """Contiguous period keys from the bucket holding date_from to the one holding date_to."""
    if date_from is None or date_to is None or date_from > date_to:
        return
    current = date_from
    while current <= date_to:
        yield period_key(current, granularity)
        current = next_period_start(current, granularity)


def format_period_label(key: str) -> str:
    try:
        granularity, year, number = parse_period_key(key)
    except ValueError:
        return key
    if granularity is PeriodGranularity.WEEK:
        return f"Week {number}, {year}"
    if granularity is PeriodGranularity.MONTH:
        return f"{calendar.month_name[number]} {year}"
    return str(year)


def default_range(granularity, today: Optional[date] = None):
    today = today or date.today()
    granularity = parse_granularity(granularity)
    if granularity is PeriodGranularity.WEEK:
        return today - timedelta(days=83), today
    if granularity is PeriodGranularity.MONTH:
        return today.replace(day=1) - relativedelta(months=11), today
    return date(today.year, 1, 1), today


def parse_date_bound(value, end: bool = False) -> Optional[date]:
    """
    Parse a range bound given as ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``.

    A lower bound expands to the first day of the period, an upper bound
    (``end=True``) to the last day.
    """
    if value is None:
        return None
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        m = _DAY_BOUND.match(text)
        if m:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        m = _MONTH_KEY.match(text) or _YEAR_KEY.match(text)
        if m:
            return period_end(text) if end else period_start(text)
    except ValueError:
        pass
    raise ValidationError(f"Invalid date '{value}'; use YYYY, YYYY-MM or YYYY-MM-DD")


@dataclass(frozen=True)
class ReportRange:
    date_from: date
    date_to: date
    granularity: PeriodGranularity
    explicit: bool = False
    today: Optional[date] = None

    @classmethod
    def resolve(cls, granularity=None, date_from=None, date_to=None, today: Optional[date] = None):
        """
        Build a range from request bounds.

        Explicit bounds are never moved. A lone ``to`` takes its start from
        the default window ending on it; a lone ``from`` runs to today, or
        covers just that day when it lies in the future. Two explicit bounds
        given in reverse order are swapped.
        """
        granularity = parse_granularity(granularity)
        today = today or date.today()
        start = parse_date_bound(date_from)
        end = parse_date_bound(date_to, end=True)
        explicit = start is not None or end is not None
        if start is None and end is None:
            start, end = default_range(granularity, today)
        elif start is None:
            start = default_range(granularity, today=end)[0]
        elif end is None:
            end = today if start <= today else start
        elif start > end:
            start, end = end, start
        return cls(start, end, granularity, explicit, today)

    def with_granularity(self, granularity) -> "ReportRange":
        """
        Re-bucket this range. An explicit range keeps its bounds; a default
        range is recomputed for the new granularity.
        """
        granularity = parse_granularity(granularity)
        if self.explicit:
            return ReportRange(self.date_from, self.date_to, granularity, True, self.today)
        start, end = default_range(granularity, self.today)
        return ReportRange(start, end, granularity, False, self.today)

    def periods(self) -> list[str]:
        return list(iter_periods(self.date_from, self.date_to, self.granularity))

    def to_dict(self) -> dict:
        return {
            "from": self.date_from.isoformat(),
            "to": self.date_to.isoformat(),
            "granularity": self.granularity.value,
            "explicit": self.explicit,
        }
