"""Calendar-month keys used for rule versions and payroll summaries."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

MONTH_PATTERN = r"^\d{4}-\d{2}$"

_MONTH_RE = re.compile(MONTH_PATTERN)

Clock = Callable[[], datetime]


@dataclass(frozen=True, order=True)
class Month:
    """A calendar month, keyed textually as ``YYYY-MM``.

    Ordering follows the calendar, so ``max()`` and ``sorted()`` work on
    collections of months.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Year out of range: {self.year}")

    @classmethod
    def parse(cls, value: str) -> Month:
        """Parse a ``YYYY-MM`` key."""
        if not _MONTH_RE.match(value):
            raise ValueError(f"Invalid month '{value}', expected YYYY-MM")
        year, month = value.split("-")
        return cls(int(year), int(month))

    @classmethod
    def of(cls, day: date) -> Month:
        """Month containing the given date."""
        return cls(day.year, day.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        """Last calendar day, leap years included."""
        _, days = calendar.monthrange(self.year, self.month)
        return date(self.year, self.month, days)

    def previous(self) -> Month:
        if self.month == 1:
            return Month(self.year - 1, 12)
        return Month(self.year, self.month - 1)

    def next(self) -> Month:
        if self.month == 12:
            return Month(self.year + 1, 1)
        return Month(self.year, self.month + 1)

    def contains(self, day: date) -> bool:
        return self.first_day <= day <= self.last_day

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
