"""
Date range value type used for billing periods, stays and room usage
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Mapping, Sequence, Union
import math

from models.errors import InvalidRangeError
from utils.helpers import DateLike, parse_date, format_date

SECONDS_PER_DAY = 24 * 60 * 60


def _to_datetime(value: DateLike, label: str) -> datetime:
    parsed = parse_date(value)
    if parsed is None:
        raise InvalidRangeError(f"Invalid {label}: {value!r}")
    return parsed


@dataclass(frozen=True)
class DateRange:
    """
    Immutable time interval between start_date and end_date.

    Day counts are the elapsed time between the two endpoints rounded to
    whole days, so 2024-01-01..2024-01-31 is 30 days long.
    """
    start_date: datetime
    end_date: datetime

    def __init__(self, start_date: DateLike, end_date: DateLike):
        start = _to_datetime(start_date, "start date")
        end = _to_datetime(end_date, "end date")
        if start > end:
            raise InvalidRangeError(
                f"Start date {format_date(start)} is after end date {format_date(end)}"
            )
        object.__setattr__(self, "start_date", start)
        object.__setattr__(self, "end_date", end)

    @classmethod
    def from_value(
        cls,
        value: Union["DateRange", Mapping, Sequence],
    ) -> "DateRange":
        """
        Normalize a DateRange, a serialized mapping or a (start, end) pair
        into a DateRange.
        """
        if isinstance(value, DateRange):
            return value

        if isinstance(value, Mapping):
            start = value.get("startDate", value.get("start_date"))
            end = value.get("endDate", value.get("end_date"))
            if start is None or end is None:
                raise InvalidRangeError(f"Date range is missing start or end: {dict(value)!r}")
            return cls(start, end)

        if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
            return cls(value[0], value[1])

        raise InvalidRangeError(f"Cannot build a date range from {value!r}")

    def length_in_days(self) -> int:
        """Number of days between start and end (end day not counted)"""
        seconds = (self.end_date - self.start_date).total_seconds()
        # Half days round up
        return int(math.floor(seconds / SECONDS_PER_DAY + 0.5))

    def contains(self, value: DateLike) -> bool:
        """Check if a date falls inside the range (both ends inclusive)"""
        moment = _to_datetime(value, "date")
        return self.start_date <= moment <= self.end_date

    def overlaps(self, other: "DateRange") -> bool:
        """Check if two ranges share at least one instant"""
        return not (self.end_date < other.start_date or self.start_date > other.end_date)

    def overlap(self, other: "DateRange") -> Optional["DateRange"]:
        """Intersection of two ranges, or None when they are disjoint"""
        if not self.overlaps(other):
            return None
        return DateRange(
            max(self.start_date, other.start_date),
            min(self.end_date, other.end_date),
        )

    def overlap_days(self, other: "DateRange") -> int:
        """Length in days of the intersection (0 when disjoint)"""
        shared = self.overlap(other)
        if shared is None:
            return 0
        return shared.length_in_days()

    def clamp_to(self, bounds: "DateRange") -> "DateRange":
        """
        Restrict this range to lie within bounds.

        A range entirely outside bounds is returned unchanged so that it
        still contributes zero overlap days.
        """
        shared = self.overlap(bounds)
        return shared if shared is not None else self

    def format(self) -> str:
        """Display string, e.g. '2024-01-01 to 2024-03-31'"""
        return f"{format_date(self.start_date)} to {format_date(self.end_date)}"

    def to_dict(self) -> dict:
        """Serialize to {'startDate': ISO, 'endDate': ISO}"""
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "DateRange":
        """Rebuild a range serialized by to_dict"""
        return cls.from_value(data)

    @classmethod
    def single_day(cls, day: Optional[date] = None) -> "DateRange":
        """Zero-length range on the given day (today by default)"""
        day = day or date.today()
        return cls(day, day)

    def __str__(self) -> str:
        return self.format()
