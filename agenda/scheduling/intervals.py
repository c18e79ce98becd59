"""Half-open time intervals and the overlap predicate."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement


@dataclass(frozen=True, order=True)
class Interval:
    """A half-open interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"Interval start must be before end: {self.start} >= {self.end}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    Test whether [a_start, a_end) and [b_start, b_end) intersect.

    Intervals that merely touch (one ends where the other starts) do not.
    """
    return a_start < b_end and a_end > b_start


def overlap_clause(
    start_column: ColumnElement[Any],
    end_column: ColumnElement[Any],
    start: datetime,
    end: datetime,
) -> ColumnElement[bool]:
    """SQL form of ``overlaps`` for rows stored as [start_column, end_column)."""
    return and_(start_column < end, end_column > start)


def merge_intervals(intervals: list[Interval]) -> list[Interval]:
    """
    Sort intervals and merge those that overlap or touch.

    Returns:
        Disjoint intervals in ascending order
    """
    merged: list[Interval] = []
    for interval in sorted(intervals):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            if interval.end > last.end:
                merged[-1] = Interval(last.start, interval.end)
        else:
            merged.append(interval)
    return merged
