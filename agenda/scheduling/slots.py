"""Candidate slot generation from recurring schedule rules."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from agenda.scheduling.intervals import Interval
from agenda.utils.dates import day_of_week


@dataclass(frozen=True)
class Rule:
    """A recurring availability window for one calendar."""

    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    start_time: time
    end_time: time
    slot_minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be within 0-6, got {self.day_of_week}")
        if self.start_time >= self.end_time:
            raise ValueError("Rule start_time must be before end_time")
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")


def generate_slots(
    rules: list[Rule],
    target_date: date,
    timezone: str = "UTC",
    duration_minutes: int | None = None,
) -> list[Interval]:
    """
    Tile the rules that apply to ``target_date`` into candidate slots.

    Each applicable rule is walked from start_time in steps of slot_minutes.
    Slots are ``duration_minutes`` wide (slot_minutes when omitted); a slot
    that would end after the rule's end_time is dropped.

    Args:
        rules: Rules of a single calendar
        target_date: Local calendar date to generate for
        timezone: IANA zone the rule times are expressed in
        duration_minutes: Width of each slot, e.g. a service's duration

    Returns:
        Sorted, de-duplicated slots with UTC bounds
    """
    zone = ZoneInfo(timezone)
    weekday = day_of_week(target_date)
    slots: set[Interval] = set()

    for rule in rules:
        if rule.day_of_week != weekday:
            continue

        window_start = datetime.combine(target_date, rule.start_time, tzinfo=zone).astimezone(UTC)
        window_end = datetime.combine(target_date, rule.end_time, tzinfo=zone).astimezone(UTC)
        step = timedelta(minutes=rule.slot_minutes)
        width = timedelta(minutes=duration_minutes or rule.slot_minutes)

        current = window_start
        while current + width <= window_end:
            slots.add(Interval(current, current + width))
            current += step

    return sorted(slots)
