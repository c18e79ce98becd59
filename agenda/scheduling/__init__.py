"""Slot generation, availability sweep and overlap checks."""

from agenda.scheduling.availability import SlotAvailability, resolve_availability
from agenda.scheduling.intervals import Interval, merge_intervals, overlap_clause, overlaps
from agenda.scheduling.slots import Rule, day_of_week, generate_slots

__all__ = [
    "Interval",
    "Rule",
    "SlotAvailability",
    "day_of_week",
    "generate_slots",
    "merge_intervals",
    "overlap_clause",
    "overlaps",
    "resolve_availability",
]
