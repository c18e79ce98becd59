"""Availability resolution by interval sweep."""

from dataclasses import dataclass
from uuid import UUID

from agenda.scheduling.intervals import Interval, merge_intervals


@dataclass(frozen=True)
class SlotAvailability:
    """A candidate slot and whether it can be booked."""

    slot: Interval
    available: bool
    professional_id: UUID | None = None


def resolve_availability(
    candidates: list[Interval],
    exclusions: list[Interval],
    professional_id: UUID | None = None,
) -> list[SlotAvailability]:
    """
    Mark each candidate slot available or not.

    Exclusions (time off, occupying appointments) are sorted and merged once,
    then candidates are swept in start order with a single forward pointer,
    giving O(n log n + m) for n exclusions and m sorted candidates. A slot is
    unavailable when it intersects an exclusion; touching does not count.

    Args:
        candidates: Candidate slots, ideally already sorted by start
        exclusions: Intervals that block time
        professional_id: Tag copied onto every result

    Returns:
        One entry per candidate, in start order
    """
    blocked = merge_intervals(exclusions)
    ordered = candidates if _is_sorted(candidates) else sorted(candidates)

    results = []
    index = 0
    for slot in ordered:
        # Blocks ending at or before this slot's start end before every later slot too
        while index < len(blocked) and blocked[index].end <= slot.start:
            index += 1
        available = index >= len(blocked) or blocked[index].start >= slot.end
        results.append(SlotAvailability(slot, available, professional_id))

    return results


def _is_sorted(intervals: list[Interval]) -> bool:
    return all(a.start <= b.start for a, b in zip(intervals, intervals[1:]))
