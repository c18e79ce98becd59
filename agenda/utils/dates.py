"""Date and time helpers."""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Sao_Paulo"


def parse_datetime(value: datetime | str) -> datetime:
    """Parse an ISO 8601 string; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def is_valid_date(value: str) -> bool:
    """Check whether a string is a parseable ISO date or datetime."""
    try:
        parse_datetime(value)
    except ValueError:
        return False
    return True


def to_utc(value: datetime | str, timezone: str = DEFAULT_TIMEZONE) -> datetime:
    """
    Convert to UTC.

    Naive values are read as wall-clock time in ``timezone``.
    """
    moment = parse_datetime(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo(timezone))
    return moment.astimezone(UTC)


def from_utc(value: datetime | str, timezone: str = DEFAULT_TIMEZONE) -> datetime:
    """Convert a UTC (or aware) moment to wall-clock time in ``timezone``."""
    moment = parse_datetime(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(ZoneInfo(timezone))


def day_of_week(value: date | datetime | str) -> int:
    """Day of week with 0 = Sunday and 6 = Saturday."""
    if isinstance(value, str):
        value = parse_datetime(value)
    return (value.weekday() + 1) % 7


def add_minutes(value: datetime | str, minutes: int) -> datetime:
    """Shift a moment by a number of minutes."""
    return parse_datetime(value) + timedelta(minutes=minutes)


def start_of_day(value: datetime | str) -> datetime:
    """Midnight at the start of the value's day, keeping its tzinfo."""
    moment = parse_datetime(value)
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(value: datetime | str) -> datetime:
    """Last microsecond of the value's day, keeping its tzinfo."""
    moment = parse_datetime(value)
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


def local_day_bounds(target: date, timezone: str) -> tuple[datetime, datetime]:
    """UTC bounds [start, end) of a local calendar day."""
    zone = ZoneInfo(timezone)
    start = datetime.combine(target, time.min, tzinfo=zone)
    end = datetime.combine(target + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(UTC), end.astimezone(UTC)


def generate_time_slots(start_time: str, end_time: str, slot_minutes: int = 15) -> list[str]:
    """
    List ``HH:MM`` labels from start_time (inclusive) to end_time (exclusive).

    The last label may start a slot that runs past end_time.
    """
    anchor = date(2000, 1, 1)
    current = datetime.combine(anchor, time.fromisoformat(start_time))
    end = datetime.combine(anchor, time.fromisoformat(end_time))
    step = timedelta(minutes=slot_minutes)

    labels = []
    while current < end:
        labels.append(current.strftime("%H:%M"))
        current += step
    return labels


def appointment_duration_minutes(start: datetime | str, end: datetime | str) -> int:
    """Whole minutes between two moments, rounded."""
    delta = parse_datetime(end) - parse_datetime(start)
    return round(delta.total_seconds() / 60)


def is_valid_appointment_time(
    start: datetime | str,
    end: datetime | str,
    business_start: str,
    business_end: str,
) -> bool:
    """
    Check an appointment falls on a weekday inside business hours.

    Times are compared as wall-clock ``HH:MM`` of the given moments.
    """
    start_moment = parse_datetime(start)
    end_moment = parse_datetime(end)

    if day_of_week(start_moment) in (0, 6):
        return False

    return (
        start_moment.strftime("%H:%M") >= business_start
        and end_moment.strftime("%H:%M") <= business_end
    )
