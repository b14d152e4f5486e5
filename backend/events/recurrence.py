from __future__ import annotations

from datetime import date, datetime, timedelta

from events.errors import UnknownDayOfWeekError
from events.time_slots import require_time_slot
from events.types import DayOfWeek, EntrySnapshot, Occurrence


# 8 weeks in total: enough for a month view without unbounded growth.
WEEKS_BEFORE = 4
WEEKS_AFTER = 3

# Sunday-based weekday numbers, as calendar widgets use them.
_DAY_INDEX: dict[DayOfWeek, int] = {
    DayOfWeek.MONDAY: 1,
    DayOfWeek.TUESDAY: 2,
    DayOfWeek.WEDNESDAY: 3,
    DayOfWeek.THURSDAY: 4,
    DayOfWeek.FRIDAY: 5,
    DayOfWeek.SATURDAY: 6,
    DayOfWeek.SUNDAY: 0,
}


def parse_day_of_week(value: object) -> DayOfWeek:
    if isinstance(value, DayOfWeek):
        return value
    try:
        return DayOfWeek(str(value).strip().upper())
    except ValueError:
        raise UnknownDayOfWeekError(value) from None


def day_index(value: object) -> int:
    return _DAY_INDEX[parse_day_of_week(value)]


def sunday_weekday(d: date) -> int:
    """Weekday number with Sunday=0 … Saturday=6."""
    return d.isoweekday() % 7


def day_of_week_for(d: date) -> DayOfWeek:
    return list(DayOfWeek)[d.weekday()]


def week_anchor(reference: date) -> date:
    """Monday of the Sunday-started week containing ``reference``."""
    return reference - timedelta(days=sunday_weekday(reference) - 1)


def occurrence_dates(entry: EntrySnapshot, reference: date) -> list[date]:
    if entry.date is not None:
        return [entry.date]

    target = day_index(entry.day_of_week)
    anchor = week_anchor(reference)
    projected = (
        anchor + timedelta(days=offset * 7 + target - 1)
        for offset in range(-WEEKS_BEFORE, WEEKS_AFTER + 1)
    )
    # Cancelled single occurrences of a weekly pattern.
    return [d for d in projected if d not in entry.excluded_dates]


def materialize_entry(entry: EntrySnapshot, reference: date | datetime) -> list[Occurrence]:
    """Expand one entry into dated occurrences around ``reference``.

    Dated entries give exactly one occurrence; recurring ones give one per week
    from ``WEEKS_BEFORE`` weeks before the reference week to ``WEEKS_AFTER``
    weeks after it. Dates in ``entry.excluded_dates`` are left out.

    Raises ``MalformedTimeSlotError`` / ``UnknownDayOfWeekError``.
    """

    if isinstance(reference, datetime):
        reference = reference.date()

    bounds = require_time_slot(entry.time_slot_name)
    return [
        Occurrence(
            entry_id=entry.id,
            event_date=d,
            start=datetime.combine(d, bounds.start_time),
            end=datetime.combine(d, bounds.end_time),
        )
        for d in occurrence_dates(entry, reference)
    ]
