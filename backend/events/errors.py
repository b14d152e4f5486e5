from __future__ import annotations

from datetime import date


class CalendarError(Exception):
    """Base class for calendar materialization errors."""


class MalformedTimeSlotError(CalendarError, ValueError):
    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Malformed time slot {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class UnknownDayOfWeekError(CalendarError, ValueError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown day of week: {value!r}")
        self.value = value


class PastEventLockedError(CalendarError):
    """Raised when an edit/drag/delete targets an event deep in the past."""

    def __init__(self, event_date: date, days_ago: int) -> None:
        super().__init__(f"Event on {event_date.isoformat()} is {days_ago} days old and can no longer be changed")
        self.event_date = event_date
        self.days_ago = days_ago
