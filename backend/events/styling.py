from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from events.errors import PastEventLockedError
from events.types import CalendarEvent, EntrySnapshot, EventStyle, ExtendedProps, Occurrence


# Academic planning keeps a month of history editable.
PAST_EVENT_GRACE_DAYS = 30

UNKNOWN_SUBJECT = "Unknown Subject"
NO_FACULTY = "No Faculty"


class EventKind(str, Enum):
    PAST = "past"
    CUSTOM = "custom"
    REGULAR = "regular"


class Mutability(str, Enum):
    FUTURE = "FUTURE"
    RECENT_PAST = "RECENT_PAST"
    DEEP_PAST = "DEEP_PAST"


PAST_STYLE = EventStyle(
    class_name="timetable-event past-event",
    background_color="#e5e7eb",
    border_color="#d1d5db",
    text_color="#6b7280",
)
CUSTOM_STYLE = EventStyle(
    class_name="timetable-event custom-event",
    background_color="#fafafa",
    border_color="#e5e7eb",
    text_color="#374151",
)
# Regular classes keep the calendar's default rendering.
REGULAR_STYLE = EventStyle()

_STYLES: dict[EventKind, EventStyle] = {
    EventKind.PAST: PAST_STYLE,
    EventKind.CUSTOM: CUSTOM_STYLE,
    EventKind.REGULAR: REGULAR_STYLE,
}


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_since(event_date: date | datetime, today: date | datetime) -> int:
    """Whole days from the event's midnight to today's midnight (negative for future)."""
    return (_as_date(today) - _as_date(event_date)).days


def is_past_date(event_date: date | datetime, today: date | datetime) -> bool:
    return days_since(event_date, today) > PAST_EVENT_GRACE_DAYS


def mutability_state(event_date: date | datetime, today: date | datetime) -> Mutability:
    days = days_since(event_date, today)
    if days <= 0:
        return Mutability.FUTURE
    if days <= PAST_EVENT_GRACE_DAYS:
        return Mutability.RECENT_PAST
    return Mutability.DEEP_PAST


def ensure_mutable(event_date: date | datetime, today: date | datetime) -> None:
    if mutability_state(event_date, today) is Mutability.DEEP_PAST:
        raise PastEventLockedError(_as_date(event_date), days_since(event_date, today))


def classify(entry: EntrySnapshot, event_date: date | datetime, today: date | datetime) -> EventKind:
    if is_past_date(event_date, today):
        return EventKind.PAST
    if entry.is_custom_event:
        return EventKind.CUSTOM
    return EventKind.REGULAR


def event_style(kind: EventKind) -> EventStyle:
    # The custom palette is fixed; custom_event_color only travels in extended props.
    return _STYLES[kind]


def event_title(entry: EntrySnapshot) -> str:
    if entry.is_custom_event:
        return str(entry.custom_event_title)
    subject = entry.subject.name if entry.subject and entry.subject.name else UNKNOWN_SUBJECT
    faculty = entry.faculty.name if entry.faculty and entry.faculty.name else NO_FACULTY
    return f"{subject} - {faculty}"


def _extended_props(entry: EntrySnapshot, *, is_past: bool) -> ExtendedProps:
    subject = entry.subject
    faculty = entry.faculty
    batch = entry.batch
    return ExtendedProps(
        timetable_entry_id=entry.id,
        is_past_date=is_past,
        is_custom_event=entry.is_custom_event,
        day_of_week=entry.day_of_week,
        entry_type=entry.entry_type,
        time_slot_id=entry.time_slot_id,
        time_slot_name=entry.time_slot_name,
        batch_id=batch.id if batch else None,
        batch_name=batch.name if batch else None,
        subject_id=subject.id if subject else None,
        subject_name=subject.name if subject else None,
        subject_code=subject.code if subject else None,
        faculty_id=faculty.id if faculty else None,
        faculty_name=faculty.name if faculty else None,
        credits=subject.credits if subject else None,
        notes=entry.notes,
        custom_event_color=entry.custom_event_color,
    )


def resolve_event(occurrence: Occurrence, entry: EntrySnapshot, today: date | datetime) -> CalendarEvent:
    kind = classify(entry, occurrence.event_date, today)
    is_past = kind is EventKind.PAST
    return CalendarEvent(
        id=occurrence.id,
        title=event_title(entry),
        start=occurrence.start,
        end=occurrence.end,
        editable=not is_past,
        start_editable=not is_past,
        duration_editable=not is_past,
        style=event_style(kind),
        extended_props=_extended_props(entry, is_past=is_past),
    )
