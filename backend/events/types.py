from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class EntryType(str, Enum):
    REGULAR = "REGULAR"
    MAKEUP = "MAKEUP"
    EXTRA = "EXTRA"
    EXAM = "EXAM"


@dataclass(frozen=True)
class Ref:
    """Reference to a batch, subject or faculty member as seen by the calendar."""

    id: str | None = None
    name: str | None = None
    code: str | None = None
    credits: int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Ref | None:
        if data is None:
            return None
        raw_id = data.get("id")
        credits = data.get("credits")
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            name=data.get("name"),
            code=data.get("code"),
            credits=int(credits) if credits is not None else None,
        )


def _coerce_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Accept both "2024-03-15" and "2024-03-15T00:00:00.000Z".
    return date.fromisoformat(str(value)[:10])


def _pick(data: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake)


@dataclass(frozen=True)
class EntrySnapshot:
    """Read-only view of a timetable entry, detached from the ORM."""

    id: str
    day_of_week: str
    time_slot_name: str
    date: date | None = None
    time_slot_id: str | None = None
    subject: Ref | None = None
    faculty: Ref | None = None
    batch: Ref | None = None
    custom_event_title: str | None = None
    custom_event_color: str | None = None
    entry_type: str = EntryType.REGULAR.value
    notes: str | None = None
    excluded_dates: frozenset[date] = frozenset()

    @property
    def is_recurring(self) -> bool:
        return self.date is None

    @property
    def is_custom_event(self) -> bool:
        return bool(self.custom_event_title)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EntrySnapshot:
        """Build a snapshot from the JSON shape returned by the entries API."""

        time_slot = _pick(data, "timeSlot", "time_slot") or {}
        day = _pick(data, "dayOfWeek", "day_of_week")
        time_slot_id = _pick(data, "timeSlotId", "time_slot_id") or time_slot.get("id")
        excluded = _pick(data, "excludedDates", "excluded_dates") or ()
        return cls(
            id=str(data["id"]),
            day_of_week=str(day.value if isinstance(day, Enum) else day),
            time_slot_name=time_slot.get("name"),
            date=_coerce_date(data.get("date")),
            time_slot_id=str(time_slot_id) if time_slot_id is not None else None,
            subject=Ref.from_mapping(data.get("subject")),
            faculty=Ref.from_mapping(data.get("faculty")),
            batch=Ref.from_mapping(data.get("batch")),
            custom_event_title=_pick(data, "customEventTitle", "custom_event_title"),
            custom_event_color=_pick(data, "customEventColor", "custom_event_color"),
            entry_type=str(_pick(data, "entryType", "entry_type") or EntryType.REGULAR.value),
            notes=data.get("notes"),
            excluded_dates=frozenset(filter(None, map(_coerce_date, excluded))),
        )


@dataclass(frozen=True)
class Occurrence:
    entry_id: str
    event_date: date
    start: datetime
    end: datetime

    @property
    def id(self) -> str:
        return f"{self.entry_id}-{self.event_date.isoformat()}"


@dataclass(frozen=True)
class EventStyle:
    class_name: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    text_color: str | None = None


@dataclass(frozen=True)
class ExtendedProps:
    timetable_entry_id: str
    is_past_date: bool
    is_custom_event: bool
    day_of_week: str
    entry_type: str
    time_slot_id: str | None = None
    time_slot_name: str | None = None
    batch_id: str | None = None
    batch_name: str | None = None
    subject_id: str | None = None
    subject_name: str | None = None
    subject_code: str | None = None
    faculty_id: str | None = None
    faculty_name: str | None = None
    credits: int | None = None
    notes: str | None = None
    custom_event_color: str | None = None


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    start: datetime
    end: datetime
    editable: bool
    start_editable: bool
    duration_editable: bool
    style: EventStyle
    extended_props: ExtendedProps

    @property
    def event_date(self) -> date:
        return self.start.date()


@dataclass
class CalendarBuild:
    events: list[CalendarEvent] = field(default_factory=list)
    skipped_entry_ids: list[str] = field(default_factory=list)
