from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from events.types import CalendarEvent


class _CamelModel(BaseModel):
    # Calendar widgets expect camelCase keys (startEditable, extendedProps, ...).
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtendedPropsOut(_CamelModel):
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


class CalendarEventOut(_CamelModel):
    id: str
    title: str
    start: datetime
    end: datetime
    editable: bool
    start_editable: bool
    duration_editable: bool
    class_name: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    text_color: str | None = None
    extended_props: ExtendedPropsOut

    @classmethod
    def from_event(cls, event: CalendarEvent) -> CalendarEventOut:
        return cls(
            id=event.id,
            title=event.title,
            start=event.start,
            end=event.end,
            editable=event.editable,
            start_editable=event.start_editable,
            duration_editable=event.duration_editable,
            class_name=event.style.class_name,
            background_color=event.style.background_color,
            border_color=event.style.border_color,
            text_color=event.style.text_color,
            extended_props=ExtendedPropsOut(**asdict(event.extended_props)),
        )


class CalendarEventsOut(_CamelModel):
    reference_date: date
    events: list[CalendarEventOut]
    skipped_entry_ids: list[str]


class WeekEventsOut(_CamelModel):
    week_start: datetime
    week_end: datetime
    events: list[CalendarEventOut]
    skipped_entry_ids: list[str]
