from __future__ import annotations

import uuid
import datetime as dt
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator


DayOfWeekLiteral = Literal["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"]
EntryTypeLiteral = Literal["REGULAR", "MAKEUP", "EXTRA", "EXAM"]


def check_custom_or_regular(
    *,
    is_custom_event: bool,
    custom_event_title: str | None,
    subject_id: uuid.UUID | None,
    faculty_id: uuid.UUID | None,
) -> None:
    """Either a custom event with a title, or a regular class with subject and faculty."""

    if is_custom_event:
        if not (custom_event_title or "").strip():
            raise ValueError("INVALID_ENTRY: custom events need custom_event_title")
    elif subject_id is None or faculty_id is None:
        raise ValueError("INVALID_ENTRY: regular classes need subject_id and faculty_id")


class TimetableEntryCreate(BaseModel):
    batch_id: uuid.UUID
    time_slot_id: uuid.UUID
    day_of_week: DayOfWeekLiteral
    date: dt.date | None = None
    subject_id: uuid.UUID | None = None
    faculty_id: uuid.UUID | None = None
    entry_type: EntryTypeLiteral = "REGULAR"
    notes: str | None = None

    is_custom_event: bool = False
    custom_event_title: str | None = None
    custom_event_color: str | None = None

    @model_validator(mode="after")
    def _custom_or_regular(self) -> TimetableEntryCreate:
        check_custom_or_regular(
            is_custom_event=self.is_custom_event,
            custom_event_title=self.custom_event_title,
            subject_id=self.subject_id,
            faculty_id=self.faculty_id,
        )
        return self


class TimetableEntryUpdate(BaseModel):
    time_slot_id: uuid.UUID | None = None
    day_of_week: DayOfWeekLiteral | None = None
    date: dt.date | None = None
    subject_id: uuid.UUID | None = None
    faculty_id: uuid.UUID | None = None
    entry_type: EntryTypeLiteral | None = None
    notes: str | None = None
    custom_event_title: str | None = None
    custom_event_color: str | None = None
    is_active: bool | None = None

    @field_validator("time_slot_id", "day_of_week", "entry_type", "is_active")
    @classmethod
    def _not_null(cls, v, info):
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class TimetableEntryOut(BaseModel):
    id: uuid.UUID
    batch_id: uuid.UUID
    time_slot_id: uuid.UUID
    day_of_week: str
    date: dt.date | None = None
    subject_id: uuid.UUID | None = None
    faculty_id: uuid.UUID | None = None
    entry_type: str
    notes: str | None = None
    custom_event_title: str | None = None
    custom_event_color: str | None = None
    is_active: bool
    created_at: dt.datetime

    time_slot_name: str | None = None
    batch_name: str | None = None
    subject_name: str | None = None
    faculty_name: str | None = None
