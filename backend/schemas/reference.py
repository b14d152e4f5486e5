from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from events.errors import MalformedTimeSlotError
from events.time_slots import require_time_slot


class BatchCreate(BaseModel):
    name: str = Field(min_length=1)
    program_name: str | None = None
    specialization_name: str | None = None
    semester: int = Field(default=1, ge=1)
    is_active: bool = True


class BatchOut(BatchCreate):
    id: uuid.UUID
    created_at: datetime

    class Config:
        from_attributes = True


class SubjectCreate(BaseModel):
    batch_id: uuid.UUID
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    credits: int = Field(default=0, ge=0)
    is_active: bool = True


class SubjectOut(SubjectCreate):
    id: uuid.UUID
    created_at: datetime

    class Config:
        from_attributes = True


class FacultyCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    is_active: bool = True


class FacultyOut(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TimeSlotCreate(BaseModel):
    name: str = Field(min_length=1, examples=["10:15-11:05"])
    sort_order: int = 0
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        try:
            require_time_slot(v)
        except MalformedTimeSlotError as exc:
            raise ValueError(f"MALFORMED_TIME_SLOT: {exc.reason}")
        return v.replace(" ", "")


class TimeSlotOut(BaseModel):
    id: uuid.UUID
    name: str
    duration_minutes: int
    sort_order: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
