from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.sql import func

from models.base import Base


DAY_OF_WEEK_VALUES = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")
ENTRY_TYPE_VALUES = ("REGULAR", "MAKEUP", "EXTRA", "EXAM")


class TimetableEntry(Base):
    """A scheduled class: a one-off on ``date``, or weekly on ``day_of_week`` when ``date`` is null."""

    __tablename__ = "timetable_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    batch_id = Column(Uuid, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=True)
    faculty_id = Column(Uuid, ForeignKey("faculty.id", ondelete="SET NULL"), nullable=True)
    time_slot_id = Column(Uuid, ForeignKey("time_slots.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Text, nullable=False)
    date = Column(Date, nullable=True)
    entry_type = Column(Text, nullable=False, default="REGULAR")
    custom_event_title = Column(Text, nullable=True)
    custom_event_color = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "day_of_week in ('MONDAY','TUESDAY','WEDNESDAY','THURSDAY','FRIDAY','SATURDAY','SUNDAY')",
            name="ck_timetable_entries_day_of_week",
        ),
        CheckConstraint(
            "entry_type in ('REGULAR','MAKEUP','EXTRA','EXAM')",
            name="ck_timetable_entries_entry_type",
        ),
        Index("ix_timetable_entries_batch_slot", "batch_id", "time_slot_id", "day_of_week"),
        Index("ix_timetable_entries_faculty_slot", "faculty_id", "time_slot_id", "day_of_week"),
    )
