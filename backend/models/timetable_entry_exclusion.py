from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class TimetableEntryExclusion(Base):
    """A single cancelled date of a weekly timetable entry."""

    __tablename__ = "timetable_entry_exclusions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    timetable_entry_id = Column(Uuid, ForeignKey("timetable_entries.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("timetable_entry_id", "date", name="uq_timetable_entry_exclusions_entry_date"),
    )
