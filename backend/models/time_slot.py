from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Text, Uuid
from sqlalchemy.sql import func

from models.base import Base


class TimeSlot(Base):
    """Named daily interval, e.g. ``"10:15-11:05"``; the name encodes start and end."""

    __tablename__ = "time_slots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    duration_minutes = Column(Integer, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_time_slots_duration"),
    )
