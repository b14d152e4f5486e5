from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Text, Uuid
from sqlalchemy.sql import func

from models.base import Base


class Batch(Base):
    """A student cohort (program + semester + specialization)."""

    __tablename__ = "batches"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    program_name = Column(Text, nullable=True)
    specialization_name = Column(Text, nullable=True)
    semester = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("semester >= 1", name="ck_batches_semester"),
    )
