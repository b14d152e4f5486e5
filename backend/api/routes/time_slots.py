from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import get_db
from events.time_slots import require_time_slot
from models.time_slot import TimeSlot
from schemas.reference import TimeSlotCreate, TimeSlotOut


router = APIRouter()


@router.get("/", response_model=list[TimeSlotOut])
def list_time_slots(db: Session = Depends(get_db)) -> list[TimeSlotOut]:
    q = select(TimeSlot).order_by(TimeSlot.sort_order.asc(), TimeSlot.name.asc())
    return db.execute(q).scalars().all()


@router.post("/", response_model=TimeSlotOut, status_code=201)
def create_time_slot(payload: TimeSlotCreate, db: Session = Depends(get_db)) -> TimeSlotOut:
    # The name was validated by the schema; duration is derived, never client-supplied.
    bounds = require_time_slot(payload.name)
    slot = TimeSlot(
        name=payload.name,
        duration_minutes=bounds.duration_minutes,
        sort_order=payload.sort_order,
        is_active=payload.is_active,
    )
    db.add(slot)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")
    db.refresh(slot)
    return slot
