from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import get_db
from models.batch import Batch
from schemas.reference import BatchCreate, BatchOut


router = APIRouter()


@router.get("/", response_model=list[BatchOut])
def list_batches(
    active: bool | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[BatchOut]:
    q = select(Batch).order_by(Batch.name.asc())
    if active is not None:
        q = q.where(Batch.is_active.is_(active))
    return db.execute(q).scalars().all()


@router.post("/", response_model=BatchOut, status_code=201)
def create_batch(payload: BatchCreate, db: Session = Depends(get_db)) -> BatchOut:
    batch = Batch(**payload.model_dump())
    db.add(batch)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")
    db.refresh(batch)
    return batch
