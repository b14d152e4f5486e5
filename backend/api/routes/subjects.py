from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import get_db
from models.batch import Batch
from models.subject import Subject
from schemas.reference import SubjectCreate, SubjectOut


router = APIRouter()


@router.get("/", response_model=list[SubjectOut])
def list_subjects(
    batch_id: uuid.UUID | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[SubjectOut]:
    q = select(Subject).order_by(Subject.code.asc())
    if batch_id is not None:
        q = q.where(Subject.batch_id == batch_id)
    return db.execute(q).scalars().all()


@router.post("/", response_model=SubjectOut, status_code=201)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)) -> SubjectOut:
    if db.get(Batch, payload.batch_id) is None:
        raise HTTPException(status_code=404, detail="BATCH_NOT_FOUND")

    subject = Subject(**payload.model_dump())
    db.add(subject)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")
    db.refresh(subject)
    return subject
