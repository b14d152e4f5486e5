from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import get_db
from models.faculty import Faculty
from schemas.reference import FacultyCreate, FacultyOut


router = APIRouter()


@router.get("/", response_model=list[FacultyOut])
def list_faculty(db: Session = Depends(get_db)) -> list[FacultyOut]:
    return db.execute(select(Faculty).order_by(Faculty.name.asc())).scalars().all()


@router.post("/", response_model=FacultyOut, status_code=201)
def create_faculty(payload: FacultyCreate, db: Session = Depends(get_db)) -> FacultyOut:
    member = Faculty(name=payload.name, email=payload.email.strip().lower(), is_active=payload.is_active)
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")
    db.refresh(member)
    return member
