from __future__ import annotations

import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.deps import get_today, past_event_locked
from core.db import get_db
from events.errors import PastEventLockedError
from events.recurrence import day_of_week_for
from events.styling import ensure_mutable
from models.batch import Batch
from models.faculty import Faculty
from models.subject import Subject
from models.time_slot import TimeSlot
from models.timetable_entry import TimetableEntry
from models.timetable_entry_exclusion import TimetableEntryExclusion
from schemas.timetable import (
    DayOfWeekLiteral,
    EntryTypeLiteral,
    TimetableEntryCreate,
    TimetableEntryOut,
    TimetableEntryUpdate,
    check_custom_or_regular,
)
from services.timetable_service import EntryFilters, entry_query, find_conflicts, load_entry_rows


logger = logging.getLogger(__name__)

router = APIRouter()


def _row_to_out(row) -> TimetableEntryOut:
    e: TimetableEntry = row.TimetableEntry
    return TimetableEntryOut(
        id=e.id,
        batch_id=e.batch_id,
        time_slot_id=e.time_slot_id,
        day_of_week=e.day_of_week,
        date=e.date,
        subject_id=e.subject_id,
        faculty_id=e.faculty_id,
        entry_type=e.entry_type,
        notes=e.notes,
        custom_event_title=e.custom_event_title,
        custom_event_color=e.custom_event_color,
        is_active=bool(e.is_active),
        created_at=e.created_at,
        time_slot_name=row.time_slot_name,
        batch_name=row.batch_name,
        subject_name=row.subject_name,
        faculty_name=row.faculty_name,
    )


def _load_out(db: Session, entry_id: uuid.UUID) -> TimetableEntryOut:
    q = entry_query(EntryFilters(active_only=False)).where(TimetableEntry.id == entry_id)
    return _row_to_out(db.execute(q).one())


def _require(db: Session, model, obj_id: uuid.UUID | None, code: str) -> None:
    if obj_id is not None and db.get(model, obj_id) is None:
        raise HTTPException(status_code=404, detail=code)


def _raise_on_conflicts(db: Session, entry: TimetableEntry, *, exclude_id: uuid.UUID | None = None) -> None:
    conflicts = find_conflicts(
        db,
        batch_id=entry.batch_id,
        faculty_id=entry.faculty_id,
        time_slot_id=entry.time_slot_id,
        day_of_week=entry.day_of_week,
        on_date=entry.date,
        exclude_id=exclude_id,
    )
    if conflicts:
        raise HTTPException(
            status_code=409,
            detail={
                "code": "TIMETABLE_CONFLICT",
                "conflicts": [{"kind": c.kind, "entry_ids": c.entry_ids} for c in conflicts],
            },
        )


def _guard_occurrence(entry: TimetableEntry, occurrence_date: date | None, today: date) -> None:
    # Dated entries are judged by their own date; recurring ones by the occurrence the client acted on.
    target = entry.date or occurrence_date
    if target is None:
        return
    try:
        ensure_mutable(target, today)
    except PastEventLockedError as exc:
        raise past_event_locked(exc)


@router.get("/entries", response_model=list[TimetableEntryOut])
def list_entries(
    batch_id: uuid.UUID | None = Query(default=None),
    faculty_id: uuid.UUID | None = Query(default=None),
    day_of_week: DayOfWeekLiteral | None = Query(default=None),
    entry_type: EntryTypeLiteral | None = Query(default=None),
    include_inactive: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> list[TimetableEntryOut]:
    filters = EntryFilters(
        batch_id=batch_id,
        faculty_id=faculty_id,
        day_of_week=day_of_week,
        entry_type=entry_type,
        active_only=not include_inactive,
    )
    return [_row_to_out(r) for r in load_entry_rows(db, filters)]


@router.post("/entries", response_model=TimetableEntryOut, status_code=201)
def create_entry(
    payload: TimetableEntryCreate,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> TimetableEntryOut:
    _require(db, Batch, payload.batch_id, "BATCH_NOT_FOUND")
    _require(db, TimeSlot, payload.time_slot_id, "TIME_SLOT_NOT_FOUND")
    _require(db, Subject, payload.subject_id, "SUBJECT_NOT_FOUND")
    _require(db, Faculty, payload.faculty_id, "FACULTY_NOT_FOUND")

    day_of_week = payload.day_of_week
    if payload.date is not None:
        try:
            ensure_mutable(payload.date, today)
        except PastEventLockedError as exc:
            raise past_event_locked(exc)
        # A dated entry's weekday always follows its date.
        day_of_week = day_of_week_for(payload.date).value

    entry = TimetableEntry(
        batch_id=payload.batch_id,
        time_slot_id=payload.time_slot_id,
        day_of_week=day_of_week,
        date=payload.date,
        subject_id=None if payload.is_custom_event else payload.subject_id,
        faculty_id=payload.faculty_id,
        entry_type=payload.entry_type,
        notes=payload.notes,
        custom_event_title=payload.custom_event_title.strip() if payload.is_custom_event else None,
        custom_event_color=payload.custom_event_color if payload.is_custom_event else None,
    )
    _raise_on_conflicts(db, entry)

    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")

    logger.info("Created timetable entry %s (%s, date=%s)", entry.id, entry.day_of_week, entry.date)
    return _load_out(db, entry.id)


@router.patch("/entries/{entry_id}", response_model=TimetableEntryOut)
def update_entry(
    entry_id: uuid.UUID,
    payload: TimetableEntryUpdate,
    occurrence_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> TimetableEntryOut:
    entry = db.get(TimetableEntry, entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="TIMETABLE_ENTRY_NOT_FOUND")

    _guard_occurrence(entry, occurrence_date, today)

    updates = payload.model_dump(exclude_unset=True)
    touched = set(updates)
    _require(db, TimeSlot, updates.get("time_slot_id"), "TIME_SLOT_NOT_FOUND")
    _require(db, Subject, updates.get("subject_id"), "SUBJECT_NOT_FOUND")
    _require(db, Faculty, updates.get("faculty_id"), "FACULTY_NOT_FOUND")

    if updates.get("custom_event_title") is not None:
        updates["custom_event_title"] = updates["custom_event_title"].strip()

    def merged(key: str):
        return updates[key] if key in updates else getattr(entry, key)

    custom_title = merged("custom_event_title")
    try:
        check_custom_or_regular(
            is_custom_event=custom_title is not None,
            custom_event_title=custom_title,
            subject_id=merged("subject_id"),
            faculty_id=merged("faculty_id"),
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    new_date = updates.get("date")
    if new_date is not None:
        try:
            ensure_mutable(new_date, today)
        except PastEventLockedError as exc:
            raise past_event_locked(exc)

    # A dated entry's weekday always follows its date, whichever field changed.
    effective_date = merged("date")
    if effective_date is not None:
        updates["day_of_week"] = day_of_week_for(effective_date).value

    for k, v in updates.items():
        setattr(entry, k, v)

    if entry.is_active and {"time_slot_id", "day_of_week", "date", "faculty_id", "is_active"}.intersection(touched):
        _raise_on_conflicts(db, entry, exclude_id=entry.id)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")

    logger.info("Updated timetable entry %s: %s", entry.id, sorted(updates.keys()))
    return _load_out(db, entry.id)


@router.delete("/entries/{entry_id}")
def delete_entry(
    entry_id: uuid.UUID,
    occurrence_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> dict:
    """Delete an entry, or with ``occurrence_date`` a single week of a recurring one.

    A single occurrence is recorded as an exclusion; the weekly pattern and its
    other occurrences, past ones included, stay as they are.
    """

    entry = db.get(TimetableEntry, entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="TIMETABLE_ENTRY_NOT_FOUND")

    _guard_occurrence(entry, occurrence_date, today)

    if entry.date is None and occurrence_date is not None:
        if day_of_week_for(occurrence_date).value != entry.day_of_week:
            raise HTTPException(
                status_code=422,
                detail={"code": "OCCURRENCE_NOT_IN_PATTERN", "day_of_week": entry.day_of_week},
            )
        exists = db.execute(
            select(TimetableEntryExclusion.id).where(
                TimetableEntryExclusion.timetable_entry_id == entry.id,
                TimetableEntryExclusion.date == occurrence_date,
            )
        ).scalar_one_or_none()
        if exists is None:
            db.add(TimetableEntryExclusion(timetable_entry_id=entry.id, date=occurrence_date))
            db.commit()
        logger.info("Excluded %s from recurring timetable entry %s", occurrence_date, entry_id)
        return {"ok": True, "excluded_date": occurrence_date.isoformat()}

    # SQLite does not enforce ON DELETE CASCADE without a pragma.
    db.execute(delete(TimetableEntryExclusion).where(TimetableEntryExclusion.timetable_entry_id == entry.id))
    db.delete(entry)
    db.commit()
    logger.info("Deleted timetable entry %s", entry_id)
    return {"ok": True}
