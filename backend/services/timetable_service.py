from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from events.types import EntrySnapshot, Ref
from models.batch import Batch
from models.faculty import Faculty
from models.subject import Subject
from models.time_slot import TimeSlot
from models.timetable_entry import TimetableEntry
from models.timetable_entry_exclusion import TimetableEntryExclusion


@dataclass(frozen=True)
class EntryFilters:
    batch_id: uuid.UUID | None = None
    faculty_id: uuid.UUID | None = None
    day_of_week: str | None = None
    entry_type: str | None = None
    active_only: bool = True


@dataclass
class Conflict:
    kind: str
    entry_ids: list[str] = field(default_factory=list)


def entry_query(filters: EntryFilters):
    q = (
        select(
            TimetableEntry,
            TimeSlot.name.label("time_slot_name"),
            Batch.name.label("batch_name"),
            Subject.name.label("subject_name"),
            Subject.code.label("subject_code"),
            Subject.credits.label("subject_credits"),
            Faculty.name.label("faculty_name"),
        )
        .select_from(TimetableEntry)
        .join(TimeSlot, TimeSlot.id == TimetableEntry.time_slot_id)
        .join(Batch, Batch.id == TimetableEntry.batch_id)
        .outerjoin(Subject, Subject.id == TimetableEntry.subject_id)
        .outerjoin(Faculty, Faculty.id == TimetableEntry.faculty_id)
        .order_by(TimeSlot.sort_order.asc(), TimetableEntry.created_at.asc(), TimetableEntry.id.asc())
    )
    if filters.active_only:
        q = q.where(TimetableEntry.is_active.is_(True))
    if filters.batch_id is not None:
        q = q.where(TimetableEntry.batch_id == filters.batch_id)
    if filters.faculty_id is not None:
        q = q.where(TimetableEntry.faculty_id == filters.faculty_id)
    if filters.day_of_week is not None:
        q = q.where(TimetableEntry.day_of_week == filters.day_of_week)
    if filters.entry_type is not None:
        q = q.where(TimetableEntry.entry_type == filters.entry_type)
    return q


def _str_or_none(value) -> str | None:
    return str(value) if value is not None else None


def row_to_snapshot(row, excluded_dates: frozenset[date] = frozenset()) -> EntrySnapshot:
    entry: TimetableEntry = row.TimetableEntry
    subject = None
    if entry.subject_id is not None:
        subject = Ref(
            id=str(entry.subject_id),
            name=row.subject_name,
            code=row.subject_code,
            credits=row.subject_credits,
        )
    faculty = None
    if entry.faculty_id is not None:
        faculty = Ref(id=str(entry.faculty_id), name=row.faculty_name)

    return EntrySnapshot(
        id=str(entry.id),
        day_of_week=entry.day_of_week,
        time_slot_name=row.time_slot_name,
        date=entry.date,
        time_slot_id=_str_or_none(entry.time_slot_id),
        subject=subject,
        faculty=faculty,
        batch=Ref(id=str(entry.batch_id), name=row.batch_name),
        custom_event_title=entry.custom_event_title,
        custom_event_color=entry.custom_event_color,
        entry_type=entry.entry_type,
        notes=entry.notes,
        excluded_dates=excluded_dates,
    )


def load_entry_rows(db: Session, filters: EntryFilters) -> list:
    return list(db.execute(entry_query(filters)).all())


def load_exclusions(db: Session, entry_ids: list[uuid.UUID]) -> dict[uuid.UUID, frozenset[date]]:
    if not entry_ids:
        return {}
    q = select(TimetableEntryExclusion.timetable_entry_id, TimetableEntryExclusion.date).where(
        TimetableEntryExclusion.timetable_entry_id.in_(entry_ids)
    )
    found: dict[uuid.UUID, set[date]] = defaultdict(set)
    for entry_id, d in db.execute(q).all():
        found[entry_id].add(d)
    return {k: frozenset(v) for k, v in found.items()}


def load_entry_snapshots(db: Session, filters: EntryFilters) -> list[EntrySnapshot]:
    rows = load_entry_rows(db, filters)
    recurring_ids = [r.TimetableEntry.id for r in rows if r.TimetableEntry.date is None]
    exclusions = load_exclusions(db, recurring_ids)
    return [row_to_snapshot(r, exclusions.get(r.TimetableEntry.id, frozenset())) for r in rows]


def find_conflicts(
    db: Session,
    *,
    batch_id: uuid.UUID,
    faculty_id: uuid.UUID | None,
    time_slot_id: uuid.UUID,
    day_of_week: str,
    on_date: date | None,
    exclude_id: uuid.UUID | None = None,
) -> list[Conflict]:
    """Active entries that would double-book the batch or the faculty member.

    A recurring entry clashes with everything in its weekly slot. A dated entry
    clashes with recurring entries in the slot and with dated entries on the
    same day.
    """

    q = (
        select(TimetableEntry)
        .where(TimetableEntry.is_active.is_(True))
        .where(TimetableEntry.time_slot_id == time_slot_id)
        .where(TimetableEntry.day_of_week == day_of_week)
    )
    if on_date is not None:
        q = q.where(or_(TimetableEntry.date.is_(None), TimetableEntry.date == on_date))
    if exclude_id is not None:
        q = q.where(TimetableEntry.id != exclude_id)

    owners = [TimetableEntry.batch_id == batch_id]
    if faculty_id is not None:
        owners.append(TimetableEntry.faculty_id == faculty_id)
    q = q.where(or_(*owners))

    batch_clash = Conflict(kind="BATCH_DOUBLE_BOOKING")
    faculty_clash = Conflict(kind="FACULTY_CONFLICT")
    for other in db.execute(q).scalars().all():
        if other.batch_id == batch_id:
            batch_clash.entry_ids.append(str(other.id))
        if faculty_id is not None and other.faculty_id == faculty_id:
            faculty_clash.entry_ids.append(str(other.id))

    return [c for c in (batch_clash, faculty_clash) if c.entry_ids]
