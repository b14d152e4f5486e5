from __future__ import annotations

import argparse
import logging
from datetime import date, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.config import settings
from core.db import SessionLocal, create_schema
from core.logging import setup_logging
from events.recurrence import day_of_week_for
from events.time_slots import require_time_slot
from models.batch import Batch
from models.faculty import Faculty
from models.subject import Subject
from models.time_slot import TimeSlot
from models.timetable_entry import TimetableEntry
from models.timetable_entry_exclusion import TimetableEntryExclusion


logger = logging.getLogger("dev_seed_demo_timetable")

CONFIRM_PHRASE = "RESET_DEMO_TIMETABLE"

SLOTS = ["09:00-09:50", "10:15-11:05", "11:15-12:05", "14:15-15:05"]

# (subject code, subject name, credits, faculty name, weekday, slot)
WEEKLY = [
    ("DF101", "Design Fundamentals", 4, "Prof. Smith", "MONDAY", "10:15-11:05"),
    ("TYP201", "Typography", 3, "Prof. Johnson", "TUESDAY", "11:15-12:05"),
    ("CT301", "Color Theory", 3, "Prof. Davis", "WEDNESDAY", "14:15-15:05"),
]


def _get_or_create(db: Session, model, lookup: dict, **values):
    q = select(model)
    for k, v in lookup.items():
        q = q.where(getattr(model, k) == v)
    obj = db.execute(q).scalar_one_or_none()
    if obj is None:
        obj = model(**lookup, **values)
        db.add(obj)
        db.flush()
    return obj


def _reset(db: Session) -> None:
    for model in (TimetableEntryExclusion, TimetableEntry, Subject, TimeSlot, Faculty, Batch):
        db.execute(delete(model))


def seed(db: Session, *, anchor: date) -> int:
    batch = _get_or_create(
        db,
        Batch,
        {"name": "BDes UX Sem 5"},
        program_name="Bachelor of Design",
        specialization_name="UX",
        semester=5,
    )
    slots = {
        name: _get_or_create(
            db,
            TimeSlot,
            {"name": name},
            duration_minutes=require_time_slot(name).duration_minutes,
            sort_order=i,
        )
        for i, name in enumerate(SLOTS)
    }

    created = 0
    for code, subject_name, credits, faculty_name, day, slot in WEEKLY:
        subject = _get_or_create(db, Subject, {"batch_id": batch.id, "code": code}, name=subject_name, credits=credits)
        email = faculty_name.lower().replace("prof. ", "").replace(" ", ".") + "@example.edu"
        faculty = _get_or_create(db, Faculty, {"email": email}, name=faculty_name)
        db.add(
            TimetableEntry(
                batch_id=batch.id,
                subject_id=subject.id,
                faculty_id=faculty.id,
                time_slot_id=slots[slot].id,
                day_of_week=day,
            )
        )
        created += 1

    holiday = anchor + timedelta(days=(4 - anchor.weekday()) % 7)
    db.add(
        TimetableEntry(
            batch_id=batch.id,
            time_slot_id=slots["09:00-09:50"].id,
            day_of_week=day_of_week_for(holiday).value,
            date=holiday,
            custom_event_title="Studio Open House",
            custom_event_color="#22c55e",
        )
    )
    return created + 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a small demo timetable (recurring classes + one custom event)")
    parser.add_argument("--reset", action="store_true", help="Delete existing timetable data first")
    parser.add_argument("--confirm", type=str, default="", help=f"Required with --reset: {CONFIRM_PHRASE}")
    parser.add_argument("--anchor", type=date.fromisoformat, default=date.today(), help="Week to place the custom event in")
    args = parser.parse_args()

    setup_logging(environment=settings.environment)
    if args.reset and args.confirm != CONFIRM_PHRASE:
        raise SystemExit(f"Refusing to reset without --confirm {CONFIRM_PHRASE}")

    create_schema()
    with SessionLocal() as db:
        if args.reset:
            _reset(db)
            logger.info("Cleared timetable tables")
        created = seed(db, anchor=args.anchor)
        db.commit()

    logger.info("Seeded %d timetable entries", created)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
