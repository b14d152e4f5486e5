from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_today
from core.db import get_db
from events.pipeline import materialize_events
from events.week_window import filter_week_events, week_window
from schemas.calendar import CalendarEventOut, CalendarEventsOut, WeekEventsOut
from services.timetable_service import EntryFilters, load_entry_snapshots


router = APIRouter()


@router.get("/events", response_model=CalendarEventsOut)
def get_calendar_events(
    reference_date: date | None = Query(default=None),
    batch_id: uuid.UUID | None = Query(default=None),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> CalendarEventsOut:
    """Every entry expanded around ``reference_date`` (recurring ones over 8 weeks)."""

    reference = reference_date or today
    entries = load_entry_snapshots(db, EntryFilters(batch_id=batch_id))
    build = materialize_events(entries, reference, today)
    return CalendarEventsOut(
        reference_date=reference,
        events=[CalendarEventOut.from_event(e) for e in build.events],
        skipped_entry_ids=build.skipped_entry_ids,
    )


@router.get("/week", response_model=WeekEventsOut)
def get_week_events(
    selected_date: date | None = Query(default=None),
    batch_id: uuid.UUID | None = Query(default=None),
    include_recurring: bool = Query(default=False),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> WeekEventsOut:
    selected = selected_date or today
    entries = load_entry_snapshots(db, EntryFilters(batch_id=batch_id))
    build = filter_week_events(entries, selected, today, include_recurring=include_recurring)
    window = week_window(selected)
    return WeekEventsOut(
        week_start=window.start,
        week_end=window.end,
        events=[CalendarEventOut.from_event(e) for e in build.events],
        skipped_entry_ids=build.skipped_entry_ids,
    )
