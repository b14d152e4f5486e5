from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from events.errors import MalformedTimeSlotError, UnknownDayOfWeekError
from events.recurrence import materialize_entry
from events.styling import resolve_event
from events.types import CalendarBuild, CalendarEvent, EntrySnapshot


logger = logging.getLogger(__name__)


def entry_events(
    entry: EntrySnapshot,
    reference: date | datetime,
    today: date | datetime,
    build: CalendarBuild,
) -> list[CalendarEvent]:
    """Materialize and resolve a single entry.

    Entries that cannot be materialized are recorded on ``build`` and yield no
    events, so one bad row does not take the whole calendar down.
    """

    try:
        occurrences = materialize_entry(entry, reference)
    except (MalformedTimeSlotError, UnknownDayOfWeekError) as exc:
        logger.warning("Skipping timetable entry %s: %s", entry.id, exc)
        build.skipped_entry_ids.append(entry.id)
        return []
    return [resolve_event(occ, entry, today) for occ in occurrences]


def materialize_events(
    entries: Iterable[EntrySnapshot],
    reference: date | datetime,
    today: date | datetime,
) -> CalendarBuild:
    """Expand every entry (dated and recurring) around ``reference``."""

    build = CalendarBuild()
    count = 0
    for entry in entries:
        count += 1
        build.events.extend(entry_events(entry, reference, today, build))

    logger.debug(
        "Materialized %d events from %d entries (%d skipped)",
        len(build.events),
        count,
        len(build.skipped_entry_ids),
    )
    return build
