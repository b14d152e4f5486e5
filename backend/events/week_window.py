from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from events.pipeline import entry_events
from events.recurrence import sunday_weekday
from events.types import CalendarBuild, EntrySnapshot


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeekWindow:
    """Sunday 00:00:00.000Z through Saturday 23:59:59.999Z."""

    start: datetime
    end: datetime

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        return self.end.date()

    def contains(self, d: date | datetime) -> bool:
        if isinstance(d, datetime):
            moment = d if d.tzinfo is not None else d.replace(tzinfo=timezone.utc)
        else:
            # Date-only values are treated as UTC midnight.
            moment = datetime.combine(d, time(), tzinfo=timezone.utc)
        return self.start <= moment <= self.end


def week_window(selected: date | datetime) -> WeekWindow:
    if isinstance(selected, datetime):
        if selected.tzinfo is not None:
            selected = selected.astimezone(timezone.utc)
        selected = selected.date()

    sunday = selected - timedelta(days=sunday_weekday(selected))
    saturday = sunday + timedelta(days=6)
    return WeekWindow(
        start=datetime.combine(sunday, time(), tzinfo=timezone.utc),
        end=datetime.combine(saturday, time(23, 59, 59, 999000), tzinfo=timezone.utc),
    )


def _slot_key(day_of_week: str, slot_name: str, d: date) -> tuple[str, str, date]:
    return (day_of_week, slot_name, d)


def filter_week_events(
    entries: Iterable[EntrySnapshot],
    selected: date | datetime,
    today: date | datetime,
    *,
    include_recurring: bool = False,
) -> CalendarBuild:
    """Events that fall inside the week containing ``selected``.

    By default only dated entries are shown; pattern-only entries are left out
    of the live week view. With ``include_recurring`` their occurrences inside
    the week are added too, except where a dated entry already holds the same
    day, slot and date.
    """

    window = week_window(selected)
    build = CalendarBuild()

    entries = list(entries)
    dated = [e for e in entries if e.date is not None]
    recurring = [e for e in entries if e.date is None]

    occupied: set[tuple[str, str, date]] = set()
    for entry in dated:
        if not window.contains(entry.date):
            continue
        events = entry_events(entry, selected, today, build)
        build.events.extend(events)
        for ev in events:
            occupied.add(_slot_key(entry.day_of_week, entry.time_slot_name, ev.event_date))

    if include_recurring:
        for entry in recurring:
            for ev in entry_events(entry, selected, today, build):
                if not window.contains(ev.event_date):
                    continue
                if _slot_key(entry.day_of_week, entry.time_slot_name, ev.event_date) in occupied:
                    continue
                build.events.append(ev)

    logger.debug(
        "Week %s..%s: %d events (%d dated, %d recurring entries)",
        window.first_day.isoformat(),
        window.last_day.isoformat(),
        len(build.events),
        len(dated),
        len(recurring),
    )
    return build
