from events.errors import CalendarError, MalformedTimeSlotError, PastEventLockedError, UnknownDayOfWeekError
from events.pipeline import materialize_events
from events.recurrence import materialize_entry
from events.styling import ensure_mutable, is_past_date, resolve_event
from events.types import CalendarBuild, CalendarEvent, EntrySnapshot, Occurrence, Ref
from events.week_window import WeekWindow, filter_week_events, week_window

__all__ = [
	"CalendarBuild",
	"CalendarError",
	"CalendarEvent",
	"EntrySnapshot",
	"MalformedTimeSlotError",
	"Occurrence",
	"PastEventLockedError",
	"Ref",
	"UnknownDayOfWeekError",
	"WeekWindow",
	"ensure_mutable",
	"filter_week_events",
	"is_past_date",
	"materialize_entry",
	"materialize_events",
	"resolve_event",
	"week_window",
]
