from models.batch import Batch
from models.faculty import Faculty
from models.subject import Subject
from models.time_slot import TimeSlot
from models.timetable_entry import TimetableEntry
from models.timetable_entry_exclusion import TimetableEntryExclusion

__all__ = [
	"Batch",
	"Faculty",
	"Subject",
	"TimeSlot",
	"TimetableEntry",
	"TimetableEntryExclusion",
]
