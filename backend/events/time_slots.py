from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time
from typing import Union

from events.errors import MalformedTimeSlotError


_SLOT_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\s*$")


@dataclass(frozen=True)
class TimeSlotBounds:
    start_minutes: int
    end_minutes: int

    @property
    def start_time(self) -> time:
        return time(self.start_minutes // 60, self.start_minutes % 60)

    @property
    def end_time(self) -> time:
        return time(self.end_minutes // 60, self.end_minutes % 60)

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes


@dataclass(frozen=True)
class MalformedTimeSlot:
    raw: str
    reason: str


ParsedTimeSlot = Union[TimeSlotBounds, MalformedTimeSlot]


def _to_minutes(hour: str, minute: str) -> int | None:
    h, m = int(hour), int(minute)
    if not (0 <= h <= 23 and 0 <= m <= 59):
        return None
    return h * 60 + m


def parse_time_slot(raw: str | None) -> ParsedTimeSlot:
    """Parse a slot name like ``"10:15-11:05"``.

    Never raises: anything that is not a well-formed, non-empty interval comes
    back as ``MalformedTimeSlot`` so callers decide how to surface it.
    """

    if not isinstance(raw, str):
        return MalformedTimeSlot(raw=str(raw), reason="not a string")

    m = _SLOT_RE.match(raw)
    if m is None:
        return MalformedTimeSlot(raw=raw, reason="expected HH:MM-HH:MM")

    start = _to_minutes(m.group(1), m.group(2))
    end = _to_minutes(m.group(3), m.group(4))
    if start is None or end is None:
        return MalformedTimeSlot(raw=raw, reason="hour or minute out of range")
    if end <= start:
        return MalformedTimeSlot(raw=raw, reason="end must be after start")

    return TimeSlotBounds(start_minutes=start, end_minutes=end)


def require_time_slot(raw: str | None) -> TimeSlotBounds:
    parsed = parse_time_slot(raw)
    if isinstance(parsed, MalformedTimeSlot):
        raise MalformedTimeSlotError(parsed.raw, parsed.reason)
    return parsed
