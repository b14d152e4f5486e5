from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import HTTPException

from core.config import settings
from events.errors import PastEventLockedError


def get_today() -> date:
    """Today's date in the department timezone.

    Routes take this as a dependency so every request sees one consistent
    "today", and tests can pin it with ``app.dependency_overrides``.
    """

    return datetime.now(ZoneInfo(settings.timezone)).date()


def past_event_locked(exc: PastEventLockedError) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={
            "code": "PAST_EVENT_LOCKED",
            "event_date": exc.event_date.isoformat(),
            "days_ago": exc.days_ago,
        },
    )
