from __future__ import annotations

from fastapi import APIRouter

from api.routes import batches, calendar, faculty, subjects, time_slots, timetable


api_router = APIRouter()
api_router.include_router(batches.router, prefix="/batches", tags=["batches"])
api_router.include_router(subjects.router, prefix="/subjects", tags=["subjects"])
api_router.include_router(faculty.router, prefix="/faculty", tags=["faculty"])
api_router.include_router(time_slots.router, prefix="/time-slots", tags=["time-slots"])
api_router.include_router(timetable.router, prefix="/timetable", tags=["timetable"])
api_router.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
