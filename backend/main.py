from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from sqlalchemy import text
from sqlalchemy.exc import OperationalError as SAOperationalError
from sqlalchemy.exc import SQLAlchemyError

from api.router import api_router
from core.config import settings
from core.db import DatabaseUnavailableError, ENGINE, create_schema, is_transient_db_connectivity_error
from core.logging import setup_logging
from events.errors import MalformedTimeSlotError, PastEventLockedError, UnknownDayOfWeekError


logger = logging.getLogger(__name__)


_DB_UNAVAILABLE = {
    "code": "DATABASE_UNAVAILABLE",
    "message": "Database temporarily unavailable. Please retry.",
}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.auto_create_schema:
        create_schema()
        logger.info("Database schema ensured")
    yield


def create_app() -> FastAPI:
    setup_logging(environment=settings.environment)
    is_production = settings.is_production
    app = FastAPI(
        title="Timetable Calendar API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )

    @app.exception_handler(DatabaseUnavailableError)
    def _db_unavailable(_request, exc: DatabaseUnavailableError):
        logger.warning("Database unavailable (503)", exc_info=exc)
        return JSONResponse(status_code=503, content=_DB_UNAVAILABLE)

    @app.exception_handler(SAOperationalError)
    def _sqlalchemy_operational_error(_request, exc: SAOperationalError):
        if is_transient_db_connectivity_error(exc):
            logger.warning("Database transient connectivity error (503)", exc_info=exc)
            return JSONResponse(status_code=503, content=_DB_UNAVAILABLE)
        logger.error("Database operation failed", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"code": "DATABASE_ERROR", "message": "Database operation failed."},
        )

    # Routes translate these themselves; the handlers catch anything that slips through.
    @app.exception_handler(PastEventLockedError)
    def _past_event_locked(_request, exc: PastEventLockedError):
        return JSONResponse(
            status_code=409,
            content={
                "detail": {
                    "code": "PAST_EVENT_LOCKED",
                    "event_date": exc.event_date.isoformat(),
                    "days_ago": exc.days_ago,
                }
            },
        )

    @app.exception_handler(MalformedTimeSlotError)
    def _malformed_time_slot(_request, exc: MalformedTimeSlotError):
        return JSONResponse(
            status_code=422,
            content={"detail": {"code": "MALFORMED_TIME_SLOT", "raw": exc.raw, "reason": exc.reason}},
        )

    @app.exception_handler(UnknownDayOfWeekError)
    def _unknown_day(_request, exc: UnknownDayOfWeekError):
        return JSONResponse(
            status_code=422,
            content={"detail": {"code": "UNKNOWN_DAY_OF_WEEK", "value": str(exc.value)}},
        )

    allow_origins = [settings.frontend_origin]
    allow_origin_regex = None
    if not is_production:
        # Dev-friendly: allow the configured origin and any localhost port.
        allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_origin_regex=allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        # Always respond; reflect DB availability without crashing.
        db_status = "ok"
        try:
            with ENGINE.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            db_status = "down"

        return {"app": "ok", "database": db_status}

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
