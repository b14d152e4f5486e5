from __future__ import annotations

import logging
import time
from typing import Iterable, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings


logger = logging.getLogger(__name__)


class DatabaseUnavailableError(RuntimeError):
    """Raised when the database is temporarily unreachable (transient connectivity failure)."""


_RETRY_DELAYS_SECONDS: list[float] = [0.2, 0.5, 1.0]

_TRANSIENT_MARKERS = (
    # DNS
    "getaddrinfo failed",
    "could not translate host name",
    "name or service not known",
    # refused / reset / closed
    "connection refused",
    "actively refused",
    "connection reset",
    "server closed the connection unexpectedly",
    # timeouts
    "timeout",
    "timed out",
)


def _iter_exception_messages(exc: BaseException) -> Iterable[str]:
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        msg = str(cur)
        if msg:
            yield msg
        cur = cur.__cause__ or cur.__context__


def is_transient_db_connectivity_error(exc: BaseException) -> bool:
    """Heuristically detect transient DB connectivity failures (DNS/timeouts/refused).

    Constraint, validation and SQL errors are never transient.
    """

    joined = "\n".join(m.lower() for m in _iter_exception_messages(exc))
    return any(marker in joined for marker in _TRANSIENT_MARKERS)


def normalize_database_url(url: str) -> str:
    url = url.strip()
    # Normalize common Postgres URLs to SQLAlchemy's psycopg2 dialect.
    for prefix in ("postgresql+psycopg://", "postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+psycopg2://" + url.removeprefix(prefix)
    return url


def get_engine() -> Engine:
    url = normalize_database_url(settings.database_url)
    parsed = make_url(url)

    if parsed.get_backend_name() == "sqlite":
        # FastAPI runs sync routes in a threadpool; in-memory DBs must share one connection.
        kwargs: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    # connect_timeout keeps outages from hanging requests (used by retries and /health).
    connect_args: dict[str, object] = {"connect_timeout": 3}
    host = (parsed.host or "").lower()
    if host.endswith("supabase.com") and "sslmode" not in parsed.query:
        connect_args["sslmode"] = "require"

    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


ENGINE = get_engine()
SessionLocal = sessionmaker(bind=ENGINE, autoflush=False, autocommit=False)


def get_db() -> Iterator[Session]:
    last_exc: BaseException | None = None

    # Retry session acquisition with an explicit lightweight ping (SELECT 1).
    for attempt in range(len(_RETRY_DELAYS_SECONDS) + 1):
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        except OperationalError as exc:
            last_exc = exc
            db.close()
            if not is_transient_db_connectivity_error(exc) or attempt >= len(_RETRY_DELAYS_SECONDS):
                break
            logger.info("Database ping failed (attempt %d), retrying", attempt + 1)
            time.sleep(_RETRY_DELAYS_SECONDS[attempt])
            continue

        # Keep `yield db` outside the ping's try/except: endpoint errors (404/409/422)
        # must propagate as-is rather than turn into DatabaseUnavailableError.
        try:
            yield db
        finally:
            db.close()
        return

    raise DatabaseUnavailableError("Database temporarily unavailable") from last_exc


def create_schema() -> None:
    # Import for side effects: registers every table on Base.metadata.
    import models  # noqa: F401
    from models.base import Base

    Base.metadata.create_all(bind=ENGINE)
