"""Engine and session factory for the board database."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from discuss_board.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Model modules register their tables on Base.metadata when imported.
import discuss_board.models  # noqa: E402,F401


def _engine_options(url: str) -> dict[str, Any]:
    """Return dialect-specific ``create_engine`` keyword arguments.

    SQLite connections are shared across the threadpool FastAPI runs sync
    endpoints on, and an in-memory database must stay on a single connection
    or every checkout would see an empty schema.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(
    settings.effective_database_url,
    echo=settings.sql_debug,
    **_engine_options(settings.effective_database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create any missing tables; used when AUTO_CREATE_TABLES is set."""
    Base.metadata.create_all(bind=engine)
