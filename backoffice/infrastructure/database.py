"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> dict[str, Any]:
    """Return ``create_engine`` keyword arguments suited to ``database_url``."""

    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        # every session must see the same in-memory database
        options["poolclass"] = StaticPool
    return options


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``."""

    return create_engine(database_url, **engine_options(database_url))


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


settings = get_settings()
engine = build_engine(settings.database_url)
SessionLocal = build_session_factory(engine)


def initialize_database(bind: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from backoffice.infrastructure import models  # noqa: F401  # ensure models are imported

    target = bind or engine
    logger.info("Ensuring database schema on %s", target.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=target, checkfirst=True)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker[Session]:
    """Return the factory used by background jobs to open their own sessions."""

    return SessionLocal
