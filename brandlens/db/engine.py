"""SQLAlchemy engine factory and session maker."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlalchemy import Engine


def database_url(target: str | object) -> str:
    """Accept a full SQLAlchemy URL, a SQLite file path, or ":memory:"."""
    value = str(target)
    if value == ":memory:":
        return "sqlite://"
    if "://" in value:
        return value
    return f"sqlite:///{value}"


def create_db_engine(target: str | object, echo: bool = False) -> Engine:
    """Create an engine. SQLite gets WAL mode and enforced foreign keys."""
    url = database_url(target)
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs: dict[str, object] = {"connect_args": {"timeout": 30.0, "check_same_thread": False}}
    if url == "sqlite://":
        # one shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, echo=echo, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: object, _connection_record: object) -> None:
        cursor = dbapi_conn.cursor()  # type: ignore[attr-defined]
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=30000")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a sessionmaker bound to the given engine."""
    return sessionmaker(bind=engine, expire_on_commit=False)
