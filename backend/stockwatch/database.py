"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default) and provides
small helpers used by the application and tests.
"""

import sqlite3

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from .config import settings
from . import models  # noqa: F401  registers tables on SQLModel.metadata


def _connect_args() -> dict:
    if settings.is_sqlite:
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, connect_args=_connect_args())


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for every new SQLite connection.

    SQLite ships with foreign keys disabled and the setting is
    per-connection, so the ON DELETE CASCADE clauses on stock groups and
    memberships would otherwise be ignored.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables(bind: Engine = engine):
    """Create database tables using SQLModel metadata.

    This function is intended for local development and tests;
    `run_migrations.py` applies the SQL schema files instead.
    """
    SQLModel.metadata.create_all(bind)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
