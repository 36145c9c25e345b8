"""Simple migration runner for SQLite using provided SQL files in migrations/"""
from pathlib import Path
import sqlite3
import sys

from sqlalchemy.engine import make_url

from stockwatch.config import settings

BASE = Path(__file__).parent
MIGRATIONS_DIR = BASE / "migrations"


def default_db_path() -> Path:
    """Return the SQLite file behind `settings.DATABASE_URL`."""
    if not settings.is_sqlite:
        raise RuntimeError("run_migrations only supports sqlite:/// database URLs")
    database = make_url(settings.DATABASE_URL).database
    if not database or database == ":memory:":
        raise RuntimeError("run_migrations needs a file-backed sqlite database, not an in-memory one")
    return Path(database)


def run(db_path=None):
    """Execute SQL migration files against a local SQLite database.

    The function applies every `migrations/*.sql` file in lexical
    order. It is intended for local development and quick bootstrapping
    of the database; every statement is idempotent.
    """
    db_path = Path(db_path) if db_path else default_db_path()
    print("Using database:", db_path)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for m in sorted(MIGRATIONS_DIR.glob("*.sql")):
            print("Applying:", m.name)
            cur.executescript(m.read_text(encoding="utf-8"))
        conn.commit()
    finally:
        conn.close()
    print("Migrations applied.")


if __name__ == '__main__':
    run(sys.argv[1] if len(sys.argv) > 1 else None)
