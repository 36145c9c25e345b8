"""Application settings and validation."""

import logging
import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent
DEFAULT_DATABASE_URL = f"sqlite:///{BASE / 'app.db'}"


class Settings:
    ENV: str
    DATABASE_URL: str
    SQL_ECHO: bool
    LOG_LEVEL: str
    ALLOW_DEV_CORS: bool
    HOST: str
    PORT: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        self.SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.HOST = os.getenv("HOST", "127.0.0.1")
        self.PORT = int(os.getenv("PORT", "8000"))
        self._validate()

    def _validate(self):
        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise RuntimeError(f"LOG_LEVEL must be a logging level name, got {self.LOG_LEVEL!r}")
        if self.ENV != "dev" and self.DATABASE_URL == DEFAULT_DATABASE_URL:
            raise RuntimeError("DATABASE_URL must be set explicitly in non-dev environments")

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
