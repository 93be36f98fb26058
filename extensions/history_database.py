"""Password history database helper using SQLAlchemy engine."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import Table, create_engine
from sqlalchemy.engine import URL, Connection, Engine

from models.password_history import build_password_history_table

REQUIRED_SETTINGS = (
    "PASSWORD_HISTORY_DB_HOST",
    "PASSWORD_HISTORY_DB_NAME",
    "PASSWORD_HISTORY_DB_USER",
    "PASSWORD_HISTORY_DB_PASSWORD",
)
DEFAULT_PORT = 3306


def build_history_url(config) -> Optional[URL]:
    """Build the MySQL URL; returns None when any required setting is missing."""
    if any(not config.get(key) for key in REQUIRED_SETTINGS):
        return None
    port = config.get("PASSWORD_HISTORY_DB_PORT") or DEFAULT_PORT
    return URL.create(
        "mysql+pymysql",
        username=config["PASSWORD_HISTORY_DB_USER"],
        password=config["PASSWORD_HISTORY_DB_PASSWORD"],
        host=config["PASSWORD_HISTORY_DB_HOST"],
        port=int(port),
        database=config["PASSWORD_HISTORY_DB_NAME"],
    )


class HistoryDatabase:
    """Light-weight SQLAlchemy engine wrapper for the external password history database."""

    def __init__(self) -> None:
        self._engine: Optional[Engine] = None
        self._table: Optional[Table] = None

    def init_app(self, app) -> None:
        self._engine = None
        self._table = build_password_history_table(
            app.config.get("PASSWORD_HISTORY_TABLE", "hashes"),
            app.config.get("PASSWORD_HISTORY_SCHEMA"),
        )
        url = build_history_url(app.config)
        if url is None:
            app.logger.warning("Password history database is not configured; history checks are disabled.")
            return
        timeout = int(app.config.get("PASSWORD_HISTORY_DB_TIMEOUT", 5))
        self._engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args={
                "connect_timeout": timeout,
                "read_timeout": timeout,
                "write_timeout": timeout,
            },
        )

    def init_engine(self, engine: Optional[Engine], table: Optional[Table] = None) -> None:
        """Bind an already created engine (used by tests and embedding hosts)."""
        self._engine = engine
        if table is not None:
            self._table = table
        elif self._table is None:
            self._table = build_password_history_table()

    @property
    def is_configured(self) -> bool:
        return self._engine is not None

    @property
    def table(self) -> Table:
        if self._table is None:
            self._table = build_password_history_table()
        return self._table

    @contextmanager
    def connect(self) -> Generator[Connection, None, None]:
        if not self._engine:
            raise RuntimeError("Password history engine is not initialized")
        connection = self._engine.connect()
        try:
            yield connection
        finally:
            connection.close()

    @contextmanager
    def begin(self) -> Generator[Connection, None, None]:
        if not self._engine:
            raise RuntimeError("Password history engine is not initialized")
        with self._engine.begin() as connection:
            yield connection


history_db = HistoryDatabase()

__all__ = ["history_db", "HistoryDatabase", "build_history_url"]
