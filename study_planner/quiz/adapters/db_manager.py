import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from study_planner.shared.telemetry import Telemetry, measure_time

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS point_ledger
    (
        user_id TEXT PRIMARY KEY,
        points  INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS calendar_tasks
    (
        year  INTEGER NOT NULL,
        month INTEGER NOT NULL,
        day   INTEGER NOT NULL,
        task  TEXT,
        PRIMARY KEY (year, month, day)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users
    (
        email         TEXT PRIMARY KEY,
        password_hash TEXT NOT NULL
    )
    """,
)


class DatabaseManager:
    """
    Owns the SQLite connection and the schema.

    The connection opens lazily and is dropped when the manager is pickled
    into Streamlit session state; the next query reconnects. An in-memory
    database lives only as long as its connection.
    """

    def __init__(self, db_path: str = "data/study_planner.db") -> None:
        self.db_path = db_path
        self.telemetry = Telemetry("DatabaseManager")
        self._conn: sqlite3.Connection | None = None

        if not self.is_memory and os.path.dirname(db_path):
            os.makedirs(os.path.dirname(db_path), exist_ok=True)

        self._init_schema()

    @property
    def is_memory(self) -> bool:
        return self.db_path == ":memory:"

    def __getstate__(self) -> dict[str, Any]:
        return {**self.__dict__, "_conn": None}

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            if not self.is_memory:
                self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commits on success, rolls back if the block raises."""
        conn = self.get_connection()
        with conn:
            yield conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @measure_time("db_init_schema")
    def _init_schema(self) -> None:
        with self.transaction() as conn:
            for ddl in SCHEMA:
                conn.execute(ddl)
