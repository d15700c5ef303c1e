import sqlite3

import bcrypt

from study_planner.quiz.adapters.db_manager import DatabaseManager
from study_planner.quiz.domain.ports import (
    ICalendarStore,
    ICredentialStore,
    IPointLedger,
    LedgerError,
)
from study_planner.shared.telemetry import Telemetry, measure_time

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes and rejects longer input.
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class SQLiteStudyRepository(IPointLedger, ICalendarStore, ICredentialStore):
    """
    Point ledger, calendar tasks and credentials on one SQLite database.
    All writes are last-write-wins upserts.
    """

    def __init__(self, db_manager: DatabaseManager) -> None:
        self.telemetry = Telemetry("SQLiteStudyRepository")
        self.db_manager = db_manager

    # --- Point Ledger ---

    @measure_time("db_apply_delta")
    def apply_delta(self, user_id: str, points: int) -> int:
        try:
            with self.db_manager.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO point_ledger (user_id, points)
                    VALUES (?, MAX(0, ?))
                    ON CONFLICT(user_id) DO UPDATE SET points = MAX(0, point_ledger.points + ?)
                    """,
                    (user_id, points, points),
                )
        except sqlite3.Error as e:
            raise LedgerError(f"Could not apply {points:+d} points for {user_id}") from e

        balance = self.balance(user_id)
        self.telemetry.log_info("Points updated", user_id=user_id, delta=points, balance=balance)
        return balance

    def balance(self, user_id: str) -> int:
        row = (
            self.db_manager.get_connection()
            .execute("SELECT points FROM point_ledger WHERE user_id = ?", (user_id,))
            .fetchone()
        )
        return int(row[0]) if row else 0

    # --- Calendar Store ---

    @measure_time("db_upsert_task")
    def upsert_task(self, year: int, month: int, day: int, task: str) -> None:
        with self.db_manager.transaction() as conn:
            conn.execute(
                """
                INSERT INTO calendar_tasks (year, month, day, task)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(year, month, day) DO UPDATE SET task = excluded.task
                """,
                (year, month, day, task),
            )

    def get_task(self, year: int, month: int, day: int) -> str | None:
        row = (
            self.db_manager.get_connection()
            .execute(
                "SELECT task FROM calendar_tasks WHERE year = ? AND month = ? AND day = ?",
                (year, month, day),
            )
            .fetchone()
        )
        return row[0] if row else None

    # --- Credentials ---

    @measure_time("db_create_user")
    def create_user(self, email: str, password: str) -> None:
        if not email or not password:
            raise ValueError("email and password are required")

        password_hash = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())
        with self.db_manager.transaction() as conn:
            conn.execute(
                """
                INSERT INTO users (email, password_hash)
                VALUES (?, ?)
                ON CONFLICT(email) DO UPDATE SET password_hash = excluded.password_hash
                """,
                (email, password_hash.decode("ascii")),
            )
        self.telemetry.log_info("User stored", email=email)

    def verify(self, email: str, password: str) -> bool:
        row = (
            self.db_manager.get_connection()
            .execute("SELECT password_hash FROM users WHERE email = ?", (email,))
            .fetchone()
        )
        if not row:
            return False
        return bcrypt.checkpw(_password_bytes(password), row[0].encode("ascii"))
