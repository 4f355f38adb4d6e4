"""Persistence helpers for scheduled mock interviews."""
from __future__ import annotations

import sqlite3
from typing import List, Optional

from interview_session import ReminderStage, ScheduledMock

from .sqlite import from_db_time, get_conn, to_db_time

_COLUMNS = (
    "id, account_id, email, scheduled_for, mode, job_role, industry, experience, "
    "resume_text, job_description, reminder_stage, created_at"
)


def _row_to_mock(row: sqlite3.Row) -> ScheduledMock:
    return ScheduledMock(
        id=row["id"],
        account_id=row["account_id"],
        email=row["email"],
        scheduled_for=from_db_time(row["scheduled_for"]),
        mode=row["mode"],
        job_role=row["job_role"],
        industry=row["industry"],
        experience=row["experience"],
        resume_text=row["resume_text"],
        job_description=row["job_description"],
        reminder_stage=row["reminder_stage"],
        created_at=from_db_time(row["created_at"]),
    )


class MockStore:  # SQLite-backed scheduled mock storage
    def __init__(self, db_path: Optional[str] = None) -> None:
        self._path = db_path

    def insert(self, mock: ScheduledMock) -> ScheduledMock:
        with get_conn(self._path) as conn:
            conn.execute(
                f"INSERT INTO scheduled_mocks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    mock.id,
                    mock.account_id,
                    mock.email,
                    to_db_time(mock.scheduled_for),
                    mock.mode,
                    mock.job_role,
                    mock.industry,
                    mock.experience,
                    mock.resume_text,
                    mock.job_description,
                    mock.reminder_stage,
                    to_db_time(mock.created_at),
                ),
            )
        return mock

    def list(self, account_id: Optional[str] = None) -> List[ScheduledMock]:
        """Return mocks ordered by their scheduled time, soonest first."""

        query = f"SELECT {_COLUMNS} FROM scheduled_mocks"
        params: tuple = ()
        if account_id:
            query += " WHERE account_id = ?"
            params = (account_id,)
        query += " ORDER BY scheduled_for ASC"
        with get_conn(self._path) as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_mock(row) for row in rows]

    def set_reminder_stage(self, mock_id: str, stage: ReminderStage) -> None:
        with get_conn(self._path) as conn:
            conn.execute(
                "UPDATE scheduled_mocks SET reminder_stage = ? WHERE id = ?",
                (stage, mock_id),
            )

    def delete_for_account(self, account_id: str) -> int:
        with get_conn(self._path) as conn:
            cur = conn.execute("DELETE FROM scheduled_mocks WHERE account_id = ?", (account_id,))
            return int(cur.rowcount)


__all__ = ["MockStore"]
