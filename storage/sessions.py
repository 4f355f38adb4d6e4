"""Persistence helpers for interview sessions."""
from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Any, List, Optional

from interview_session import InterviewSession, MediaRef

from .sqlite import from_db_time, get_conn, to_db_time

_COLUMNS = (
    "id, mode, job_role, industry, experience, resume_text, job_description, "
    "questions_json, answers_json, feedback_json, ideal_answers_json, overall_feedback, "
    "score, status, account_id, email, created_at, updated_at"
)


def _dump_answers(answers: List[Any]) -> str:
    return json.dumps(
        [answer.model_dump() if isinstance(answer, MediaRef) else answer for answer in answers]
    )


def _row_to_session(row: sqlite3.Row) -> InterviewSession:
    return InterviewSession(
        id=row["id"],
        mode=row["mode"],
        job_role=row["job_role"],
        industry=row["industry"],
        experience=row["experience"],
        resume_text=row["resume_text"],
        job_description=row["job_description"],
        questions=json.loads(row["questions_json"]),
        answers=json.loads(row["answers_json"]),
        feedback=json.loads(row["feedback_json"]),
        ideal_answers=json.loads(row["ideal_answers_json"]),
        overall_feedback=row["overall_feedback"],
        score=row["score"],
        status=row["status"],
        account_id=row["account_id"],
        email=row["email"],
        created_at=from_db_time(row["created_at"]),
        updated_at=from_db_time(row["updated_at"]),
    )


def _values(session: InterviewSession) -> tuple:
    return (
        session.mode,
        session.job_role,
        session.industry,
        session.experience,
        session.resume_text,
        session.job_description,
        json.dumps(session.questions),
        _dump_answers(session.answers),
        json.dumps(session.feedback),
        json.dumps(session.ideal_answers),
        session.overall_feedback,
        session.score,
        session.status,
        session.account_id,
        session.email,
        to_db_time(session.created_at),
        to_db_time(session.updated_at),
    )


class SessionStore:
    """SQLite-backed interview session storage.

    Writes are last-write-wins: two concurrent transitions on the same
    session both succeed and the later save replaces the earlier one.
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        self._path = db_path

    def insert(self, session: InterviewSession) -> InterviewSession:
        with get_conn(self._path) as conn:
            conn.execute(
                f"INSERT INTO interview_sessions ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (session.id, *_values(session)),
            )
        return session

    def save(self, session: InterviewSession) -> InterviewSession:
        with get_conn(self._path) as conn:
            conn.execute(
                """UPDATE interview_sessions
                   SET mode = ?, job_role = ?, industry = ?, experience = ?, resume_text = ?,
                       job_description = ?, questions_json = ?, answers_json = ?, feedback_json = ?,
                       ideal_answers_json = ?, overall_feedback = ?, score = ?, status = ?,
                       account_id = ?, email = ?, created_at = ?, updated_at = ?
                   WHERE id = ?""",
                (*_values(session), session.id),
            )
        return session

    def get(self, session_id: str) -> Optional[InterviewSession]:
        with get_conn(self._path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM interview_sessions WHERE id = ?",
                (session_id,),
            ).fetchone()
        return _row_to_session(row) if row else None

    def list(self, account_id: Optional[str] = None) -> List[InterviewSession]:
        """Return sessions newest first, optionally limited to one account."""

        query = f"SELECT {_COLUMNS} FROM interview_sessions"
        params: tuple = ()
        if account_id:
            query += " WHERE account_id = ?"
            params = (account_id,)
        query += " ORDER BY created_at DESC, id DESC"
        with get_conn(self._path) as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_session(row) for row in rows]

    def count_created_between(self, account_id: str, start: datetime, end: datetime) -> int:
        """Count sessions owned by ``account_id`` created in ``[start, end)``."""

        with get_conn(self._path) as conn:
            row = conn.execute(
                """SELECT COUNT(*) FROM interview_sessions
                   WHERE account_id = ? AND created_at >= ? AND created_at < ?""",
                (account_id, to_db_time(start), to_db_time(end)),
            ).fetchone()
        return int(row[0])

    def delete(self, session_id: str) -> bool:
        with get_conn(self._path) as conn:
            cur = conn.execute("DELETE FROM interview_sessions WHERE id = ?", (session_id,))
            return cur.rowcount > 0

    def delete_for_account(self, account_id: str) -> int:
        with get_conn(self._path) as conn:
            cur = conn.execute("DELETE FROM interview_sessions WHERE account_id = ?", (account_id,))
            return int(cur.rowcount)


__all__ = ["SessionStore"]
