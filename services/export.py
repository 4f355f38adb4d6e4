"""CSV export of interview logs."""
from __future__ import annotations

import csv
import io
from typing import Iterable, List, Sequence

from interview_session import Answer, InterviewSession, MediaRef

CSV_FIELDS: List[str] = [
    "InterviewID",
    "UserID",
    "Email",
    "JobRole",
    "Industry",
    "Experience",
    "Mode",
    "Status",
    "CreatedAt",
    "Questions",
    "Answers",
    "Feedback",
    "IdealAnswers",
    "OverallFeedback",
]

LIST_SEPARATOR = " | "


def _answer_cell(answer: Answer) -> str:
    if isinstance(answer, MediaRef):
        return answer.url
    return answer or ""


def _joined(values: Sequence[str]) -> str:
    return LIST_SEPARATOR.join(values)


def session_row(session: InterviewSession) -> List[str]:
    return [
        session.id,
        session.account_id,
        session.email or "",
        session.job_role,
        session.industry or "",
        session.experience,
        session.mode,
        session.status,
        session.created_at.isoformat(),
        _joined(session.questions),
        _joined([_answer_cell(answer) for answer in session.answers]),
        _joined(session.feedback),
        _joined(session.ideal_answers),
        session.overall_feedback or "",
    ]


def sessions_to_csv(sessions: Iterable[InterviewSession]) -> str:
    """Render sessions as CSV with every field quoted and quotes doubled."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_FIELDS)
    for session in sessions:
        writer.writerow(session_row(session))
    return buffer.getvalue()


__all__ = ["CSV_FIELDS", "session_row", "sessions_to_csv"]
