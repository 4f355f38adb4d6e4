from __future__ import annotations  # Interview domain records

from .models import (  # noqa: F401
    Account,
    Answer,
    InterviewSession,
    MediaRef,
    Mode,
    Plan,
    ReminderStage,
    ScheduledMock,
    Status,
    answer_text,
    new_id,
    utc_now,
)

__all__ = [
    "Account",
    "Answer",
    "InterviewSession",
    "MediaRef",
    "Mode",
    "Plan",
    "ReminderStage",
    "ScheduledMock",
    "Status",
    "answer_text",
    "new_id",
    "utc_now",
]
