from __future__ import annotations  # Domain records shared by storage, services and API

from datetime import datetime, timezone
from typing import List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Mode = Literal["text", "audio", "video"]
Status = Literal["created", "in_progress", "completed"]
Plan = Literal["Free", "Premium"]
ReminderStage = Literal["unset", "1h", "30m", "5m"]


def utc_now() -> datetime:  # Timezone-aware current time
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


class _Record(BaseModel):  # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MediaRef(_Record):  # Pointer to an uploaded audio or video answer
    url: str
    mimetype: Optional[str] = None


Answer = Union[MediaRef, str, None]


class Account(_Record):  # Subscriber identity and plan
    account_id: str = Field(alias="userId")
    email: str
    plan: Plan = "Free"
    billing_customer_id: Optional[str] = None
    billing_subscription_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class InterviewSession(_Record):  # One mock interview attempt
    id: str = Field(default_factory=new_id)
    mode: Mode = "text"
    job_role: str
    industry: Optional[str] = None
    experience: str
    resume_text: Optional[str] = None
    job_description: Optional[str] = None
    questions: List[str] = Field(default_factory=list)
    answers: List[Answer] = Field(default_factory=list)
    feedback: List[str] = Field(default_factory=list)
    ideal_answers: List[str] = Field(default_factory=list)
    overall_feedback: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=95)
    status: Status = "created"
    account_id: str = Field(alias="userId")
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ScheduledMock(_Record):  # Future-dated interview with reminder tracking
    id: str = Field(default_factory=new_id)
    account_id: str = Field(alias="userId")
    email: str
    scheduled_for: datetime
    mode: Optional[Mode] = None
    job_role: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[str] = None
    resume_text: Optional[str] = None
    job_description: Optional[str] = None
    reminder_stage: ReminderStage = "unset"
    created_at: datetime = Field(default_factory=utc_now)


def answer_text(answer: Answer) -> str:  # Text content of an answer, media references count as empty
    if isinstance(answer, str):
        return answer
    return ""


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
