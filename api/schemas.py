"""Pydantic request/response models for the HTTP API."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from interview_session import Account, Answer, InterviewSession, Mode, ReminderStage, ScheduledMock, Status


class Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateInterviewReq(Payload):
    mode: Mode = "text"
    job_role: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[str] = None
    resume_text: Optional[str] = None
    job_description: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None


class StartInterviewReq(Payload):
    interview_id: str


class SubmitInterviewReq(Payload):
    interview_id: str
    answers: Optional[List[Answer]] = None
    mode: Optional[Mode] = None


class AdminInterviewUpdate(Payload):
    """Fields an administrator may overwrite; omitted fields are left as they are."""

    mode: Optional[Mode] = None
    job_role: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[str] = None
    resume_text: Optional[str] = None
    job_description: Optional[str] = None
    questions: Optional[List[str]] = None
    answers: Optional[List[Answer]] = None
    feedback: Optional[List[str]] = None
    ideal_answers: Optional[List[str]] = None
    overall_feedback: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=95)
    status: Optional[Status] = None
    email: Optional[str] = None


class PlanUpdateReq(Payload):
    plan: Optional[str] = None


class ScheduleMockReq(Payload):
    scheduled_for: datetime
    mode: Optional[Mode] = None
    job_role: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[str] = None
    resume_text: Optional[str] = None
    job_description: Optional[str] = None
    user_id: Optional[str] = None


class InterviewResp(Payload):
    success: bool = True
    interview: InterviewSession


class InterviewListResp(Payload):
    interviews: List[InterviewSession] = Field(default_factory=list)


class StartInterviewResp(Payload):
    success: bool = True
    questions: List[str]


class SubmitInterviewResp(Payload):
    success: bool = True
    feedback: List[str]
    ideal_answers: List[str]
    overall_feedback: str
    score: Optional[int] = None


class MessageResp(Payload):
    success: bool = True
    message: str


class AccountListResp(Payload):
    users: List[Account] = Field(default_factory=list)


class AccountResp(Payload):
    user: Account


class EraseResp(Payload):
    success: bool = True
    deleted: Dict[str, int]


class MockResp(Payload):
    success: bool = True
    mock: ScheduledMock


class MockListResp(Payload):
    mocks: List[ScheduledMock] = Field(default_factory=list)


class ReminderDue(Payload):
    stage: ReminderStage
    mock: ScheduledMock


class ReminderSweepResp(Payload):
    reminders: List[ReminderDue] = Field(default_factory=list)
