"""Interview session lifecycle: create, start, submit and admin overrides."""
from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from config.settings import settings
from ideal_answers import ideal_answers_for
from interview_session import Account, Answer, InterviewSession, MediaRef, Mode, utc_now
from llm_gateway import GatewayTimeout, LlmGatewayError
from observability import log_event
from question_generation import QuestionRequest

from .errors import (
    EmptyResult,
    GenerationFailed,
    InterviewError,
    InvalidTransition,
    MissingIdentity,
    MissingQuestions,
    NotFound,
    UpstreamTimeout,
    ValidationError,
)
from .quota import QuotaPolicy
from .scoring import AnswerScorer

logger = logging.getLogger(__name__)

QuestionSource = Callable[[QuestionRequest], List[str]]


class IdealAnswerSource(Protocol):
    def __call__(self, question: str, *, job_role: str = "", experience: str = "") -> str: ...


class SessionRepository(Protocol):
    def insert(self, session: InterviewSession) -> InterviewSession: ...

    def save(self, session: InterviewSession) -> InterviewSession: ...

    def get(self, session_id: str) -> Optional[InterviewSession]: ...

    def list(self, account_id: Optional[str] = None) -> List[InterviewSession]: ...

    def count_created_between(self, account_id: str, start: datetime, end: datetime) -> int: ...

    def delete(self, session_id: str) -> bool: ...


class AccountRepository(Protocol):
    def get(self, account_id: str) -> Optional[Account]: ...

    def get_or_create(self, account_id: str, email: str) -> Account: ...


class InterviewService:
    """Drive sessions through ``created -> in_progress -> completed``.

    A failed ``start`` leaves the stored session untouched so callers can
    retry. ``submit`` only writes once scoring has finished.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        accounts: AccountRepository,
        *,
        question_generator: QuestionSource,
        ideal_answer_generator: Optional[IdealAnswerSource] = None,
        scorer: Optional[AnswerScorer] = None,
        quota: Optional[QuotaPolicy] = None,
        clock: Callable[[], datetime] = utc_now,
        ideal_answer_budget_s: Optional[float] = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions = sessions
        self._accounts = accounts
        self._generate_questions = question_generator
        self._ideal_answers = ideal_answer_generator
        self._scorer = scorer or AnswerScorer()
        self._quota = quota or QuotaPolicy(sessions)
        self._clock = clock
        self._ideal_answer_budget_s = (
            settings.IDEAL_ANSWER_BUDGET_SECONDS if ideal_answer_budget_s is None else ideal_answer_budget_s
        )
        self._timer = timer

    def create(
        self,
        *,
        account_id: Optional[str],
        job_role: Optional[str],
        experience: Optional[str],
        mode: Mode = "text",
        industry: Optional[str] = None,
        resume_text: Optional[str] = None,
        job_description: Optional[str] = None,
        email: Optional[str] = None,
    ) -> InterviewSession:
        job_role = (job_role or "").strip()
        experience = (experience or "").strip()
        if not job_role or not experience:
            raise ValidationError("Job role and experience are required")
        if not account_id:
            raise MissingIdentity()

        account = self._accounts.get_or_create(account_id, email) if email else self._accounts.get(account_id)
        now = self._clock()
        self._quota.enforce(account_id, account, now)

        session = InterviewSession(
            mode=mode,
            job_role=job_role,
            industry=industry or None,
            experience=experience,
            resume_text=resume_text or None,
            job_description=job_description or None,
            account_id=account_id,
            email=email or None,
            created_at=now,
            updated_at=now,
        )
        self._sessions.insert(session)
        log_event("created", session.id, account_id=account_id, mode=mode, status=session.status)
        return session

    def start(self, session_id: str) -> InterviewSession:
        session = self.get(session_id)
        if session.status == "completed":
            raise InvalidTransition("Interview already completed")

        request = QuestionRequest(
            job_role=session.job_role,
            industry=session.industry,
            experience=session.experience,
            job_description=session.job_description,
            resume_text=session.resume_text,
        )
        try:
            generated = self._generate_questions(request)
        except InterviewError:
            log_event("start_failed", session.id, error="generation")
            raise
        except GatewayTimeout as exc:
            log_event("start_failed", session.id, error="timeout")
            raise UpstreamTimeout() from exc
        except LlmGatewayError as exc:
            logger.error("Question generation failed for interview %s: %s", session.id, exc)
            log_event("start_failed", session.id, error="gateway")
            raise GenerationFailed() from exc
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected question generator failure for interview %s", session.id)
            log_event("start_failed", session.id, error="unexpected")
            raise GenerationFailed() from exc

        questions = [question.strip() for question in generated if question and question.strip()]
        questions = questions[: settings.MAX_QUESTIONS]
        if not questions:
            raise EmptyResult()

        session = session.model_copy(
            update={"questions": questions, "status": "in_progress", "updated_at": self._clock()}
        )
        self._sessions.save(session)
        log_event("started", session.id, status=session.status, questions=len(questions))
        return session

    def submit(
        self,
        session_id: str,
        answers: Optional[List[Answer]],
        mode: Optional[Mode] = None,
    ) -> InterviewSession:
        session = self.get(session_id)
        if not isinstance(answers, list):
            raise ValidationError("Answers must be an array")
        if not session.questions:
            raise MissingQuestions()

        questions = session.questions
        padded: List[Answer] = list(answers[: len(questions)])
        padded.extend([None] * (len(questions) - len(padded)))
        padded = _keep_uploaded_media(padded, session.answers)

        result = self._scorer.score(questions, padded, mode or session.mode)
        ideal = ideal_answers_for(
            questions,
            self._ideal_answer_fn(session),
            budget_s=self._ideal_answer_budget_s,
            clock=self._timer,
        )

        session = session.model_copy(
            update={
                "answers": padded,
                "feedback": result.feedback,
                "ideal_answers": ideal,
                "overall_feedback": result.overall_feedback,
                "score": result.score,
                "status": "completed",
                "updated_at": self._clock(),
            }
        )
        self._sessions.save(session)
        log_event("submitted", session.id, status=session.status, score=session.score)
        return session

    def attach_media(self, session_id: str, index: int, media: MediaRef) -> InterviewSession:
        """Store an uploaded answer at ``answers[index]``, padding earlier slots with ``None``."""

        session = self.get(session_id)
        limit = len(session.questions) or settings.MAX_QUESTIONS
        if index < 0 or index >= limit:
            raise ValidationError("Question index out of range")

        answers: List[Answer] = list(session.answers)
        answers.extend([None] * (index + 1 - len(answers)))
        answers[index] = media
        session = session.model_copy(update={"answers": answers, "updated_at": self._clock()})
        self._sessions.save(session)
        log_event("media_attached", session.id, status=session.status, question=index)
        return session

    def get(self, session_id: str) -> InterviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFound("Interview not found")
        return session

    def list(self, account_id: Optional[str] = None) -> List[InterviewSession]:
        return self._sessions.list(account_id)

    def admin_edit(self, session_id: str, fields: Dict[str, Any]) -> InterviewSession:
        """Overwrite any supplied fields regardless of status."""

        session = self.get(session_id)
        merged = {**session.model_dump(), **fields, "updated_at": self._clock()}
        try:
            updated = InterviewSession.model_validate(merged)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid interview fields: {exc.errors()[0].get('msg', 'invalid')}") from exc
        self._sessions.save(updated)
        log_event("admin_edited", session_id, status=updated.status, fields=sorted(fields))
        return updated

    def admin_delete(self, session_id: str) -> None:
        if not self._sessions.delete(session_id):
            raise NotFound("Interview not found")
        log_event("admin_deleted", session_id)

    def _ideal_answer_fn(self, session: InterviewSession) -> Optional[Callable[[str], str]]:
        generator = self._ideal_answers
        if generator is None:
            return None

        def _generate(question: str) -> str:
            return generator(question, job_role=session.job_role, experience=session.experience)

        return _generate


def _keep_uploaded_media(submitted: List[Answer], stored: List[Answer]) -> List[Answer]:
    """Blank submitted slots fall back to media uploaded earlier for that question."""

    merged: List[Answer] = []
    for index, answer in enumerate(submitted):
        blank = answer is None or (isinstance(answer, str) and not answer.strip())
        if blank and index < len(stored) and isinstance(stored[index], MediaRef):
            answer = stored[index]
        merged.append(answer)
    return merged


__all__ = ["InterviewService"]
