"""Dependency providers and error translation shared by the routers."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import HTTPException

from config.settings import settings
from ideal_answers import generator_from_config as ideal_answer_generator_from_config
from llm_gateway import FixedIntervalThrottle
from question_generation import QuestionRequest, generator_from_config as question_generator_from_config
from services.accounts import AccountService
from services.errors import InterviewError
from services.lifecycle import InterviewService
from services.mocks import MockScheduler
from storage.accounts import AccountStore
from storage.media import MediaStore
from storage.mocks import MockStore
from storage.sessions import SessionStore

logger = logging.getLogger(__name__)

# One throttle per process: every outbound generation call queues behind it.
GENERATION_THROTTLE = FixedIntervalThrottle(settings.QUESTION_THROTTLE_SECONDS)


def _config_path() -> Path:
    return Path(settings.CONFIG_PATH)


def generate_questions(request: QuestionRequest) -> List[str]:  # Resolve the configured route per call
    generator = question_generator_from_config(config_path=_config_path(), throttle=GENERATION_THROTTLE)
    return generator(request)


def generate_ideal_answer(question: str, *, job_role: str = "", experience: str = "") -> str:
    generator = ideal_answer_generator_from_config(config_path=_config_path(), throttle=GENERATION_THROTTLE)
    return generator(question, job_role=job_role, experience=experience)


def get_interview_service() -> InterviewService:
    return InterviewService(
        SessionStore(settings.DB_PATH),
        AccountStore(settings.DB_PATH),
        question_generator=generate_questions,
        ideal_answer_generator=generate_ideal_answer,
    )


def get_account_service() -> AccountService:
    return AccountService(
        AccountStore(settings.DB_PATH),
        SessionStore(settings.DB_PATH),
        MockStore(settings.DB_PATH),
    )


def get_mock_scheduler() -> MockScheduler:
    return MockScheduler(MockStore(settings.DB_PATH))


def get_media_store() -> MediaStore:
    return MediaStore(settings.MEDIA_DIR)


def resolve_identity(header_value: Optional[str], fallback: Optional[str]) -> Optional[str]:
    """Prefer the authenticated header identity over a client-supplied id."""

    for candidate in (header_value, fallback):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def to_http(exc: InterviewError) -> HTTPException:
    if exc.status_code >= 500:
        logger.error("Interview operation failed: %s", exc, exc_info=exc)
    return HTTPException(status_code=exc.status_code, detail=exc.message)


__all__ = [
    "GENERATION_THROTTLE",
    "generate_ideal_answer",
    "generate_questions",
    "get_account_service",
    "get_interview_service",
    "get_media_store",
    "get_mock_scheduler",
    "resolve_identity",
    "to_http",
]
