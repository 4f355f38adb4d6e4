from __future__ import annotations  # Model answer generation with templated fallback

import logging
import time
from pathlib import Path
from textwrap import dedent
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, Field

from config import LlmRoute, load_route
from llm_gateway import FixedIntervalThrottle, HttpClient, call


logger = logging.getLogger(__name__)

REGISTRY_KEY = "ideal_answers.generate_ideal_answer"

FALLBACK_TEMPLATE = (
    'A strong answer to "{question}" should address the main requirements of the question, '
    "ground them in a concrete example from your own experience and finish with the outcome you achieved."
)


class IdealAnswer(BaseModel):  # Structured reply expected from the LLM
    answer: str = Field(min_length=1)


def fallback_answer(question: str) -> str:  # Deterministic placeholder for one question
    return FALLBACK_TEMPLATE.format(question=question.strip())


class IdealAnswerGenerator:  # Callable collaborator producing one model answer per question
    """Best-effort model answers.

    Rate-limited replies are not retried by default; the caller substitutes
    a fallback instead of waiting out the backoff schedule.
    """

    def __init__(
        self,
        route: LlmRoute,
        *,
        throttle: Optional[FixedIntervalThrottle] = None,
        client: Optional[HttpClient] = None,
        sleep: Callable[[float], None] = time.sleep,
        rate_limit_retries: int = 0,
    ) -> None:
        self.route = route
        self.throttle = throttle
        self.client = client
        self.sleep = sleep
        self.rate_limit_retries = rate_limit_retries

    def __call__(self, question: str, *, job_role: str = "", experience: str = "") -> str:
        task = _build_task(question, job_role, experience)
        result = call(
            task,
            IdealAnswer,
            cfg=self.route,
            client=self.client,
            throttle=self.throttle,
            sleep=self.sleep,
            rate_limit_retries=self.rate_limit_retries,
        )
        return result.answer.strip()


def ideal_answers_for(
    questions: Sequence[str],
    generate: Optional[Callable[[str], str]],
    *,
    budget_s: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
) -> List[str]:
    """Return one model answer per question.

    Any failure, including a missing generator or an empty reply, is replaced
    by :func:`fallback_answer` for that question and never propagates. Once
    ``budget_s`` seconds have elapsed the remaining questions get the fallback
    without a request.
    """

    started = clock()
    answers: List[str] = []
    for index, question in enumerate(questions):
        if generate is None:
            answers.append(fallback_answer(question))
            continue
        if budget_s is not None and clock() - started >= budget_s:
            logger.warning("Ideal answer budget of %.1fs spent, using fallback from Q%d", budget_s, index + 1)
            generate = None
            answers.append(fallback_answer(question))
            continue
        try:
            answer = generate(question)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Ideal answer generation failed for Q%d, using fallback: %s", index + 1, exc)
            answer = ""
        answers.append(answer if answer and answer.strip() else fallback_answer(question))
    return answers


def generator_from_config(
    *,
    config_path: Path,
    throttle: Optional[FixedIntervalThrottle] = None,
) -> IdealAnswerGenerator:  # Convenience helper using app config
    return IdealAnswerGenerator(load_route(config_path, REGISTRY_KEY), throttle=throttle)


def _build_task(question: str, job_role: str, experience: str) -> str:  # Build task prompt for LLM
    candidate = " ".join(part for part in (experience, job_role) if part) or "candidate"
    return dedent(
        f"""
        Write a model interview answer for a {candidate}.
        Question: {question}

        Respond with a JSON object containing a single key "answer" whose value is
        the answer text in 80 to 150 words, written in the first person.
        Return only JSON without markdown fences, text, or commentary.
        """
    ).strip()
