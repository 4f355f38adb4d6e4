"""Heuristic answer scoring and feedback synthesis."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from interview_session import Answer, MediaRef, Mode, answer_text

MAX_POINTS = 20
SCORE_CAP = 95


@dataclass(frozen=True)
class Rating:
    """One row of the length-to-rating table."""

    min_length: int
    label: str
    points: int


NO_ANSWER = Rating(0, "Poor: no answer", 0)

# Longest threshold first so the first match wins.
RATINGS = (
    Rating(120, "Perfect: comprehensive and well-structured", 20),
    Rating(60, "Good: clear and relevant", 18),
    Rating(30, "Moderate: decent, could be expanded", 15),
    Rating(10, "Average: needs more detail", 10),
    Rating(1, "Poor: very brief", 5),
)

VIDEO_PRESENT = "Good: video answer provided. Eye contact and clarity are important!"
VIDEO_MISSING = "Poor: no video answer provided."
VIDEO_OVERALL = "Great presence! Work on body language and confidence."


class ScoreResult(BaseModel):
    feedback: List[str] = Field(default_factory=list)
    score: Optional[int] = None
    overall_feedback: str


def rate_answer(answer: Answer) -> Rating:
    length = len(answer_text(answer).strip())
    for rating in RATINGS:
        if length >= rating.min_length:
            return rating
    return NO_ANSWER


def aggregate_score(points: Sequence[int], question_count: int) -> int:
    """Percentage of available points, rounded half up and capped at 95."""

    if question_count <= 0:
        return 0
    raw = sum(points) / (question_count * MAX_POINTS) * 100
    return min(int(math.floor(raw + 0.5)), SCORE_CAP)


def overall_feedback(score: int) -> str:
    if score >= 100:
        return "Perfect! Your answers were comprehensive and well-structured."
    if score >= 80:
        return "Great job! Your answers were clear, relevant and detailed."
    if score >= 60:
        return "Good effort. Most answers were relevant; add more depth and concrete examples."
    if score >= 40:
        return "Moderate performance. Expand your answers with specific examples and outcomes."
    if score > 0:
        return "Needs improvement. Aim for fuller answers that address each question directly."
    return "No answers provided. Answer each question to receive detailed feedback."


def _has_video(answer: Answer) -> bool:
    if isinstance(answer, MediaRef):
        return bool(answer.url)
    return bool(answer and answer.strip())


class AnswerScorer:
    """Score a submission against its questions.

    Text and audio answers are rated by trimmed length. Video answers can
    only be checked for presence, so video submissions get per-question
    feedback and a fixed narrative but no numeric score.
    """

    def score(self, questions: Sequence[str], answers: Sequence[Answer], mode: Mode) -> ScoreResult:
        padded: List[Answer] = list(answers[: len(questions)])
        padded.extend([None] * (len(questions) - len(padded)))

        if mode == "video":
            feedback = [VIDEO_PRESENT if _has_video(answer) else VIDEO_MISSING for answer in padded]
            return ScoreResult(feedback=feedback, score=None, overall_feedback=VIDEO_OVERALL)

        ratings = [rate_answer(answer) for answer in padded]
        total = aggregate_score([rating.points for rating in ratings], len(questions))
        return ScoreResult(
            feedback=[rating.label for rating in ratings],
            score=total,
            overall_feedback=overall_feedback(total),
        )


__all__ = [
    "AnswerScorer",
    "NO_ANSWER",
    "RATINGS",
    "Rating",
    "ScoreResult",
    "aggregate_score",
    "overall_feedback",
    "rate_answer",
]
