from __future__ import annotations  # Re-export question_generation public API

from .question_generation import (  # noqa: F401
    QuestionGenerator,
    QuestionRequest,
    build_prompt,
    extract_keywords,
    generator_from_config,
    parse_questions,
    summarize_job_description,
    summarize_resume,
)

__all__ = [
    "QuestionGenerator",
    "QuestionRequest",
    "build_prompt",
    "extract_keywords",
    "generator_from_config",
    "parse_questions",
    "summarize_job_description",
    "summarize_resume",
]
