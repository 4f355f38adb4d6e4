from __future__ import annotations  # Re-export ideal_answers public API

from .ideal_answers import (  # noqa: F401
    FALLBACK_TEMPLATE,
    IdealAnswer,
    IdealAnswerGenerator,
    fallback_answer,
    generator_from_config,
    ideal_answers_for,
)

__all__ = [
    "FALLBACK_TEMPLATE",
    "IdealAnswer",
    "IdealAnswerGenerator",
    "fallback_answer",
    "generator_from_config",
    "ideal_answers_for",
]
