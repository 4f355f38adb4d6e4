from __future__ import annotations  # Interview question generation module

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel

from config import LlmRoute, load_route, settings
from llm_gateway import FixedIntervalThrottle, HttpClient, complete
from services.errors import EmptyResult


logger = logging.getLogger(__name__)

REGISTRY_KEY = "question_generation.generate_questions"

SYSTEM_PROMPT = (
    "You are an expert HR assistant who creates interview questions based on "
    "candidate resumes and job descriptions."
)

_VOCABULARY = (
    ("JavaScript", "Python", "Java", "C++", "Ruby", "PHP", "Swift", "Kotlin", "Go", "Rust", "SQL", "HTML", "CSS"),
    ("React", "Angular", "Vue", "Node.js", "Express", "Django", "Flask", "Spring", "Laravel", "AWS", "Azure", "GCP"),
    ("Docker", "Kubernetes", "Jenkins", "Git", "CI/CD", "DevOps", "Agile", "Scrum"),
    ("Machine Learning", "AI", "Data Science", "Cloud Computing", "Microservices", "REST API", "GraphQL"),
    ("MongoDB", "PostgreSQL", "MySQL", "Redis", "ElasticSearch", "Firebase"),
    ("Team Lead", "Project Manager", "Senior", "Junior", "Full Stack", "Backend", "Frontend", "SRE"),
)

_KEYWORD_PATTERNS = [
    re.compile(r"(?<!\w)(?:" + "|".join(re.escape(term) for term in group) + r")(?!\w)", re.IGNORECASE)
    for group in _VOCABULARY
]
_EXPERIENCE_PATTERN = re.compile(r"\b\d+(?:\.\d+)?\s*(?:year|yr)s?\b", re.IGNORECASE)
_NUMBERED = re.compile(r"\d+\.\s+")
_Q_PREFIXED = re.compile(r"Q\d+:\s+")


class QuestionRequest(BaseModel):  # Job metadata used to tailor the questions
    job_role: str
    experience: str
    industry: Optional[str] = None
    job_description: Optional[str] = None
    resume_text: Optional[str] = None


def extract_keywords(text: str) -> str:  # Summarize experience phrases and known skills found in text
    if not text:
        return ""
    experience = _EXPERIENCE_PATTERN.findall(text)
    keywords: Dict[str, None] = {}
    for pattern in _KEYWORD_PATTERNS:
        for match in pattern.findall(text):
            keywords.setdefault(match, None)
    summary = f"Experience: {', '.join(experience)}. " if experience else ""
    if keywords:
        summary += f"Key skills: {', '.join(keywords)}"
    return summary


def _leading_words(text: str, count: int = 4) -> str:
    words = text.split()
    if not words:
        return ""
    return " ".join(words[:count]) + "..."


def _split_summary(summary: str) -> tuple[str, List[str]]:
    head, _, tail = summary.partition("Key skills:")
    skills = [skill.strip() for skill in tail.split(",") if skill.strip()]
    return head.strip(), skills


def summarize_resume(text: str) -> str:  # Condense resume text into an experience and top-skill line
    summary = extract_keywords(text)
    if not summary:
        return _leading_words(text)
    experience, skills = _split_summary(summary)
    if experience.startswith("Experience"):
        return f"{experience} Main skill: {skills[0]}" if skills else experience
    return f"Main skills: {', '.join(skills[:3])}"


def summarize_job_description(text: str) -> str:  # Condense job description into required skills
    summary = extract_keywords(text)
    if not summary:
        return _leading_words(text)
    _, skills = _split_summary(summary)
    if not skills:
        return ""
    return f"Required skills: {', '.join(skills[:4])}"


def build_prompt(request: QuestionRequest, *, count: int = 5) -> str:  # Compose the user prompt sent upstream
    prompt = f"Generate {count} interview questions for a {request.experience} {request.job_role}"
    prompt += f" in the {request.industry} industry." if request.industry else "."
    requirements = summarize_job_description(request.job_description or "")
    if requirements:
        prompt += f" Job Requirements: {requirements}"
    background = summarize_resume(request.resume_text or "")
    if background:
        prompt += (
            f"\nCandidate Background: {background}"
            "\nCustomise at least 2 questions to the candidate's background."
        )
    return prompt


def parse_questions(text: str, *, limit: int = 5) -> List[str]:
    """Split a free-text reply into discrete questions.

    Numbered lists win over ``Q1:`` prefixes, which win over plain lines.
    Text before the first marker is treated as preamble and dropped.
    """

    if _NUMBERED.search(text) and "1." in text:
        parts = _NUMBERED.split(text)[1:]
    elif "Q1:" in text:
        parts = _Q_PREFIXED.split(text)[1:]
    else:
        parts = [line for line in text.split("\n") if line.strip() and len(line.strip()) > 10]
    questions = [part.strip() for part in parts if part.strip()]
    if not questions:
        raise EmptyResult(f"No questions extracted from response: {text[:200]!r}")
    return questions[:limit]


class QuestionGenerator:  # Callable collaborator producing ordered interview questions
    def __init__(
        self,
        route: LlmRoute,
        *,
        throttle: Optional[FixedIntervalThrottle] = None,
        client: Optional[HttpClient] = None,
        limit: Optional[int] = None,
    ) -> None:
        self.route = route
        self.throttle = throttle
        self.client = client
        self.limit = limit or settings.MAX_QUESTIONS

    def __call__(self, request: QuestionRequest) -> List[str]:
        prompt = build_prompt(request, count=self.limit)
        logger.info("Generating questions role=%s experience=%s", request.job_role, request.experience)
        text = complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            cfg=self.route,
            client=self.client,
            throttle=self.throttle,
        )
        questions = parse_questions(text, limit=self.limit)
        logger.info("Generated %d questions", len(questions))
        return questions


def generator_from_config(
    *,
    config_path: Path,
    throttle: Optional[FixedIntervalThrottle] = None,
) -> QuestionGenerator:  # Convenience helper using app config
    return QuestionGenerator(load_route(config_path, REGISTRY_KEY), throttle=throttle)
