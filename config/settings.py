"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interview.db")
    CONFIG_PATH: str = Field(default="app_config.json")

    FREE_PLAN_MONTHLY_LIMIT: int = Field(default=3, ge=0)
    QUESTION_THROTTLE_SECONDS: float = Field(default=1.0, ge=0.0)
    RATE_LIMIT_RETRIES: int = Field(default=3, ge=0)
    RATE_LIMIT_BACKOFF_SECONDS: float = Field(default=2.0, ge=0.0)
    MAX_QUESTIONS: int = Field(default=5, ge=1)
    IDEAL_ANSWER_BUDGET_SECONDS: float = Field(default=15.0, ge=0.0)
    MEDIA_DIR: str = Field(default="data/media")

    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:5174"]
    )

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
