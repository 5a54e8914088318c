"""Application settings loaded from the environment."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables, ``.env`` or defaults."""

    DB_PATH: str = Field(default="data/interviews.db")
    APP_CONFIG_PATH: str = Field(default="app_config.json")

    RESUME_MAX_BYTES: int = Field(default=2 * 1024 * 1024, ge=1)

    ASSIST_SCORING: bool = False
    ASSIST_SUMMARY: bool = True
    ASSIST_QUESTIONS: bool = True
    ASSIST_TIMEOUT_S: float = Field(default=20.0, gt=0.0)

    DEFAULT_ROLE: str = "Full Stack (React/Node)"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)


def load_settings(**overrides) -> Settings:
    """Build a fresh settings object; keyword overrides win over the environment."""

    return Settings(**overrides)


__all__ = ["Settings", "load_settings"]
