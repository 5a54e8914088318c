"""Configuration package for the interview engine."""
from .app_config import (
    QUESTIONS_TARGET,
    SCORING_TARGET,
    SUMMARY_TARGET,
    AppConfig,
    InterviewSettings,
    LlmRoute,
    ResumeSettings,
    ScoringSettings,
    load_config,
    resolve_route,
)
from .settings import Settings, load_settings

__all__ = [
    "QUESTIONS_TARGET",
    "SCORING_TARGET",
    "SUMMARY_TARGET",
    "AppConfig",
    "InterviewSettings",
    "LlmRoute",
    "ResumeSettings",
    "ScoringSettings",
    "load_config",
    "resolve_route",
    "Settings",
    "load_settings",
]
