from __future__ import annotations  # Configuration schema for assist routing and engine tuning

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

SCORING_TARGET = "scoring.score_answer"
SUMMARY_TARGET = "finalizer.summarize"
QUESTIONS_TARGET = "question_bank.generate"


class LlmRoute(BaseModel):  # LLM endpoint configuration
    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    max_retries: int = Field(default=1, ge=0)
    api_key_env: str | None = None
    response_format: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    sequential: bool = False
    enforce_json: bool = True


class InterviewSettings(BaseModel):  # Question battery shape
    picks_per_tier: int = Field(default=2, ge=1)
    seconds_per_tier: Dict[str, int] = Field(
        default_factory=lambda: {"Easy": 20, "Medium": 60, "Hard": 120}
    )

    @model_validator(mode="after")
    def _check_tiers(self) -> "InterviewSettings":
        missing = {"Easy", "Medium", "Hard"} - set(self.seconds_per_tier)
        if missing:
            raise ValueError(f"seconds_per_tier missing tiers: {sorted(missing)}")
        return self


class ScoringSettings(BaseModel):  # Local heuristic constants
    length_thresholds: List[int] = Field(default_factory=lambda: [40, 120])
    length_points: int = Field(default=2, ge=0)
    keyword_points: int = Field(default=2, ge=0)
    keyword_cap: int = Field(default=6, ge=0)
    keyword_min_length: int = Field(default=4, ge=1)
    max_raw: Dict[str, int] = Field(default_factory=lambda: {"Easy": 8, "Medium": 10, "Hard": 12})
    stopwords: List[str] = Field(
        default_factory=lambda: [
            "about", "after", "also", "and", "another", "before", "between", "both",
            "could", "describe", "does", "each", "example", "explain", "from", "give",
            "have", "into", "its", "more", "most", "other", "outline", "over", "provide",
            "should", "some", "such", "than", "that", "their", "them", "then", "there",
            "these", "they", "this", "those", "through", "used", "using", "what",
            "when", "where", "which", "while", "will", "with", "without", "would",
            "your", "design", "real", "world", "work", "works", "difference",
        ]
    )

    @model_validator(mode="after")
    def _check_caps(self) -> "ScoringSettings":
        for tier in ("Easy", "Medium", "Hard"):
            if self.max_raw.get(tier, 0) <= 0:
                raise ValueError(f"max_raw must be positive for {tier}")
        return self


class ResumeSettings(BaseModel):  # Resume heuristic constants
    summary_max_words: int = Field(default=120, ge=1)
    fallback_line_count: int = Field(default=12, ge=1)


class AppConfig(BaseModel):  # Application configuration root
    llm_routes: Dict[str, LlmRoute] = Field(default_factory=dict)
    registry: Dict[str, str] = Field(default_factory=dict)
    interview: InterviewSettings = Field(default_factory=InterviewSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    resume: ResumeSettings = Field(default_factory=ResumeSettings)


def load_config(path: Path) -> AppConfig:  # Load configuration from disk, defaults when absent
    if not path.exists():
        return AppConfig()
    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def resolve_route(cfg: AppConfig, target: str) -> Optional[LlmRoute]:  # Route assigned to a target, if any
    route_id = cfg.registry.get(target)
    if route_id is None:
        return None
    if route_id not in cfg.llm_routes:
        raise KeyError(f"Route '{route_id}' missing for '{target}'")
    return cfg.llm_routes[route_id]
