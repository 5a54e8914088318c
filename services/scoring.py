"""Answer scoring: external assist first, deterministic heuristic as fallback."""
from __future__ import annotations

import logging
import math
import re
from textwrap import dedent
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from config import ScoringSettings
from interview_session.models import Difficulty
from llm_gateway import BoundedAssist, ExternalAssistUnavailable

logger = logging.getLogger(__name__)

_WORD = re.compile(r"[a-z][a-z0-9+#.\-]*")


class ScoreResult(BaseModel):
    score: int = Field(ge=0, le=10)
    rationale: str
    assisted: bool = False


class AssistScore(BaseModel):  # Expected JSON reply from the scoring assistant
    score: float = Field(ge=0, le=10)
    notes: str

    @field_validator("score", mode="before")
    @classmethod
    def _numeric_only(cls, value: object) -> object:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("score must be a JSON number")
        return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def question_keywords(question_text: str, settings: ScoringSettings) -> List[str]:
    """Distinct topic words of the question, in order of appearance."""

    stop = set(settings.stopwords)
    seen: List[str] = []
    for raw in _WORD.findall(question_text.lower()):
        word = raw.strip(".-")
        if len(word) < settings.keyword_min_length or word in stop or word in seen:
            continue
        seen.append(word)
    return seen


def local_score(
    question_text: str,
    candidate_answer: str,
    difficulty: Difficulty,
    settings: Optional[ScoringSettings] = None,
) -> ScoreResult:
    """Deterministic length-and-keyword heuristic, rescaled to 0-10."""

    settings = settings or ScoringSettings()
    text = (candidate_answer or "").lower()
    length_points = sum(settings.length_points for threshold in settings.length_thresholds if len(text) > threshold)

    keywords = question_keywords(question_text, settings)
    hits = [word for word in keywords if word in text]
    keyword_points = min(settings.keyword_cap, len(hits) * settings.keyword_points)

    cap = settings.max_raw[difficulty]
    raw = min(length_points + keyword_points, cap)
    score = _round_half_up(raw / cap * 10)
    rationale = (
        f"heuristic score: {raw}/{cap} points "
        f"(length {length_points}, keywords {len(hits)}/{len(keywords)} matched)"
    )
    return ScoreResult(score=score, rationale=rationale, assisted=False)


class ScoringEngine:
    """Scores one answer; the assist path is optional and never raises."""

    def __init__(
        self,
        settings: Optional[ScoringSettings] = None,
        *,
        assist: Optional[BoundedAssist] = None,
        assist_by_default: bool = False,
    ) -> None:
        self.settings = settings or ScoringSettings()
        self.assist = assist
        self.assist_by_default = assist_by_default

    def score(
        self,
        question_text: str,
        ideal_answer: str,
        candidate_answer: str,
        difficulty: Difficulty,
        *,
        use_assist: Optional[bool] = None,
    ) -> ScoreResult:
        wants_assist = self.assist_by_default if use_assist is None else use_assist
        if wants_assist and self.assist is not None:
            try:
                return self._assisted(question_text, ideal_answer, candidate_answer, difficulty)
            except ExternalAssistUnavailable as exc:
                logger.warning("Assisted scoring unavailable, using heuristic: %s", exc)
        return local_score(question_text, candidate_answer, difficulty, self.settings)

    def _assisted(self, question_text: str, ideal_answer: str, candidate_answer: str, difficulty: Difficulty) -> ScoreResult:
        prompt = build_score_prompt(question_text, ideal_answer, candidate_answer, difficulty)
        reply = self.assist.call(prompt, AssistScore, purpose="score_answer")
        notes = reply.notes.strip()[:300] or "assisted score"
        return ScoreResult(score=_round_half_up(reply.score), rationale=notes, assisted=True)


_SCORE_PROMPT = dedent(
    """
    You are a technical interviewer evaluating one answer.
    Difficulty: {difficulty}
    Question: {question}
    Ideal answer: {ideal}
    Candidate answer:
    {answer}

    Score the candidate answer from 0 to 10 against the ideal answer.
    Return JSON only: {{"score": number between 0 and 10, "notes": "one or two sentences"}}
    """
).strip()


def build_score_prompt(question_text: str, ideal_answer: str, candidate_answer: str, difficulty: Difficulty) -> str:
    return _SCORE_PROMPT.format(
        difficulty=difficulty,
        question=question_text,
        ideal=ideal_answer or "(not provided)",
        answer=candidate_answer.strip() or "(no answer)",
    )


__all__ = [
    "AssistScore",
    "ScoreResult",
    "ScoringEngine",
    "build_score_prompt",
    "local_score",
    "question_keywords",
]
