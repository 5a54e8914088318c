from __future__ import annotations  # Interview session domain models

import datetime as dt
from typing import List, Literal, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Difficulty = Literal["Easy", "Medium", "Hard"]
SessionStatus = Literal["in_progress", "completed"]

TIERS: Tuple[Difficulty, ...] = ("Easy", "Medium", "Hard")
SKIP_RATIONALE = "Question skipped or timed out"


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class _WireModel(BaseModel):  # camelCase on the wire, snake_case in code
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionItem(_WireModel):  # One question of a session battery
    id: str
    text: str
    difficulty: Difficulty
    ideal_answer: str = ""
    seconds_allowed: int = Field(ge=1)
    answer: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=10)
    rationale: Optional[str] = None
    started_at: dt.datetime = Field(default_factory=utcnow)
    answered_at: Optional[dt.datetime] = None
    timed_out: bool = False

    @model_validator(mode="after")
    def _check_resolution(self) -> "QuestionItem":
        if self.answer is not None and self.timed_out:
            raise ValueError("question cannot be both answered and timed out")
        if (self.score is not None) != self.resolved:
            raise ValueError("score must be set exactly when the question is resolved")
        return self

    @property
    def resolved(self) -> bool:
        return self.answer is not None or self.timed_out


class SessionProgress(BaseModel):  # Counts surfaced to callers
    total: int
    answered: int
    timed_out: int
    remaining: int


class InterviewSession(_WireModel):  # One candidate's attempt at the battery
    id: str = Field(default_factory=lambda: uuid4().hex)
    candidate_id: str
    role: str = ""
    questions: List[QuestionItem] = Field(min_length=1)
    status: SessionStatus = "in_progress"
    final_score: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    summary: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=utcnow)
    finalized_at: Optional[dt.datetime] = None

    @model_validator(mode="after")
    def _check_status(self) -> "InterviewSession":
        if self.status == "completed" and not self.all_resolved:
            raise ValueError("completed session has unresolved questions")
        if (self.final_score is not None) != (self.status == "completed"):
            raise ValueError("final_score must be set exactly when the session is completed")
        return self

    @property
    def all_resolved(self) -> bool:
        return all(question.resolved for question in self.questions)

    @property
    def is_complete(self) -> bool:
        """True once nothing is left to answer, even if finalization has not run yet."""
        return self.status == "completed" or self.all_resolved

    def current_question(self) -> Optional[Tuple[int, QuestionItem]]:
        for index, question in enumerate(self.questions):
            if not question.resolved:
                return index, question
        return None

    def progress(self) -> SessionProgress:
        answered = sum(1 for question in self.questions if question.answer is not None)
        timed_out = sum(1 for question in self.questions if question.timed_out)
        total = len(self.questions)
        return SessionProgress(
            total=total,
            answered=answered,
            timed_out=timed_out,
            remaining=total - answered - timed_out,
        )


__all__ = [
    "Difficulty",
    "SessionStatus",
    "TIERS",
    "SKIP_RATIONALE",
    "QuestionItem",
    "SessionProgress",
    "InterviewSession",
    "utcnow",
]
