from __future__ import annotations  # Re-export session models and errors

from .errors import (
    InterviewSessionError,
    InvalidQuestionIndex,
    QuestionAlreadyResolved,
    SessionAlreadyCompleted,
    SessionAlreadyInProgress,
    SessionIncomplete,
    SessionNotFound,
)
from .models import (
    SKIP_RATIONALE,
    TIERS,
    Difficulty,
    InterviewSession,
    QuestionItem,
    SessionProgress,
    SessionStatus,
    utcnow,
)

__all__ = [
    "InterviewSessionError",
    "InvalidQuestionIndex",
    "QuestionAlreadyResolved",
    "SessionAlreadyCompleted",
    "SessionAlreadyInProgress",
    "SessionIncomplete",
    "SessionNotFound",
    "SKIP_RATIONALE",
    "TIERS",
    "Difficulty",
    "InterviewSession",
    "QuestionItem",
    "SessionProgress",
    "SessionStatus",
    "utcnow",
]
