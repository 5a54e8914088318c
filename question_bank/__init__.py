from __future__ import annotations  # Re-export question bank public API

from .builder import PoolExhausted, QuestionSetBuilder
from .generator import GeneratedBattery, GeneratedQuestion, QuestionGenerator
from .pools import DEFAULT_POOLS, DEFAULT_ROLE, FALLBACK_QUESTIONS, PoolQuestion

__all__ = [
    "PoolExhausted",
    "QuestionSetBuilder",
    "GeneratedBattery",
    "GeneratedQuestion",
    "QuestionGenerator",
    "DEFAULT_POOLS",
    "DEFAULT_ROLE",
    "FALLBACK_QUESTIONS",
    "PoolQuestion",
]
