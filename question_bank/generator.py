"""Role-specific question batteries from the external assistant, with the bank as fallback."""
from __future__ import annotations

import logging
from textwrap import dedent
from typing import List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from interview_session.models import TIERS, Difficulty, QuestionItem
from llm_gateway import BoundedAssist, ExternalAssistUnavailable

from .builder import PoolEntry, QuestionSetBuilder
from .pools import DEFAULT_ROLE, PoolQuestion

logger = logging.getLogger(__name__)

GENERATED_PER_TIER = 2


class GeneratedQuestion(BaseModel):  # One question as the assistant returns it
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str = Field(min_length=1)
    difficulty: Difficulty
    ideal_answer: str = Field(min_length=1)


class GeneratedBattery(BaseModel):
    """Exactly two questions per tier, Easy first and Hard last."""

    questions: List[GeneratedQuestion]

    @model_validator(mode="after")
    def _check_shape(self) -> "GeneratedBattery":
        expected = [tier for tier in TIERS for _ in range(GENERATED_PER_TIER)]
        if len(self.questions) != len(expected):
            raise ValueError(f"Expected {len(expected)} questions, got {len(self.questions)}")
        got = [question.difficulty for question in self.questions]
        if got != expected:
            raise ValueError(f"Questions must be ordered {expected}, got {got}")
        return self


class QuestionGenerator:  # Assisted battery first, question bank second
    def __init__(
        self,
        builder: QuestionSetBuilder,
        *,
        assist: Optional[BoundedAssist] = None,
        assist_by_default: bool = True,
    ) -> None:
        self.builder = builder
        self.assist = assist
        self.assist_by_default = assist_by_default

    def generate(
        self,
        pools: Optional[Mapping[str, Sequence[PoolEntry]]] = None,
        role: str = DEFAULT_ROLE,
        *,
        use_assist: Optional[bool] = None,
    ) -> List[QuestionItem]:
        wants_assist = self.assist_by_default if use_assist is None else use_assist
        if wants_assist and self.assist is not None:
            if self.builder.settings.picks_per_tier != GENERATED_PER_TIER:
                logger.info(
                    "Assisted questions need %d per tier, configured %d; using question bank",
                    GENERATED_PER_TIER,
                    self.builder.settings.picks_per_tier,
                )
            else:
                try:
                    return self._assisted(role)
                except ExternalAssistUnavailable as exc:
                    logger.warning("Assisted question generation unavailable for role=%s: %s", role, exc)
        return self.builder.build_or_fallback(pools, role)

    def _assisted(self, role: str) -> List[QuestionItem]:
        reply = self.assist.call(build_question_prompt(role), GeneratedBattery, purpose="generate_questions")
        counters = {tier: 0 for tier in TIERS}
        items: List[QuestionItem] = []
        for generated in reply.questions:
            chosen = PoolQuestion(text=generated.text.strip(), ideal_answer=generated.ideal_answer.strip())
            items.append(self.builder.make_item(generated.difficulty, counters[generated.difficulty], chosen))
            counters[generated.difficulty] += 1
        logger.info("Generated question set role=%s questions=%d", role, len(items))
        return items


_QUESTION_PROMPT = dedent(
    """
    Generate exactly 6 interview questions for a {role} position:
    - 2 Easy questions (basic concepts, simple coding problems)
    - 2 Medium questions (intermediate concepts, problem-solving)
    - 2 Hard questions (advanced concepts, complex scenarios)

    List them in that order: both Easy, then both Medium, then both Hard.
    Make questions practical and relevant to the role.
    Return JSON only:
    {{"questions": [{{"text": "question", "difficulty": "Easy|Medium|Hard", "idealAnswer": "expected answer"}}]}}
    """
).strip()


def build_question_prompt(role: str) -> str:
    return _QUESTION_PROMPT.format(role=role.strip() or DEFAULT_ROLE)


__all__ = [
    "GENERATED_PER_TIER",
    "GeneratedBattery",
    "GeneratedQuestion",
    "QuestionGenerator",
    "build_question_prompt",
]
