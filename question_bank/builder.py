"""Builds the fixed, difficulty-tiered question battery for one interview."""
from __future__ import annotations

import logging
import random
from typing import List, Mapping, Optional, Sequence, Union
from uuid import uuid4

from config import InterviewSettings
from interview_session.models import TIERS, Difficulty, QuestionItem, utcnow

from .pools import DEFAULT_POOLS, DEFAULT_ROLE, FALLBACK_QUESTIONS, PoolQuestion

logger = logging.getLogger(__name__)

PoolEntry = Union[PoolQuestion, str]


class PoolExhausted(RuntimeError):
    def __init__(self, tier: str, available: int, required: int) -> None:
        super().__init__(f"Question pool for {tier} has {available} entries; {required} required")
        self.tier = tier
        self.available = available
        self.required = required


class QuestionSetBuilder:
    """Samples ``picks_per_tier`` questions from each tier pool, Easy first, Hard last."""

    def __init__(self, settings: Optional[InterviewSettings] = None, *, rng: Optional[random.Random] = None) -> None:
        self.settings = settings or InterviewSettings()
        self._rng = rng or random.Random()

    def build(
        self,
        pools: Optional[Mapping[str, Sequence[PoolEntry]]] = None,
        role: str = DEFAULT_ROLE,
        rng: Optional[random.Random] = None,
    ) -> List[QuestionItem]:
        pools = DEFAULT_POOLS if pools is None else pools
        rng = rng or self._rng
        picks = self.settings.picks_per_tier
        items: List[QuestionItem] = []
        for tier in TIERS:
            pool = [_as_pool_question(entry) for entry in pools.get(tier, ())]
            if len(pool) < picks:
                raise PoolExhausted(tier, len(pool), picks)
            for index, chosen in enumerate(rng.sample(pool, picks)):
                items.append(self.make_item(tier, index, chosen))
        logger.info("Built question set role=%s questions=%d", role, len(items))
        return items

    def fallback(self) -> List[QuestionItem]:
        """Deterministic six-question set used when the bank cannot supply a battery."""
        counters = {tier: 0 for tier in TIERS}
        items: List[QuestionItem] = []
        for entry in FALLBACK_QUESTIONS:
            tier: Difficulty = entry["difficulty"]  # type: ignore[assignment]
            chosen = PoolQuestion(text=entry["text"], ideal_answer=entry["ideal_answer"])
            items.append(self.make_item(tier, counters[tier], chosen))
            counters[tier] += 1
        return items

    def build_or_fallback(
        self,
        pools: Optional[Mapping[str, Sequence[PoolEntry]]] = None,
        role: str = DEFAULT_ROLE,
    ) -> List[QuestionItem]:
        try:
            return self.build(pools, role)
        except PoolExhausted as exc:
            logger.warning("Question bank too small for role=%s (%s); using fallback set", role, exc)
            return self.fallback()

    def make_item(self, tier: Difficulty, index: int, chosen: PoolQuestion) -> QuestionItem:
        return QuestionItem(
            id=f"{tier.lower()}-{index}-{uuid4().hex}",
            text=chosen.text,
            difficulty=tier,
            ideal_answer=chosen.ideal_answer,
            seconds_allowed=self.settings.seconds_per_tier[tier],
            started_at=utcnow(),
        )


def _as_pool_question(entry: PoolEntry) -> PoolQuestion:
    if isinstance(entry, PoolQuestion):
        return entry
    if isinstance(entry, str):
        return PoolQuestion(text=entry)
    return PoolQuestion.model_validate(entry)


__all__ = ["PoolEntry", "PoolExhausted", "QuestionSetBuilder"]
