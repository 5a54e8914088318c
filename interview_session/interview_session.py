from __future__ import annotations  # Interview session state machine

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from observability import log_event, span
from services.finalizer import SessionFinalizer
from services.scoring import ScoreResult, ScoringEngine

from .errors import InvalidQuestionIndex, QuestionAlreadyResolved, SessionAlreadyCompleted
from .models import SKIP_RATIONALE, InterviewSession, QuestionItem, utcnow

if TYPE_CHECKING:
    from candidate_management import Candidate

logger = logging.getLogger(__name__)


class TransitionResult(BaseModel):  # Outcome of one answer/skip transition
    session: InterviewSession
    question_index: int
    score: int
    rationale: str
    assisted: bool = False
    completed: bool = False
    events: List[Dict[str, Any]] = Field(default_factory=list)


class InterviewEngine:  # Answer/skip transitions over a session value
    def __init__(self, scoring: ScoringEngine, finalizer: SessionFinalizer) -> None:
        self.scoring = scoring
        self.finalizer = finalizer

    def submit_answer(
        self,
        session: InterviewSession,
        index: int,
        text: str,
        *,
        candidate: Optional["Candidate"] = None,
        use_assist: Optional[bool] = None,
    ) -> TransitionResult:  # Score and record an answer
        question = self._open_question(session, index)
        events: List[Dict[str, Any]] = []
        with span(events, "score_answer"):
            result: ScoreResult = self.scoring.score(
                question.text,
                question.ideal_answer,
                text,
                question.difficulty,
                use_assist=use_assist,
            )
        question.answer = text
        question.score = result.score
        question.rationale = result.rationale
        question.answered_at = utcnow()
        log_event(
            "answer_scored",
            session.id,
            candidate_id=session.candidate_id,
            question_index=index,
            difficulty=question.difficulty,
            score=result.score,
            assisted=result.assisted,
            ms=events[-1]["ms"],
        )
        completed = self._finalize_if_done(session, candidate, events)
        return TransitionResult(
            session=session,
            question_index=index,
            score=result.score,
            rationale=result.rationale,
            assisted=result.assisted,
            completed=completed,
            events=events,
        )

    def skip(
        self,
        session: InterviewSession,
        index: int,
        *,
        candidate: Optional["Candidate"] = None,
    ) -> TransitionResult:  # Record a skip or an expired timer
        question = self._open_question(session, index)
        question.timed_out = True
        question.score = 0
        question.rationale = SKIP_RATIONALE
        question.answered_at = utcnow()
        log_event(
            "question_skipped",
            session.id,
            candidate_id=session.candidate_id,
            question_index=index,
            difficulty=question.difficulty,
            score=0,
        )
        events: List[Dict[str, Any]] = []
        completed = self._finalize_if_done(session, candidate, events)
        return TransitionResult(
            session=session,
            question_index=index,
            score=0,
            rationale=SKIP_RATIONALE,
            completed=completed,
            events=events,
        )

    def finalize(
        self,
        session: InterviewSession,
        candidate: Optional["Candidate"] = None,
    ) -> Tuple[InterviewSession, List[Dict[str, Any]]]:  # Explicit, idempotent close
        events: List[Dict[str, Any]] = []
        if session.status == "completed":
            return session, events
        self._run_finalizer(session, candidate, events)
        return session, events

    def _open_question(self, session: InterviewSession, index: int) -> QuestionItem:
        if session.status == "completed":
            raise SessionAlreadyCompleted(session.id)
        total = len(session.questions)
        if not 0 <= index < total:
            raise InvalidQuestionIndex(index, total)
        question = session.questions[index]
        if question.resolved:
            raise QuestionAlreadyResolved(index)
        return question

    def _finalize_if_done(
        self,
        session: InterviewSession,
        candidate: Optional["Candidate"],
        events: List[Dict[str, Any]],
    ) -> bool:
        if not session.all_resolved:
            return False
        self._run_finalizer(session, candidate, events)
        return True

    def _run_finalizer(
        self,
        session: InterviewSession,
        candidate: Optional["Candidate"],
        events: List[Dict[str, Any]],
    ) -> None:
        with span(events, "finalize"):
            self.finalizer.finalize(session, candidate)
        logger.info("Session %s finalized with score %.1f", session.id, session.final_score)
        log_event(
            "session_finalized",
            session.id,
            candidate_id=session.candidate_id,
            status=session.status,
            final_score=session.final_score,
            ms=events[-1]["ms"],
        )


__all__ = ["InterviewEngine", "TransitionResult"]
