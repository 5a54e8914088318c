"""Session closing: aggregate score plus a narrative summary."""
from __future__ import annotations

import logging
import math
from textwrap import dedent
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, Field

from interview_session.errors import SessionIncomplete
from interview_session.models import InterviewSession, utcnow
from llm_gateway import BoundedAssist, ExternalAssistUnavailable

if TYPE_CHECKING:
    from candidate_management import Candidate

logger = logging.getLogger(__name__)

STRONG_THRESHOLD = 7.0
MODERATE_THRESHOLD = 5.0


class AssistSummary(BaseModel):  # Expected JSON reply from the summary assistant
    summary: str = Field(min_length=1)


def round1(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def final_score(session: InterviewSession) -> float:
    """Mean of recorded scores (timed-out questions count as 0), one decimal."""

    scores = [question.score for question in session.questions if question.score is not None]
    if not scores:
        return 0.0
    return round1(sum(scores) / len(scores))


def remark_for(score: float) -> str:
    if score >= STRONG_THRESHOLD:
        return "Strong performance with good technical knowledge."
    if score >= MODERATE_THRESHOLD:
        return "Moderate performance with room for improvement."
    return "Needs improvement in core technical skills."


def fallback_summary(session: InterviewSession, score: float, candidate: Optional["Candidate"] = None) -> str:
    name = (candidate.name if candidate is not None else None) or "Candidate"
    answered = session.progress().answered
    total = len(session.questions)
    return (
        f"Interview Summary for {name}: Answered {answered}/{total} questions "
        f"with an average score of {score}/10. {remark_for(score)}"
    )


class SessionFinalizer:
    """Closes a fully resolved session exactly once."""

    def __init__(self, *, assist: Optional[BoundedAssist] = None, assist_by_default: bool = True) -> None:
        self.assist = assist
        self.assist_by_default = assist_by_default

    def finalize(
        self,
        session: InterviewSession,
        candidate: Optional["Candidate"] = None,
        *,
        use_assist: Optional[bool] = None,
    ) -> InterviewSession:
        if session.status == "completed":
            return session
        if not session.all_resolved:
            raise SessionIncomplete(session.id, session.progress().remaining)

        score = final_score(session)
        summary = None
        wants_assist = self.assist_by_default if use_assist is None else use_assist
        if wants_assist and self.assist is not None:
            summary = self._assisted_summary(session, score, candidate)
        if summary is None:
            summary = fallback_summary(session, score, candidate)

        session.final_score = score
        session.summary = summary
        session.finalized_at = utcnow()
        session.status = "completed"
        return session

    def _assisted_summary(
        self, session: InterviewSession, score: float, candidate: Optional["Candidate"]
    ) -> Optional[str]:
        prompt = build_summary_prompt(session, score, candidate)
        try:
            reply = self.assist.call(prompt, AssistSummary, purpose="summarize_session")
        except ExternalAssistUnavailable as exc:
            logger.warning("Assisted summary unavailable for session %s, using template: %s", session.id, exc)
            return None
        return reply.summary.strip() or None


def _question_record(session: InterviewSession) -> str:
    lines: List[str] = []
    for index, question in enumerate(session.questions, start=1):
        if question.timed_out:
            answer = "(skipped or timed out)"
        else:
            answer = (question.answer or "").strip() or "(empty answer)"
        lines.append(
            f"{index}. [{question.difficulty}] {question.text}\n"
            f"   Answer: {answer}\n"
            f"   Score: {question.score}/10 ({question.rationale or 'no rationale'})"
        )
    return "\n".join(lines)


_SUMMARY_PROMPT = dedent(
    """
    You are summarizing a technical screening interview for a hiring panel.
    Candidate: {name}
    Email: {email}
    Phone: {phone}
    Role: {role}
    Final score: {score}/10

    Questions, answers and scores:
    {record}

    Write a concise summary (3-5 sentences) covering strengths, weaknesses and a recommendation.
    Return JSON only: {{"summary": "..."}}
    """
).strip()


def build_summary_prompt(session: InterviewSession, score: float, candidate: Optional["Candidate"] = None) -> str:
    return _SUMMARY_PROMPT.format(
        name=(candidate.name if candidate else None) or "Candidate",
        email=(candidate.email if candidate else None) or "(unknown)",
        phone=(candidate.phone if candidate else None) or "(unknown)",
        role=session.role or "(unspecified)",
        score=score,
        record=_question_record(session),
    )


__all__ = [
    "AssistSummary",
    "SessionFinalizer",
    "build_summary_prompt",
    "fallback_summary",
    "final_score",
    "remark_for",
    "round1",
]
