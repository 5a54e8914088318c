"""Hard errors raised by the interview session engine."""
from __future__ import annotations


class InterviewSessionError(RuntimeError):
    pass


class SessionNotFound(InterviewSessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Interview session not found: {session_id}")
        self.session_id = session_id


class InvalidQuestionIndex(InterviewSessionError):
    def __init__(self, index: int, total: int) -> None:
        super().__init__(f"Invalid question index {index}; session has {total} questions")
        self.index = index
        self.total = total


class QuestionAlreadyResolved(InterviewSessionError):
    def __init__(self, index: int) -> None:
        super().__init__(f"Question {index} was already answered or timed out")
        self.index = index


class SessionAlreadyCompleted(InterviewSessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Interview session {session_id} is already completed")
        self.session_id = session_id


class SessionIncomplete(InterviewSessionError):
    def __init__(self, session_id: str, remaining: int) -> None:
        super().__init__(f"Interview session {session_id} still has {remaining} unresolved questions")
        self.session_id = session_id
        self.remaining = remaining


class SessionAlreadyInProgress(InterviewSessionError):
    """A candidate already has an open session; ``session_id`` names it."""

    def __init__(self, candidate_id: str, session_id: str) -> None:
        super().__init__(f"Candidate {candidate_id} already has an interview in progress")
        self.candidate_id = candidate_id
        self.session_id = session_id


__all__ = [
    "InterviewSessionError",
    "SessionNotFound",
    "InvalidQuestionIndex",
    "QuestionAlreadyResolved",
    "SessionAlreadyCompleted",
    "SessionIncomplete",
    "SessionAlreadyInProgress",
]
