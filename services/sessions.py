"""Session orchestration: repositories, locking and creation rules."""
from __future__ import annotations

import logging
import threading
import weakref
from typing import List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from candidate_management import Candidate, CandidateNotFound, CandidateRepository
from interview_session.errors import SessionAlreadyInProgress
from interview_session.interview_session import InterviewEngine, TransitionResult
from interview_session.models import InterviewSession, QuestionItem, SessionProgress, SessionStatus
from interview_session.store import SessionRepository
from observability import log_event
from question_bank import DEFAULT_ROLE, QuestionGenerator, QuestionSetBuilder
from question_bank.builder import PoolEntry

logger = logging.getLogger(__name__)


class CurrentQuestion(BaseModel):  # Next question to present, or completion info
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    status: SessionStatus
    index: Optional[int] = None
    question: Optional[QuestionItem] = None
    progress: SessionProgress
    final_score: Optional[float] = None
    summary: Optional[str] = None


class SessionService:
    """Serializes transitions per session and creation per candidate."""

    def __init__(
        self,
        sessions: SessionRepository,
        candidates: CandidateRepository,
        engine: InterviewEngine,
        builder: QuestionSetBuilder,
        *,
        generator: Optional[QuestionGenerator] = None,
        pools: Optional[Mapping[str, Sequence[PoolEntry]]] = None,
        default_role: str = DEFAULT_ROLE,
    ) -> None:
        self.sessions = sessions
        self.candidates = candidates
        self.engine = engine
        self.builder = builder
        self.generator = generator or QuestionGenerator(builder)
        self.pools = pools
        self.default_role = default_role
        # Entries live only while some caller holds the lock.
        self._session_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
        self._candidate_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def _lock_for(self, table: "weakref.WeakValueDictionary[str, threading.Lock]", key: str) -> threading.Lock:
        with self._guard:
            lock = table.get(key)
            if lock is None:
                lock = threading.Lock()
                table[key] = lock
        return lock

    def start_session(self, candidate_id: str, role: Optional[str] = None) -> InterviewSession:
        candidate = self.candidates.get(candidate_id)
        role = role or self.default_role
        with self._lock_for(self._candidate_locks, candidate.id):
            existing = self.sessions.find_in_progress(candidate.id)
            if existing is not None:
                raise SessionAlreadyInProgress(candidate.id, existing.id)
            questions = self.generator.generate(self.pools, role)
            session = InterviewSession(candidate_id=candidate.id, role=role, questions=questions)
            self.sessions.save(session)
        log_event(
            "session_created",
            session.id,
            candidate_id=candidate.id,
            status=session.status,
        )
        return session

    def get(self, session_id: str) -> InterviewSession:
        return self.sessions.get(session_id)

    def list(self, candidate_id: Optional[str] = None) -> List[InterviewSession]:
        return self.sessions.list(candidate_id)

    def current_question(self, session_id: str) -> CurrentQuestion:
        session = self.sessions.get(session_id)
        found = session.current_question()
        index, question = found if found is not None else (None, None)
        return CurrentQuestion(
            session_id=session.id,
            status="completed" if session.is_complete else session.status,
            index=index,
            question=question,
            progress=session.progress(),
            final_score=session.final_score,
            summary=session.summary,
        )

    def submit_answer(
        self,
        session_id: str,
        index: int,
        text: str,
        *,
        use_assist: Optional[bool] = None,
    ) -> TransitionResult:
        with self._lock_for(self._session_locks, session_id):
            session = self.sessions.get(session_id)
            result = self.engine.submit_answer(
                session,
                index,
                text,
                candidate=self._candidate_for(session),
                use_assist=use_assist,
            )
            self.sessions.save(result.session)
        return result

    def skip(self, session_id: str, index: int) -> TransitionResult:
        with self._lock_for(self._session_locks, session_id):
            session = self.sessions.get(session_id)
            result = self.engine.skip(session, index, candidate=self._candidate_for(session))
            self.sessions.save(result.session)
        return result

    def finalize(self, session_id: str) -> InterviewSession:
        with self._lock_for(self._session_locks, session_id):
            session = self.sessions.get(session_id)
            if session.status == "completed":
                return session
            session, _ = self.engine.finalize(session, self._candidate_for(session))
            self.sessions.save(session)
        return session

    def _candidate_for(self, session: InterviewSession) -> Optional[Candidate]:
        try:
            return self.candidates.get(session.candidate_id)
        except CandidateNotFound:
            logger.warning("Session %s references unknown candidate %s", session.id, session.candidate_id)
            return None


__all__ = ["CurrentQuestion", "SessionService"]
