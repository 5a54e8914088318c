from __future__ import annotations  # Interview session persistence

import sqlite3
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .errors import SessionNotFound
from .models import InterviewSession


class SessionRepository(Protocol):  # Opaque session persistence
    def get(self, session_id: str) -> InterviewSession: ...

    def save(self, session: InterviewSession) -> InterviewSession: ...

    def list(self, candidate_id: Optional[str] = None) -> List[InterviewSession]: ...

    def find_in_progress(self, candidate_id: str) -> Optional[InterviewSession]: ...


class InMemorySessionStore:  # Process-local session storage
    def __init__(self) -> None:
        self._items: Dict[str, InterviewSession] = {}
        self._guard = threading.Lock()

    def get(self, session_id: str) -> InterviewSession:
        with self._guard:
            found = self._items.get(session_id)
        if found is None:
            raise SessionNotFound(session_id)
        return found.model_copy(deep=True)

    def save(self, session: InterviewSession) -> InterviewSession:
        with self._guard:
            self._items[session.id] = session.model_copy(deep=True)
        return session

    def list(self, candidate_id: Optional[str] = None) -> List[InterviewSession]:
        with self._guard:
            items = [
                item.model_copy(deep=True)
                for item in self._items.values()
                if candidate_id is None or item.candidate_id == candidate_id
            ]
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    def find_in_progress(self, candidate_id: str) -> Optional[InterviewSession]:
        for item in self.list(candidate_id):
            if item.status == "in_progress":
                return item
        return None


class SessionStore:  # SQLite-backed session storage, one JSON document per row
    def __init__(self, path: Path) -> None:  # Initialize store and schema
        self._path = path
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:  # Create SQLite connection
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:  # Ensure session table exists
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS interview_sessions (
                    session_id TEXT PRIMARY KEY,
                    candidate_id TEXT NOT NULL,
                    status TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    document TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_sessions_candidate ON interview_sessions(candidate_id, status)"
            )
            conn.commit()
        finally:
            conn.close()

    def get(self, session_id: str) -> InterviewSession:  # Load one session
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT document FROM interview_sessions WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise SessionNotFound(session_id)
        return InterviewSession.model_validate_json(row["document"])

    def save(self, session: InterviewSession) -> InterviewSession:  # Insert or replace a session
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO interview_sessions (session_id, candidate_id, status, created_at, document)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    session.id,
                    session.candidate_id,
                    session.status,
                    session.created_at.isoformat(),
                    session.model_dump_json(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return session

    def list(self, candidate_id: Optional[str] = None) -> List[InterviewSession]:  # Sessions ordered by recency
        conn = self._connect()
        try:
            if candidate_id is None:
                rows = conn.execute(
                    "SELECT document FROM interview_sessions ORDER BY created_at DESC, session_id DESC"
                ).fetchall()
            else:
                rows = conn.execute(
                    """
                    SELECT document FROM interview_sessions
                    WHERE candidate_id = ?
                    ORDER BY created_at DESC, session_id DESC
                    """,
                    (candidate_id,),
                ).fetchall()
        finally:
            conn.close()
        return [InterviewSession.model_validate_json(row["document"]) for row in rows]

    def find_in_progress(self, candidate_id: str) -> Optional[InterviewSession]:  # Open session for a candidate
        conn = self._connect()
        try:
            row = conn.execute(
                """
                SELECT document FROM interview_sessions
                WHERE candidate_id = ? AND status = 'in_progress'
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (candidate_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return InterviewSession.model_validate_json(row["document"])


__all__ = ["InMemorySessionStore", "SessionRepository", "SessionStore"]
