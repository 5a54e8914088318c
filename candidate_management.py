from __future__ import annotations  # Candidate entity and storage helpers

import datetime as dt
import sqlite3
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from resume_extraction import ResumeExtractionResult

IDENTITY_FIELDS = ("name", "email", "phone")


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class CandidateNotFound(LookupError):  # Unknown candidate id
    def __init__(self, candidate_id: str) -> None:
        super().__init__(f"Candidate not found: {candidate_id}")
        self.candidate_id = candidate_id


class Candidate(BaseModel):  # Candidate identity plus retained resume metadata
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, validate_assignment=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    resume_summary: str = ""
    resume_file_name: str = ""
    created_at: dt.datetime = Field(default_factory=_now)
    updated_at: dt.datetime = Field(default_factory=_now)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def _trim(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("email", mode="before")
    @classmethod
    def _trim_lower(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip().lower()
        return value or None

    @computed_field(alias="missingFields")  # type: ignore[prop-decorator]
    @property
    def missing_fields(self) -> List[str]:
        return [field for field in IDENTITY_FIELDS if not getattr(self, field)]


def apply_extraction(candidate: Candidate, result: "ResumeExtractionResult", file_name: str) -> Candidate:
    """Keep only the summary and file name; backfill identity fields that are still empty."""

    candidate.resume_summary = result.summary or ""
    candidate.resume_file_name = file_name
    inferred = {
        "name": result.inferred_name,
        "email": result.inferred_email,
        "phone": result.inferred_phone,
    }
    for field in IDENTITY_FIELDS:
        if not getattr(candidate, field) and inferred[field]:
            setattr(candidate, field, inferred[field])
    candidate.updated_at = _now()
    return candidate


class CandidateRepository(Protocol):  # Opaque candidate persistence
    def get(self, candidate_id: str) -> Candidate: ...

    def save(self, candidate: Candidate) -> Candidate: ...

    def list(self) -> List[Candidate]: ...


class InMemoryCandidateStore:  # Process-local candidate storage
    def __init__(self) -> None:
        self._items: Dict[str, Candidate] = {}
        self._guard = threading.Lock()

    def get(self, candidate_id: str) -> Candidate:
        with self._guard:
            found = self._items.get(candidate_id)
        if found is None:
            raise CandidateNotFound(candidate_id)
        return found.model_copy(deep=True)

    def save(self, candidate: Candidate) -> Candidate:
        with self._guard:
            self._items[candidate.id] = candidate.model_copy(deep=True)
        return candidate

    def list(self) -> List[Candidate]:
        with self._guard:
            items = [item.model_copy(deep=True) for item in self._items.values()]
        return sorted(items, key=lambda item: item.created_at, reverse=True)


class CandidateStore:  # SQLite-backed candidate storage
    def __init__(self, path: Path) -> None:  # Initialize store and schema
        self._path = path
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:  # Create SQLite connection
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:  # Ensure candidate table exists
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS candidates (
                    candidate_id TEXT PRIMARY KEY,
                    name TEXT,
                    email TEXT,
                    phone TEXT,
                    resume_summary TEXT NOT NULL,
                    resume_file_name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def get(self, candidate_id: str) -> Candidate:  # Load one candidate
        conn = self._connect()
        try:
            row = conn.execute(
                """
                SELECT candidate_id, name, email, phone, resume_summary, resume_file_name, created_at, updated_at
                FROM candidates WHERE candidate_id = ?
                """,
                (candidate_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise CandidateNotFound(candidate_id)
        return _from_row(row)

    def save(self, candidate: Candidate) -> Candidate:  # Insert or replace a candidate
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO candidates (
                    candidate_id, name, email, phone, resume_summary, resume_file_name, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    candidate.id,
                    candidate.name,
                    candidate.email,
                    candidate.phone,
                    candidate.resume_summary,
                    candidate.resume_file_name,
                    candidate.created_at.isoformat(),
                    candidate.updated_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return candidate

    def list(self) -> List[Candidate]:  # List candidates ordered by recency
        conn = self._connect()
        try:
            rows = conn.execute(
                """
                SELECT candidate_id, name, email, phone, resume_summary, resume_file_name, created_at, updated_at
                FROM candidates
                ORDER BY created_at DESC, candidate_id DESC
                """
            ).fetchall()
        finally:
            conn.close()
        return [_from_row(row) for row in rows]


def _from_row(row: sqlite3.Row) -> Candidate:
    return Candidate(
        id=row["candidate_id"],
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        resume_summary=row["resume_summary"],
        resume_file_name=row["resume_file_name"],
        created_at=dt.datetime.fromisoformat(row["created_at"]),
        updated_at=dt.datetime.fromisoformat(row["updated_at"]),
    )


__all__ = [
    "IDENTITY_FIELDS",
    "Candidate",
    "CandidateNotFound",
    "CandidateRepository",
    "CandidateStore",
    "InMemoryCandidateStore",
    "apply_extraction",
]
