"""Candidate intake: identity edits and resume upload with backfill."""
from __future__ import annotations

import logging
from typing import List, Optional

from candidate_management import Candidate, CandidateRepository, apply_extraction
from interview_session.models import utcnow
from observability import log_event
from resume_extraction import ResumeExtractionResult, ResumeExtractor

logger = logging.getLogger(__name__)


class CandidateService:
    def __init__(self, candidates: CandidateRepository, extractor: ResumeExtractor) -> None:
        self.candidates = candidates
        self.extractor = extractor

    def create(self, *, name: Optional[str] = None, email: Optional[str] = None, phone: Optional[str] = None) -> Candidate:
        candidate = Candidate(name=name, email=email, phone=phone)
        self.candidates.save(candidate)
        logger.info("Created candidate %s missing=%s", candidate.id, candidate.missing_fields)
        return candidate

    def get(self, candidate_id: str) -> Candidate:
        return self.candidates.get(candidate_id)

    def list(self) -> List[Candidate]:
        return self.candidates.list()

    def update(self, candidate_id: str, **fields: Optional[str]) -> Candidate:
        """Overwrite the identity fields that were explicitly provided."""
        candidate = self.candidates.get(candidate_id)
        for field in ("name", "email", "phone"):
            if field in fields:
                setattr(candidate, field, fields[field])
        candidate.updated_at = utcnow()
        return self.candidates.save(candidate)

    def upload_resume(
        self,
        candidate_id: str,
        data: bytes,
        file_name: str,
        content_type: Optional[str] = None,
    ) -> tuple[Candidate, ResumeExtractionResult]:
        candidate = self.candidates.get(candidate_id)
        result = self.extractor.extract(data, file_name, content_type)
        before = list(candidate.missing_fields)
        apply_extraction(candidate, result, file_name)
        self.candidates.save(candidate)
        log_event(
            "resume_extracted",
            "-",
            candidate_id=candidate.id,
            sections=sorted(result.sections),
            backfilled=[field for field in before if field not in candidate.missing_fields],
            raw_text_length=result.raw_text_length,
        )
        return candidate, result


__all__ = ["CandidateService"]
