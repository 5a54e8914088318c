"""Pydantic schemas for the candidate and interview HTTP API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from candidate_management import Candidate
from interview_session.models import InterviewSession, QuestionItem


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CandidateFields(_ApiModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class CandidateSummary(Candidate):
    latest_interview_id: Optional[str] = None
    latest_final_score: Optional[float] = None
    latest_summary: Optional[str] = None


class ResumeUploadResp(_ApiModel):
    candidate: Candidate
    summary: str
    sections: List[str] = Field(default_factory=list)
    inferred_name: Optional[str] = None
    inferred_email: Optional[str] = None
    inferred_phone: Optional[str] = None


class StartReq(_ApiModel):
    candidate_id: str
    role: Optional[str] = None


class AnswerReq(_ApiModel):
    question_index: int
    answer: str
    use_assist: Optional[bool] = None


class SkipReq(_ApiModel):
    question_index: int


class TransitionResp(_ApiModel):
    interview_id: str
    question_index: int
    score: int
    rationale: str
    assisted: bool = False
    completed: bool = False
    next_index: Optional[int] = None
    next_question: Optional[QuestionItem] = None
    session: InterviewSession
