"""FastAPI routes for candidates, resume intake and interview sessions."""
from __future__ import annotations

import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from api.schemas import (
    AnswerReq,
    CandidateFields,
    CandidateSummary,
    ResumeUploadResp,
    SkipReq,
    StartReq,
    TransitionResp,
)
from candidate_management import Candidate, CandidateNotFound
from interview_session.errors import (
    InvalidQuestionIndex,
    QuestionAlreadyResolved,
    SessionAlreadyCompleted,
    SessionAlreadyInProgress,
    SessionIncomplete,
    SessionNotFound,
)
from interview_session.interview_session import TransitionResult
from interview_session.models import InterviewSession
from resume_extraction import ExtractionFailed, FileTooLarge, UnsupportedFileType
from services.bootstrap import ServiceContainer
from services.sessions import CurrentQuestion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_STATUS = (
    (CandidateNotFound, 404),
    (SessionNotFound, 404),
    (UnsupportedFileType, 400),
    (FileTooLarge, 413),
    (ExtractionFailed, 422),
    (InvalidQuestionIndex, 400),
    (QuestionAlreadyResolved, 409),
    (SessionAlreadyCompleted, 409),
    (SessionIncomplete, 409),
)


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def _raise_http(exc: Exception) -> NoReturn:
    if isinstance(exc, SessionAlreadyInProgress):
        raise HTTPException(
            status_code=409,
            detail={"message": str(exc), "interviewId": exc.session_id},
        ) from exc
    for error_type, status_code in _STATUS:
        if isinstance(exc, error_type):
            raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    raise exc


def _transition_resp(result: TransitionResult) -> TransitionResp:
    found = result.session.current_question()
    next_index, next_question = found if found is not None else (None, None)
    return TransitionResp(
        interview_id=result.session.id,
        question_index=result.question_index,
        score=result.score,
        rationale=result.rationale,
        assisted=result.assisted,
        completed=result.completed,
        next_index=next_index,
        next_question=next_question,
        session=result.session,
    )


@router.post("/candidates", response_model=Candidate, status_code=201)
def create_candidate(payload: CandidateFields, services: ServiceContainer = Depends(get_services)) -> Candidate:
    return services.candidates.create(name=payload.name, email=payload.email, phone=payload.phone)


@router.get("/candidates", response_model=List[CandidateSummary])
def list_candidates(services: ServiceContainer = Depends(get_services)) -> List[CandidateSummary]:
    summaries: List[CandidateSummary] = []
    for candidate in services.candidates.list():
        latest = next(
            (item for item in services.sessions.list(candidate.id) if item.status == "completed"),
            None,
        )
        summaries.append(
            CandidateSummary(
                **candidate.model_dump(exclude={"missing_fields"}),
                latest_interview_id=latest.id if latest else None,
                latest_final_score=latest.final_score if latest else None,
                latest_summary=latest.summary if latest else None,
            )
        )
    return summaries


@router.get("/candidates/{candidate_id}", response_model=Candidate)
def get_candidate(candidate_id: str, services: ServiceContainer = Depends(get_services)) -> Candidate:
    try:
        return services.candidates.get(candidate_id)
    except CandidateNotFound as exc:
        _raise_http(exc)


@router.patch("/candidates/{candidate_id}", response_model=Candidate)
def update_candidate(
    candidate_id: str,
    payload: CandidateFields,
    services: ServiceContainer = Depends(get_services),
) -> Candidate:
    fields = payload.model_dump(include=payload.model_fields_set)
    try:
        return services.candidates.update(candidate_id, **fields)
    except CandidateNotFound as exc:
        _raise_http(exc)


@router.post("/candidates/{candidate_id}/resume", response_model=ResumeUploadResp)
async def upload_resume(
    candidate_id: str,
    file: UploadFile = File(...),
    services: ServiceContainer = Depends(get_services),
) -> ResumeUploadResp:
    # One byte past the cap is enough to reject oversized uploads.
    data = await file.read(services.settings.RESUME_MAX_BYTES + 1)
    try:
        candidate, result = await run_in_threadpool(
            services.candidates.upload_resume,
            candidate_id,
            data,
            file.filename or "",
            file.content_type,
        )
    except (CandidateNotFound, UnsupportedFileType, FileTooLarge, ExtractionFailed) as exc:
        _raise_http(exc)
    return ResumeUploadResp(
        candidate=candidate,
        summary=result.summary,
        sections=sorted(result.sections),
        inferred_name=result.inferred_name,
        inferred_email=result.inferred_email,
        inferred_phone=result.inferred_phone,
    )


@router.post("/interviews", response_model=InterviewSession, status_code=201)
def start_interview(payload: StartReq, services: ServiceContainer = Depends(get_services)) -> InterviewSession:
    try:
        return services.sessions.start_session(payload.candidate_id, payload.role)
    except (CandidateNotFound, SessionAlreadyInProgress) as exc:
        _raise_http(exc)


@router.get("/interviews", response_model=List[InterviewSession])
def list_interviews(services: ServiceContainer = Depends(get_services)) -> List[InterviewSession]:
    return services.sessions.list()


@router.get("/interviews/{interview_id}", response_model=InterviewSession)
def get_interview(interview_id: str, services: ServiceContainer = Depends(get_services)) -> InterviewSession:
    try:
        return services.sessions.get(interview_id)
    except SessionNotFound as exc:
        _raise_http(exc)


@router.get("/interviews/{interview_id}/current-question", response_model=CurrentQuestion)
def current_question(interview_id: str, services: ServiceContainer = Depends(get_services)) -> CurrentQuestion:
    try:
        return services.sessions.current_question(interview_id)
    except SessionNotFound as exc:
        _raise_http(exc)


@router.post("/interviews/{interview_id}/answer", response_model=TransitionResp)
def submit_answer(
    interview_id: str,
    payload: AnswerReq,
    services: ServiceContainer = Depends(get_services),
) -> TransitionResp:
    try:
        result = services.sessions.submit_answer(
            interview_id,
            payload.question_index,
            payload.answer,
            use_assist=payload.use_assist,
        )
    except (SessionNotFound, InvalidQuestionIndex, QuestionAlreadyResolved, SessionAlreadyCompleted) as exc:
        _raise_http(exc)
    return _transition_resp(result)


@router.post("/interviews/{interview_id}/skip", response_model=TransitionResp)
def skip_question(
    interview_id: str,
    payload: SkipReq,
    services: ServiceContainer = Depends(get_services),
) -> TransitionResp:
    try:
        result = services.sessions.skip(interview_id, payload.question_index)
    except (SessionNotFound, InvalidQuestionIndex, QuestionAlreadyResolved, SessionAlreadyCompleted) as exc:
        _raise_http(exc)
    return _transition_resp(result)


@router.post("/interviews/{interview_id}/finalize", response_model=InterviewSession)
def finalize_interview(interview_id: str, services: ServiceContainer = Depends(get_services)) -> InterviewSession:
    try:
        return services.sessions.finalize(interview_id)
    except (SessionNotFound, SessionIncomplete) as exc:
        _raise_http(exc)
