"""Wires repositories, assistants and engine components from explicit config."""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Dict, Optional

from candidate_management import CandidateRepository, CandidateStore
from config import QUESTIONS_TARGET, SCORING_TARGET, SUMMARY_TARGET, AppConfig, Settings, resolve_route
from interview_session.interview_session import InterviewEngine
from interview_session.store import SessionRepository, SessionStore
from llm_gateway import Assistant, BoundedAssist, LlmAssistant
from question_bank import QuestionGenerator, QuestionSetBuilder
from resume_extraction import ResumeExtractor
from services.candidates import CandidateService
from services.finalizer import SessionFinalizer
from services.scoring import ScoringEngine
from services.sessions import SessionService

logger = logging.getLogger(__name__)


class ServiceContainer:  # Everything the HTTP layer needs, built once per app
    def __init__(
        self,
        settings: Settings,
        app_config: AppConfig,
        candidates: CandidateService,
        sessions: SessionService,
        assists: list[BoundedAssist],
    ) -> None:
        self.settings = settings
        self.app_config = app_config
        self.candidates = candidates
        self.sessions = sessions
        self._assists = assists

    def close(self) -> None:
        for assist in self._assists:
            assist.shutdown()


def _bounded(
    app_config: AppConfig,
    target: str,
    settings: Settings,
    override: Optional[Assistant],
    by_route: Dict[str, LlmAssistant],
) -> Optional[BoundedAssist]:
    if override is not None:
        return BoundedAssist(override, timeout_s=settings.ASSIST_TIMEOUT_S)
    route = resolve_route(app_config, target)
    if route is None:
        logger.info("No assist route configured for %s; local path only", target)
        return None
    # One assistant per route; its lock serializes sequential routes.
    assistant = by_route.get(route.name)
    if assistant is None:
        assistant = by_route[route.name] = LlmAssistant(route)
    return BoundedAssist(assistant, timeout_s=settings.ASSIST_TIMEOUT_S)


def build_services(
    settings: Settings,
    app_config: AppConfig,
    *,
    candidate_repo: Optional[CandidateRepository] = None,
    session_repo: Optional[SessionRepository] = None,
    assistant: Optional[Assistant] = None,
    rng: Optional[random.Random] = None,
) -> ServiceContainer:
    db_path = Path(settings.DB_PATH)
    candidate_repo = candidate_repo or CandidateStore(db_path)
    session_repo = session_repo or SessionStore(db_path)

    by_route: Dict[str, LlmAssistant] = {}
    scoring_assist = _bounded(app_config, SCORING_TARGET, settings, assistant, by_route)
    summary_assist = _bounded(app_config, SUMMARY_TARGET, settings, assistant, by_route)
    questions_assist = _bounded(app_config, QUESTIONS_TARGET, settings, assistant, by_route)

    scoring = ScoringEngine(app_config.scoring, assist=scoring_assist, assist_by_default=settings.ASSIST_SCORING)
    finalizer = SessionFinalizer(assist=summary_assist, assist_by_default=settings.ASSIST_SUMMARY)
    engine = InterviewEngine(scoring, finalizer)
    builder = QuestionSetBuilder(app_config.interview, rng=rng)
    generator = QuestionGenerator(builder, assist=questions_assist, assist_by_default=settings.ASSIST_QUESTIONS)
    extractor = ResumeExtractor(app_config.resume, max_bytes=settings.RESUME_MAX_BYTES)

    return ServiceContainer(
        settings=settings,
        app_config=app_config,
        candidates=CandidateService(candidate_repo, extractor),
        sessions=SessionService(
            session_repo,
            candidate_repo,
            engine,
            builder,
            generator=generator,
            default_role=settings.DEFAULT_ROLE,
        ),
        assists=[assist for assist in (scoring_assist, summary_assist, questions_assist) if assist is not None],
    )


__all__ = ["ServiceContainer", "build_services"]
