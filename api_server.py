from __future__ import annotations  # FastAPI server exposing candidate intake and interview sessions

import logging
import random
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from candidate_management import CandidateRepository
from config import AppConfig, Settings, load_config, load_settings
from interview_session.store import SessionRepository
from llm_gateway import Assistant
from services.bootstrap import build_services

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    app_config: Optional[AppConfig] = None,
    *,
    candidate_repo: Optional[CandidateRepository] = None,
    session_repo: Optional[SessionRepository] = None,
    assistant: Optional[Assistant] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """Build an application around explicitly supplied settings and collaborators."""

    settings = settings or load_settings()
    app_config = app_config or load_config(Path(settings.APP_CONFIG_PATH))
    services = build_services(
        settings,
        app_config,
        candidate_repo=candidate_repo,
        session_repo=session_repo,
        assistant=assistant,
        rng=rng,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            services.close()

    app = FastAPI(title="Interview Session API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.services = services
    app.include_router(router)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    logger.info("Interview API ready db=%s config=%s", settings.DB_PATH, settings.APP_CONFIG_PATH)
    return app


def main() -> None:  # Run with uvicorn using the application factory
    import uvicorn

    uvicorn.run("api_server:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
