import random
import sys
import threading
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from candidate_management import Candidate, InMemoryCandidateStore
from config import AppConfig, load_settings
from interview_session.interview_session import InterviewEngine
from interview_session.store import InMemorySessionStore
from llm_gateway import BoundedAssist
from question_bank import PoolQuestion, QuestionGenerator, QuestionSetBuilder
from services.finalizer import SessionFinalizer
from services.scoring import ScoringEngine
from services.sessions import SessionService


class FakeAssistant:
    """Replays canned replies (or raises them) and records prompts."""

    def __init__(self, *replies: Any, delay_s: float = 0.0) -> None:
        self.replies: List[Any] = list(replies)
        self.prompts: List[str] = []
        self.delay_s = delay_s
        self._release = threading.Event()

    def complete(self, prompt: str, schema):
        self.prompts.append(prompt)
        if self.delay_s:
            self._release.wait(self.delay_s)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt, schema)
        return reply

    def release(self) -> None:
        self._release.set()


@pytest.fixture
def settings(tmp_path):
    return load_settings(
        DB_PATH=str(tmp_path / "interviews.db"),
        APP_CONFIG_PATH=str(tmp_path / "missing_config.json"),
        ASSIST_SCORING=False,
        ASSIST_SUMMARY=False,
        ASSIST_QUESTIONS=False,
        ASSIST_TIMEOUT_S=0.5,
    )


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def small_pools():
    return {
        "Easy": [
            PoolQuestion(text="What is a closure in JavaScript?", ideal_answer="A function with its lexical scope."),
            PoolQuestion(text="Explain event bubbling in the DOM.", ideal_answer="Events propagate up the tree."),
        ],
        "Medium": [
            PoolQuestion(text="How does React reconciliation work?", ideal_answer="Virtual DOM diffing by keys."),
            PoolQuestion(text="Describe middleware in Express.", ideal_answer="Functions in the request pipeline."),
        ],
        "Hard": [
            PoolQuestion(text="Design a rate limiter for an API gateway.", ideal_answer="Token bucket in Redis."),
            PoolQuestion(text="Explain database sharding strategies.", ideal_answer="Range, hash and directory."),
        ],
    }


@pytest.fixture
def make_assist():
    created: List[BoundedAssist] = []

    def _make(assistant, timeout_s: float = 0.5) -> BoundedAssist:
        assist = BoundedAssist(assistant, timeout_s=timeout_s)
        created.append(assist)
        return assist

    yield _make
    for assist in created:
        assist.shutdown()


@pytest.fixture
def candidate_repo():
    return InMemoryCandidateStore()


@pytest.fixture
def session_repo():
    return InMemorySessionStore()


@pytest.fixture
def candidate(candidate_repo):
    person = Candidate(name="Jane A. Doe", email="jane.doe@example.com", phone="+1 555 123 4567")
    candidate_repo.save(person)
    return person


@pytest.fixture
def engine():
    return InterviewEngine(ScoringEngine(), SessionFinalizer())


@pytest.fixture
def make_service(candidate_repo, session_repo, small_pools):
    def _make(
        engine: Optional[InterviewEngine] = None,
        builder: Optional[QuestionSetBuilder] = None,
        generator: Optional[QuestionGenerator] = None,
    ) -> SessionService:
        return SessionService(
            session_repo,
            candidate_repo,
            engine or InterviewEngine(ScoringEngine(), SessionFinalizer()),
            builder or QuestionSetBuilder(rng=random.Random(7)),
            generator=generator,
            pools=small_pools,
        )

    return _make


@pytest.fixture
def fake_assistant() -> Callable[..., FakeAssistant]:
    return FakeAssistant
