import gc
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from candidate_management import Candidate, CandidateNotFound
from interview_session import (
    QuestionAlreadyResolved,
    SessionAlreadyInProgress,
    SessionIncomplete,
    SessionNotFound,
)
from interview_session.interview_session import InterviewEngine
from interview_session.models import SKIP_RATIONALE
from question_bank import QuestionGenerator, QuestionSetBuilder
from services.finalizer import SessionFinalizer
from services.scoring import ScoreResult, ScoringEngine


def test_start_session_builds_battery(make_service, candidate) -> None:
    service = make_service()
    session = service.start_session(candidate.id)

    assert session.candidate_id == candidate.id
    assert len(session.questions) == 6
    assert session.role == "Full Stack (React/Node)"
    assert service.get(session.id).id == session.id


def test_second_session_reports_existing_id(make_service, candidate) -> None:
    service = make_service()
    first = service.start_session(candidate.id)

    with pytest.raises(SessionAlreadyInProgress) as excinfo:
        service.start_session(candidate.id)

    assert excinfo.value.session_id == first.id
    assert len(service.list(candidate.id)) == 1


def test_new_session_allowed_after_completion(make_service, candidate) -> None:
    service = make_service()
    first = service.start_session(candidate.id)
    for index in range(6):
        service.skip(first.id, index)

    second = service.start_session(candidate.id)

    assert second.id != first.id
    assert service.get(first.id).status == "completed"


def test_unknown_candidate_and_session(make_service) -> None:
    service = make_service()
    with pytest.raises(CandidateNotFound):
        service.start_session("missing")
    with pytest.raises(SessionNotFound):
        service.get("missing")


def test_concurrent_starts_open_one_session(make_service, candidate) -> None:
    service = make_service()
    barrier = threading.Barrier(8)

    def _start():
        barrier.wait()
        try:
            return service.start_session(candidate.id).id
        except SessionAlreadyInProgress as exc:
            return exc

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(lambda _: _start(), range(8)))

    created = [item for item in outcomes if isinstance(item, str)]
    rejected = [item for item in outcomes if isinstance(item, SessionAlreadyInProgress)]
    assert len(created) == 1
    assert len(rejected) == 7
    assert all(item.session_id == created[0] for item in rejected)


class _SlowScoring(ScoringEngine):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0
        self._gate = threading.Lock()

    def score(self, question_text, ideal_answer, candidate_answer, difficulty, *, use_assist=None):
        with self._gate:
            self.calls += 1
        threading.Event().wait(0.05)
        return ScoreResult(score=7, rationale="heuristic stub")


def test_concurrent_answers_have_one_winner(make_service, candidate) -> None:
    scoring = _SlowScoring()
    service = make_service(engine=InterviewEngine(scoring, SessionFinalizer()))
    session = service.start_session(candidate.id)
    barrier = threading.Barrier(5)

    def _answer(text: str):
        barrier.wait()
        try:
            return service.submit_answer(session.id, 0, text).score
        except QuestionAlreadyResolved as exc:
            return exc

    with ThreadPoolExecutor(max_workers=5) as pool:
        outcomes = list(pool.map(_answer, [f"answer {n}" for n in range(5)]))

    assert sum(1 for item in outcomes if item == 7) == 1
    assert sum(1 for item in outcomes if isinstance(item, QuestionAlreadyResolved)) == 4
    assert scoring.calls == 1
    stored = service.get(session.id).questions[0]
    assert stored.score == 7
    assert stored.answer.startswith("answer ")


def test_full_run_finalizes_with_candidate_name(make_service, candidate) -> None:
    service = make_service()
    session = service.start_session(candidate.id)
    for index in range(6):
        result = service.submit_answer(session.id, index, "")
    assert result.completed is True

    stored = service.get(session.id)
    assert stored.status == "completed"
    assert stored.final_score == 0.0
    assert stored.summary.startswith("Interview Summary for Jane A. Doe: Answered 6/6")


def test_current_question_walks_the_battery(make_service, candidate) -> None:
    service = make_service()
    session = service.start_session(candidate.id)

    first = service.current_question(session.id)
    assert first.index == 0
    assert first.question.difficulty == "Easy"

    service.skip(session.id, 0)
    assert service.current_question(session.id).index == 1

    for index in range(1, 6):
        service.skip(session.id, index)
    done = service.current_question(session.id)
    assert done.index is None
    assert done.question is None
    assert done.status == "completed"
    assert done.final_score == 0.0


def test_finalize_requires_resolution_and_is_idempotent(make_service, candidate) -> None:
    service = make_service()
    session = service.start_session(candidate.id)
    with pytest.raises(SessionIncomplete):
        service.finalize(session.id)

    for index in range(6):
        service.skip(session.id, index)
    first = service.finalize(session.id)
    second = service.finalize(session.id)
    assert first.model_dump() == second.model_dump()


def test_missing_candidate_record_does_not_block_finalize(make_service, candidate_repo) -> None:
    service = make_service()
    person = Candidate(name="Temp Person")
    candidate_repo.save(person)
    session = service.start_session(person.id)
    candidate_repo._items.pop(person.id)

    for index in range(6):
        service.skip(session.id, index)

    assert service.get(session.id).summary.startswith("Interview Summary for Candidate")


def test_resolved_but_unfinalized_session_reports_completed(make_service, candidate, session_repo) -> None:
    service = make_service()
    session = service.start_session(candidate.id)
    session.questions = [
        question.model_copy(update={"timed_out": True, "score": 0, "rationale": SKIP_RATIONALE})
        for question in session.questions
    ]
    session_repo.save(session)

    current = service.current_question(session.id)

    assert service.get(session.id).status == "in_progress"
    assert current.status == "completed"
    assert current.index is None
    assert current.final_score is None
    assert service.finalize(session.id).status == "completed"


def test_lock_tables_do_not_grow_with_finished_work(make_service, candidate) -> None:
    service = make_service()
    for _ in range(3):
        session = service.start_session(candidate.id)
        for index in range(6):
            service.skip(session.id, index)
    gc.collect()

    assert len(service._session_locks) == 0
    assert len(service._candidate_locks) == 0


def test_start_session_uses_generated_battery_for_role(make_service, candidate, make_assist, fake_assistant) -> None:
    tiers = ("Easy", "Easy", "Medium", "Medium", "Hard", "Hard")
    reply = {
        "questions": [
            {"text": f"Spark {tier} {index}?", "difficulty": tier, "idealAnswer": "Use partitions."}
            for index, tier in enumerate(tiers)
        ]
    }
    assistant = fake_assistant(reply)
    generator = QuestionGenerator(QuestionSetBuilder(), assist=make_assist(assistant))
    service = make_service(generator=generator)

    session = service.start_session(candidate.id, role="Data Engineer")

    assert session.role == "Data Engineer"
    assert session.questions[0].text == "Spark Easy 0?"
    assert "Data Engineer" in assistant.prompts[0]
