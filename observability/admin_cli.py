"""Lightweight CLI helpers for inspecting stored interviews and candidates."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from candidate_management import CandidateStore
from config import Settings, load_settings
from interview_session.store import SessionStore


def tail_sessions(settings: Settings, limit: int = 20) -> List[str]:
    store = SessionStore(Path(settings.DB_PATH))
    lines: List[str] = []
    for session in store.list()[:limit]:
        progress = session.progress()
        score = "-" if session.final_score is None else f"{session.final_score:.1f}"
        lines.append(
            f"[{session.created_at:%Y-%m-%d %H:%M:%S}] {session.id} candidate={session.candidate_id} "
            f"status={session.status} answered={progress.answered} timed_out={progress.timed_out} "
            f"remaining={progress.remaining} score={score}"
        )
    return lines


def tail_candidates(settings: Settings, limit: int = 20) -> List[str]:
    store = CandidateStore(Path(settings.DB_PATH))
    lines: List[str] = []
    for candidate in store.list()[:limit]:
        missing = ",".join(candidate.missing_fields) or "none"
        lines.append(
            f"[{candidate.created_at:%Y-%m-%d %H:%M:%S}] {candidate.id} name={candidate.name or '-'} "
            f"resume={candidate.resume_file_name or '-'} missing={missing}"
        )
    return lines


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail-sessions", type=int, help="Show the latest interview sessions")
    parser.add_argument("--tail-candidates", type=int, help="Show the latest candidates")
    parser.add_argument("--db", help="SQLite path (defaults to DB_PATH)")
    args = parser.parse_args(argv)

    settings = load_settings(DB_PATH=args.db) if args.db else load_settings()
    if args.tail_sessions:
        print("\n".join(tail_sessions(settings, args.tail_sessions)))
    if args.tail_candidates:
        print("\n".join(tail_candidates(settings, args.tail_candidates)))


if __name__ == "__main__":
    main()
