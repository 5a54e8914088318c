"""Pattern heuristics for the identity fields of a resume."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

EMAIL = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
PHONE = re.compile(r"\+?\d[\d \t\-().]{7,}\d")
MIN_PHONE_DIGITS = 9

_CAPITALIZED = re.compile(r"[A-Z][a-z]*(?:[-'][A-Z]?[a-z]+)*")
_INITIAL = re.compile(r"[A-Z]\.?")
_DIGIT_LEADING = re.compile(r"^\d")
_NAME_BLOCKERS = ("@", "http", "www.", ":")
_NAME_BLOCKER_WORDS = ("resume", "curriculum")


def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def find_email(text: str) -> Optional[str]:
    match = EMAIL.search(text)
    return match.group(0).strip() if match else None


def find_phone(text: str) -> Optional[str]:
    for match in PHONE.finditer(text):
        candidate = match.group(0).strip()
        if sum(ch.isdigit() for ch in candidate) >= MIN_PHONE_DIGITS:
            return candidate
    return None


def _name_like(words: Iterable[str]) -> bool:
    return all(_CAPITALIZED.fullmatch(word) or _INITIAL.fullmatch(word) for word in words)


def infer_name(text: str) -> Optional[str]:
    lines = _lines(text)
    for line in lines:
        lowered = line.lower()
        if len(line) > 50 or _DIGIT_LEADING.match(line):
            continue
        if any(token in line for token in _NAME_BLOCKERS) or any(word in lowered for word in _NAME_BLOCKER_WORDS):
            continue
        words = line.split()
        if 2 <= len(words) <= 4 and _name_like(words):
            return line

    for line in lines:
        if len(line) <= 30 and "@" not in line and "resume" not in line.lower() and len(line.split()) <= 4:
            return line
    return None


__all__ = ["EMAIL", "PHONE", "MIN_PHONE_DIGITS", "find_email", "find_phone", "infer_name"]
