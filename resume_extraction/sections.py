"""Normalization, heading-based segmentation and summary selection."""
from __future__ import annotations

import re
from typing import Dict, List

START_SECTION = "_start"

# Alphabetic-only, lower-cased heading line -> canonical section key.
HEADINGS: Dict[str, str] = {
    "professionalsummary": "professional summary",
    "careersummary": "professional summary",
    "executivesummary": "professional summary",
    "summary": "summary",
    "objective": "objective",
    "careerobjective": "objective",
    "profile": "about me",
    "professionalprofile": "about me",
    "aboutme": "about me",
    "experience": "experience",
    "workexperience": "experience",
    "professionalexperience": "experience",
    "employment": "experience",
    "employmenthistory": "experience",
    "workhistory": "experience",
    "education": "education",
    "project": "projects",
    "projects": "projects",
    "personalprojects": "projects",
    "academicprojects": "projects",
    "skill": "skills",
    "skills": "skills",
    "technicalskills": "skills",
    "keyskills": "skills",
    "coreskills": "skills",
    "certification": "certifications",
    "certifications": "certifications",
    "certificates": "certifications",
    "licensesandcertifications": "certifications",
    "achievement": "achievements",
    "achievements": "achievements",
    "award": "achievements",
    "awards": "achievements",
    "honorsandawards": "achievements",
    "awardsandachievements": "achievements",
    "publication": "publications",
    "publications": "publications",
    "interests": "interests",
    "hobbies": "interests",
    "hobbiesandinterests": "interests",
    "contact": "contact",
    "contactinformation": "contact",
    "contactdetails": "contact",
    "personaldetails": "contact",
    "personalinformation": "contact",
}

SUMMARY_PRIORITY = ("professional summary", "summary", "objective", "about me")

_NON_ALPHA = re.compile(r"[^a-z]")
_INLINE_SPACE = re.compile(r"[ \t\f\v\u00a0]+")
_EDGE_SPACE = re.compile(r" *\n *")
_BLANK_RUN = re.compile(r"\n{3,}")

_CONTACT_LINE = [
    re.compile(r"@"),
    re.compile(r"http", re.IGNORECASE),
    re.compile(r"www\.", re.IGNORECASE),
    re.compile(r"^\+?\d[\d\s\-().]{7,}\d$"),
    re.compile(r"address", re.IGNORECASE),
    re.compile(r"linkedin|github|portfolio", re.IGNORECASE),
    re.compile(r"email", re.IGNORECASE),
]


def normalize_text(text: str) -> str:
    text = text.replace("\r", "")
    text = _INLINE_SPACE.sub(" ", text)
    text = _EDGE_SPACE.sub("\n", text)
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip()


def heading_key(line: str) -> str | None:
    norm = _NON_ALPHA.sub("", line.lower())
    if not norm:
        return None
    return HEADINGS.get(norm)


def split_sections(text: str) -> Dict[str, str]:
    """Group lines under the most recent heading; repeated headings accumulate."""

    blocks: List[tuple[str, List[str]]] = []
    current_key = START_SECTION
    current: List[str] = []
    for line in text.split("\n"):
        key = heading_key(line.strip())
        if key is not None:
            blocks.append((current_key, current))
            current_key, current = key, []
        else:
            current.append(line)
    blocks.append((current_key, current))

    sections: Dict[str, str] = {}
    for key, lines in blocks:
        body = normalize_text("\n".join(lines))
        if not body:
            continue
        sections[key] = f"{sections[key]}\n\n{body}" if key in sections else body
    return sections


def pick_summary(sections: Dict[str, str]) -> str:
    for key in SUMMARY_PRIORITY:
        body = sections.get(key, "").strip()
        if body:
            return body
    return ""


def fallback_summary(text: str, *, max_lines: int = 12, max_words: int = 120) -> str:
    """Opening lines of the document that are not contact details, cut to ``max_words``."""

    lines = [line.strip() for line in text.split("\n")]
    kept = [line for line in lines if line and not any(rx.search(line) for rx in _CONTACT_LINE)]
    words = " ".join(kept[:max_lines]).split()
    return " ".join(words[:max_words]).strip()


__all__ = [
    "HEADINGS",
    "START_SECTION",
    "SUMMARY_PRIORITY",
    "fallback_summary",
    "heading_key",
    "normalize_text",
    "pick_summary",
    "split_sections",
]
