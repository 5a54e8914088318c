"""Resume field extraction: decode, normalize, segment, infer."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import ResumeSettings

from .decode import decode_document, detect_kind
from .errors import ExtractionFailed, FileTooLarge
from .fields import find_email, find_phone, infer_name
from .sections import fallback_summary, normalize_text, pick_summary, split_sections

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 2 * 1024 * 1024


class ResumeExtractionResult(BaseModel):  # Derived view of one uploaded document
    model_config = ConfigDict(frozen=True)

    raw_text_length: int = Field(ge=0)
    sections: Dict[str, str] = Field(default_factory=dict)
    inferred_name: Optional[str] = None
    inferred_email: Optional[str] = None
    inferred_phone: Optional[str] = None
    summary: str = ""


class ResumeExtractor:
    """Turns PDF/DOCX bytes into identity fields and a short summary.

    Deterministic for identical input bytes.  Type and size are checked before
    any decoding is attempted.
    """

    def __init__(self, settings: Optional[ResumeSettings] = None, *, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.settings = settings or ResumeSettings()
        self.max_bytes = max_bytes

    def extract(self, data: bytes, file_name: str, content_type: Optional[str] = None) -> ResumeExtractionResult:
        kind = detect_kind(file_name, content_type)
        if len(data) > self.max_bytes:
            raise FileTooLarge(len(data), self.max_bytes)
        if not data:
            raise ExtractionFailed("File is empty")
        text = normalize_text(decode_document(data, kind))
        if not text:
            raise ExtractionFailed("No text content found in the file.")
        result = self.analyze(text)
        logger.info(
            "Resume extracted file=%s kind=%s chars=%d sections=%s fields=%s",
            file_name,
            kind,
            result.raw_text_length,
            sorted(result.sections),
            [name for name, value in (
                ("name", result.inferred_name),
                ("email", result.inferred_email),
                ("phone", result.inferred_phone),
            ) if value],
        )
        return result

    def analyze(self, text: str) -> ResumeExtractionResult:
        """Run segmentation and inference over already-decoded text."""
        raw = normalize_text(text)
        sections = split_sections(raw)
        summary = pick_summary(sections) or fallback_summary(
            raw,
            max_lines=self.settings.fallback_line_count,
            max_words=self.settings.summary_max_words,
        )
        return ResumeExtractionResult(
            raw_text_length=len(raw),
            sections=sections,
            inferred_name=infer_name(raw),
            inferred_email=find_email(raw),
            inferred_phone=find_phone(raw),
            summary=summary,
        )


__all__ = ["DEFAULT_MAX_BYTES", "ResumeExtractionResult", "ResumeExtractor"]
