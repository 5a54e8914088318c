"""Decode PDF and DOCX containers into plain text."""
from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import Literal, Optional

import docx2txt
from pypdf import PdfReader

from .errors import ExtractionFailed, UnsupportedFileType

logger = logging.getLogger(__name__)

DocumentKind = Literal["pdf", "docx"]

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_BY_EXTENSION = {".pdf": "pdf", ".docx": "docx"}
_BY_MIME = {PDF_MIME: "pdf", DOCX_MIME: "docx"}


def detect_kind(file_name: str, content_type: Optional[str] = None) -> DocumentKind:
    """Classify by extension; fall back to the declared MIME type only when there is no extension."""

    suffix = PurePath(file_name or "").suffix.lower()
    if suffix:
        kind = _BY_EXTENSION.get(suffix)
    else:
        kind = _BY_MIME.get((content_type or "").split(";")[0].strip().lower())
    if kind is None:
        raise UnsupportedFileType(file_name, content_type)
    return kind  # type: ignore[return-value]


def pdf_to_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            raise ExtractionFailed("Failed to extract text from PDF. It is password-protected.")
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except ExtractionFailed:
        raise
    except Exception as exc:  # noqa: BLE001 - pypdf surfaces broken structure as assorted errors
        logger.warning("PDF decode failed: %r", exc)
        raise ExtractionFailed(
            "Failed to extract text from PDF. It may be corrupted, password-protected, or image-based."
        ) from exc
    return "\n\n".join(page for page in pages if page)


def docx_to_text(data: bytes) -> str:
    try:
        return docx2txt.process(io.BytesIO(data)) or ""
    except Exception as exc:  # noqa: BLE001 - bad zips and malformed XML raise assorted errors
        logger.warning("DOCX decode failed: %r", exc)
        raise ExtractionFailed("Failed to extract text from DOCX. The file may be corrupted.") from exc


def decode_document(data: bytes, kind: DocumentKind) -> str:
    if kind == "pdf":
        return pdf_to_text(data)
    return docx_to_text(data)


__all__ = ["DocumentKind", "DOCX_MIME", "PDF_MIME", "decode_document", "detect_kind", "docx_to_text", "pdf_to_text"]
