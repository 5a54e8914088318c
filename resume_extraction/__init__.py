from __future__ import annotations  # Re-export resume extraction public API

from .decode import DOCX_MIME, PDF_MIME, detect_kind
from .errors import ExtractionFailed, FileTooLarge, ResumeExtractionError, UnsupportedFileType
from .extractor import ResumeExtractionResult, ResumeExtractor

__all__ = [
    "DOCX_MIME",
    "PDF_MIME",
    "detect_kind",
    "ExtractionFailed",
    "FileTooLarge",
    "ResumeExtractionError",
    "UnsupportedFileType",
    "ResumeExtractionResult",
    "ResumeExtractor",
]
