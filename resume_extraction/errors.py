"""Hard errors raised while turning an uploaded resume into fields."""
from __future__ import annotations


class ResumeExtractionError(RuntimeError):
    pass


class UnsupportedFileType(ResumeExtractionError):
    def __init__(self, file_name: str, content_type: str | None = None) -> None:
        super().__init__("Unsupported file type. Only PDF or DOCX are allowed.")
        self.file_name = file_name
        self.content_type = content_type


class FileTooLarge(ResumeExtractionError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"File is {size} bytes; the limit is {limit} bytes")
        self.size = size
        self.limit = limit


class ExtractionFailed(ResumeExtractionError):
    """The document could not be read; ``cause`` is safe to show to a user."""

    def __init__(self, cause: str) -> None:
        super().__init__(cause)
        self.cause = cause


__all__ = ["ResumeExtractionError", "UnsupportedFileType", "FileTooLarge", "ExtractionFailed"]
