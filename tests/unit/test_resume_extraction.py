import io
import zipfile
from xml.sax.saxutils import escape

import pytest
from pypdf import PdfWriter

from config import ResumeSettings
from resume_extraction import (
    DOCX_MIME,
    PDF_MIME,
    ExtractionFailed,
    FileTooLarge,
    ResumeExtractor,
    UnsupportedFileType,
    detect_kind,
)
from resume_extraction.fields import find_phone, infer_name
from resume_extraction.sections import fallback_summary, normalize_text, split_sections

JANE = (
    "Jane A. Doe\n"
    "jane.doe@example.com\n"
    "+1 (555) 123-4567\n"
    "\n"
    "Summary\n"
    "Senior engineer with 5 years of experience building distributed systems.\n"
    "\n"
    "Experience\n"
    "Acme Corp, Staff Engineer\n"
    "\n"
    "Skills\n"
    "Python, Go, Kubernetes\n"
)

_W = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


def _docx(lines) -> bytes:
    paragraphs = "".join(f"<w:p><w:r><w:t>{escape(line)}</w:t></w:r></w:p>" for line in lines)
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{_W}"><w:body>{paragraphs}</w:body></w:document>'
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", '<?xml version="1.0"?><Types/>')
        archive.writestr("word/document.xml", document)
    return buffer.getvalue()


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_jane_doe_fields_and_summary() -> None:
    result = ResumeExtractor().analyze(JANE)

    assert result.inferred_name == "Jane A. Doe"
    assert result.inferred_email == "jane.doe@example.com"
    assert "".join(ch for ch in result.inferred_phone if ch.isdigit()) == "15551234567"
    assert result.summary.startswith("Senior engineer with 5 years")
    assert set(result.sections) >= {"_start", "summary", "experience", "skills"}
    assert result.raw_text_length == len(normalize_text(JANE))


def test_result_is_frozen() -> None:
    result = ResumeExtractor().analyze(JANE)
    with pytest.raises(Exception):
        result.summary = "changed"


def test_docx_document_is_extracted() -> None:
    data = _docx(JANE.strip().split("\n"))
    result = ResumeExtractor().extract(data, "jane.docx", DOCX_MIME)

    assert result.inferred_name == "Jane A. Doe"
    assert result.inferred_email == "jane.doe@example.com"
    assert result.summary.startswith("Senior engineer with 5 years")


def test_extension_wins_over_declared_mime() -> None:
    assert detect_kind("resume.docx", PDF_MIME) == "docx"
    assert detect_kind("resume.PDF", None) == "pdf"
    assert detect_kind("resume", PDF_MIME) == "pdf"
    assert detect_kind("resume", f"{DOCX_MIME}; charset=binary") == "docx"


@pytest.mark.parametrize(
    "file_name, content_type",
    [("resume.txt", "text/plain"), ("resume.doc", "application/msword"), ("resume.txt", PDF_MIME), ("resume", None)],
)
def test_unsupported_types_rejected_before_decoding(file_name, content_type) -> None:
    with pytest.raises(UnsupportedFileType):
        ResumeExtractor().extract(b"%PDF-1.4 whatever", file_name, content_type)


def test_oversized_upload_rejected() -> None:
    extractor = ResumeExtractor(max_bytes=16)
    with pytest.raises(FileTooLarge) as excinfo:
        extractor.extract(b"x" * 17, "resume.pdf", PDF_MIME)
    assert excinfo.value.limit == 16


def test_empty_upload_fails() -> None:
    with pytest.raises(ExtractionFailed, match="empty"):
        ResumeExtractor().extract(b"", "resume.pdf")


def test_corrupt_pdf_fails_with_readable_cause() -> None:
    with pytest.raises(ExtractionFailed) as excinfo:
        ResumeExtractor().extract(b"this is not a pdf", "resume.pdf", PDF_MIME)
    assert excinfo.value.cause


def test_corrupt_docx_fails() -> None:
    with pytest.raises(ExtractionFailed):
        ResumeExtractor().extract(b"PK\x03\x04 broken zip", "resume.docx")


def test_pdf_without_text_fails() -> None:
    with pytest.raises(ExtractionFailed, match="No text content"):
        ResumeExtractor().extract(_blank_pdf(), "scan.pdf", PDF_MIME)


def test_normalize_collapses_whitespace() -> None:
    raw = "Jane  Doe\t\r\n\n\n\n  Summary   \nLine   two  "
    assert normalize_text(raw) == "Jane Doe\n\nSummary\nLine two"


def test_repeated_headings_accumulate() -> None:
    text = "Experience\nFirst job\nEducation\nBSc\nWork Experience\nSecond job"
    sections = split_sections(text)
    assert sections["experience"] == "First job\n\nSecond job"
    assert sections["education"] == "BSc"


def test_inline_label_is_not_a_heading() -> None:
    sections = split_sections("Jane Doe\nSkills: Python, SQL")
    assert "skills" not in sections
    assert "Skills: Python, SQL" in sections["_start"]


def test_summary_priority_prefers_professional_summary() -> None:
    text = "Objective\nGet hired\nProfessional Summary\nBuilder of things\nProfile\nAbout text"
    assert ResumeExtractor().analyze(text).summary == "Builder of things"


def test_profile_maps_to_about_me() -> None:
    result = ResumeExtractor().analyze("John Smith\nProfile\nCurious backend developer")
    assert result.sections["about me"] == "Curious backend developer"
    assert result.summary == "Curious backend developer"


def test_fallback_summary_skips_contact_lines() -> None:
    text = "\n".join(
        [
            "John Smith",
            "john@example.com",
            "+44 20 7946 0958",
            "linkedin.com/in/johnsmith",
            "Backend developer focused on payments.",
        ]
    )
    result = ResumeExtractor().analyze(text)
    assert result.summary == "John Smith Backend developer focused on payments."


def test_fallback_summary_word_limit() -> None:
    text = "\n".join(f"word{index} filler text" for index in range(200))
    summary = fallback_summary(text, max_lines=12, max_words=10)
    assert len(summary.split()) == 10


def test_resume_settings_limit_fallback() -> None:
    extractor = ResumeExtractor(ResumeSettings(summary_max_words=3, fallback_line_count=1))
    assert extractor.analyze("John Smith\nSecond line here").summary == "John Smith"


def test_phone_requires_nine_digits() -> None:
    assert find_phone("Call 555-1234 today") is None
    assert find_phone("Tel: 020 7946 0958") == "020 7946 0958"


def test_name_strict_then_loose() -> None:
    assert infer_name("RESUME\nMary-Jane O'Neil\nmary@example.com") == "Mary-Jane O'Neil"
    assert infer_name("jsmith\nSoftware engineer with a long history of work") == "jsmith"
    assert infer_name("") is None


def test_no_fields_when_nothing_matches() -> None:
    result = ResumeExtractor().analyze("Experience\n" + "lorem ipsum dolor sit amet " * 3)
    assert result.inferred_email is None
    assert result.inferred_phone is None
