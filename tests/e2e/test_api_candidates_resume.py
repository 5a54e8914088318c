import io
import zipfile

import pytest
from fastapi.testclient import TestClient

from api_server import create_app
from candidate_management import InMemoryCandidateStore
from config import load_settings
from interview_session.store import InMemorySessionStore
from resume_extraction import DOCX_MIME, PDF_MIME

_W = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


def _docx(*lines: str) -> bytes:
    body = "".join(f"<w:p><w:r><w:t>{line}</w:t></w:r></w:p>" for line in lines)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("word/document.xml", f'<w:document xmlns:w="{_W}"><w:body>{body}</w:body></w:document>')
    return buffer.getvalue()


@pytest.fixture
def client(settings, app_config):
    app = create_app(
        settings,
        app_config,
        candidate_repo=InMemoryCandidateStore(),
        session_repo=InMemorySessionStore(),
    )
    with TestClient(app) as test_client:
        yield test_client


def test_create_and_fetch_candidate(client) -> None:
    resp = client.post("/api/candidates", json={"name": "Jane A. Doe"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Jane A. Doe"
    assert body["missingFields"] == ["email", "phone"]

    fetched = client.get(f"/api/candidates/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == body["id"]


def test_patch_updates_only_given_fields(client) -> None:
    created = client.post("/api/candidates", json={"name": "Jane", "email": "jane@example.com"}).json()
    resp = client.patch(f"/api/candidates/{created['id']}", json={"phone": "+1 555 123 4567"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Jane"
    assert body["email"] == "jane@example.com"
    assert body["phone"] == "+1 555 123 4567"
    assert body["missingFields"] == []


def test_unknown_candidate_is_404(client) -> None:
    assert client.get("/api/candidates/nope").status_code == 404
    assert client.patch("/api/candidates/nope", json={"name": "X"}).status_code == 404


def test_resume_upload_backfills_missing_fields(client) -> None:
    created = client.post("/api/candidates", json={"name": "Janet Doe"}).json()
    document = _docx(
        "Jane A. Doe",
        "jane.doe@example.com",
        "+1 (555) 123-4567",
        "Summary",
        "Senior engineer with 5 years of experience.",
    )

    resp = client.post(
        f"/api/candidates/{created['id']}/resume",
        files={"file": ("jane.docx", document, DOCX_MIME)},
    )

    assert resp.status_code == 200
    body = resp.json()
    candidate = body["candidate"]
    assert candidate["name"] == "Janet Doe"
    assert candidate["email"] == "jane.doe@example.com"
    assert candidate["phone"] == "+1 (555) 123-4567"
    assert candidate["resumeSummary"].startswith("Senior engineer with 5 years")
    assert candidate["resumeFileName"] == "jane.docx"
    assert candidate["missingFields"] == []
    assert body["inferredName"] == "Jane A. Doe"
    assert "summary" in body["sections"]


def test_resume_upload_rejects_other_types(client) -> None:
    created = client.post("/api/candidates", json={}).json()
    resp = client.post(
        f"/api/candidates/{created['id']}/resume",
        files={"file": ("notes.txt", b"plain text", "text/plain")},
    )
    assert resp.status_code == 400
    assert "PDF or DOCX" in resp.json()["detail"]


def test_resume_upload_rejects_large_files(tmp_path, app_config) -> None:
    settings = load_settings(DB_PATH=str(tmp_path / "db.sqlite"), RESUME_MAX_BYTES=64)
    app = create_app(settings, app_config, candidate_repo=InMemoryCandidateStore(), session_repo=InMemorySessionStore())
    with TestClient(app) as client:
        created = client.post("/api/candidates", json={}).json()
        resp = client.post(
            f"/api/candidates/{created['id']}/resume",
            files={"file": ("big.pdf", b"%PDF-" + b"0" * 200, PDF_MIME)},
        )
    assert resp.status_code == 413


def test_resume_upload_reports_unreadable_documents(client) -> None:
    created = client.post("/api/candidates", json={}).json()
    resp = client.post(
        f"/api/candidates/{created['id']}/resume",
        files={"file": ("broken.pdf", b"definitely not a pdf", PDF_MIME)},
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]
