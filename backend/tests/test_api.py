import json

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_pipeline, get_scorer, get_text_generator
from api.router import limiter
from config import Settings, settings
from conftest import PDF_BYTES, VALID_SCORE_REPLY, FakeDecoder, FakeTextGenerator, upstream_failure
from main import app
from models.schemas.job import JobRequirements
from services.exceptions import EncryptedDocumentError
from services.pdf_parser import DocumentPipeline
from services.resume_scorer import ResumeScorer
from services.screening_store import InMemoryScreeningStore

client = TestClient(app)


@pytest.fixture(autouse=True)
def _no_rate_limit(monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)
    yield
    app.dependency_overrides.clear()


def _use(generator=None, decoder=None, store=None):
    generator = generator or FakeTextGenerator()
    config = Settings(gemini_api_key="test-key", batch_min_interval_seconds=0)
    app.dependency_overrides[get_scorer] = lambda: ResumeScorer(generator, config, store)
    app.dependency_overrides[get_pipeline] = lambda: DocumentPipeline(decoder=decoder or FakeDecoder())
    return generator


def _pdf(name="resume.pdf", content=PDF_BYTES):
    return {"resume_file": (name, content, "application/pdf")}


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "gemini_configured" in data


# --- Uploads ---


def test_extract_rejects_non_pdf():
    _use()
    response = client.post(
        "/resumes/extract",
        files={"resume_file": ("resume.txt", b"not a pdf", "text/plain")},
    )
    assert response.status_code == 400


def test_extract_rejects_empty_file():
    _use()
    response = client.post("/resumes/extract", files=_pdf(content=b""))
    assert response.status_code == 400


def test_extract_resume():
    _use()
    response = client.post("/resumes/extract", files=_pdf())
    assert response.status_code == 200
    data = response.json()
    assert data["document"]["filename"] == "resume.pdf"
    assert data["basic_info"]["candidate_name"] == "John A. Smith"
    assert data["basic_info"]["email"] == "john.smith@example.com"
    assert "python" in data["skills"]
    assert data["experience"]["companies"] == ["Acme Technologies", "Globex Corp"]


def test_extract_invalid_signature():
    _use()
    response = client.post("/resumes/extract", files=_pdf(content=b"GIF89a" + b"0" * 2048))
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "invalid_format"
    assert data["message"] == "Invalid PDF signature"
    assert data["details"]["filename"] == "resume.pdf"


def test_extract_encrypted():
    _use(decoder=FakeDecoder(error=EncryptedDocumentError("PDF is password protected or encrypted")))
    response = client.post("/resumes/extract", files=_pdf())
    assert response.status_code == 400
    assert response.json()["error"] == "encrypted"


# --- Scoring ---


def test_score_resume():
    generator = _use(FakeTextGenerator([VALID_SCORE_REPLY]))
    response = client.post(
        "/resumes/score",
        files=_pdf(),
        data={"job_requirements": json.dumps({"title": "Backend Engineer", "required_skills": ["Python"]})},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["overall_score"] == 82
    assert data["candidate_name"] == "John A. Smith"
    assert data["keywords_matched"] == 3
    assert "Title: Backend Engineer" in generator.calls[0]["user_prompt"]


def test_score_resume_bad_job_requirements():
    _use()
    response = client.post("/resumes/score", files=_pdf(), data={"job_requirements": "{not json"})
    assert response.status_code == 400


def test_score_resume_upstream_failure():
    _use(FakeTextGenerator([upstream_failure()]))
    response = client.post("/resumes/score", files=_pdf())
    assert response.status_code == 502
    data = response.json()
    assert data["error"] == "external_service"
    assert data["message"] == "Upstream service unavailable"


def test_upstream_failure_details_in_debug(monkeypatch):
    monkeypatch.setattr(settings, "debug", True)
    _use(FakeTextGenerator([upstream_failure()]))
    response = client.post("/resumes/score", files=_pdf())
    assert response.status_code == 502
    data = response.json()
    assert data["message"] == "Gemini API error: 503 UNAVAILABLE"
    assert data["details"] == {"service_name": "gemini", "status_code": 503}


def test_score_resume_not_configured(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "")
    get_text_generator.cache_clear()
    app.dependency_overrides[get_pipeline] = lambda: DocumentPipeline(decoder=FakeDecoder())
    response = client.post("/resumes/score", files=_pdf())
    assert response.status_code == 503
    assert response.json()["error"] == "not_configured"


def _company_store():
    store = InMemoryScreeningStore()
    store.set_job_requirements("acme", JobRequirements(title="Platform Engineer", required_skills=["Go"]))
    return store


def test_score_resume_uses_company_requirements():
    generator = _use(store=_company_store())
    response = client.post("/resumes/score", files=_pdf(), data={"company_id": "acme"})
    assert response.status_code == 200
    prompt = generator.calls[0]["user_prompt"]
    assert "Title: Platform Engineer" in prompt
    assert "Required Skills: Go" in prompt


def test_score_resume_explicit_requirements_win():
    generator = _use(store=_company_store())
    response = client.post(
        "/resumes/score",
        files=_pdf(),
        data={"company_id": "acme", "job_requirements": json.dumps({"title": "Data Analyst"})},
    )
    assert response.status_code == 200
    prompt = generator.calls[0]["user_prompt"]
    assert "Title: Data Analyst" in prompt
    assert "Platform Engineer" not in prompt


def test_score_resume_unknown_company():
    generator = _use(store=_company_store())
    response = client.post("/resumes/score", files=_pdf(), data={"company_id": "globex"})
    assert response.status_code == 200
    assert "evaluate generally" in generator.calls[0]["user_prompt"]


def test_score_batch_uses_company_requirements():
    generator = _use(store=_company_store())
    response = client.post(
        "/resumes/score/batch",
        json={"documents": [{"id": "a", "text": "Alice Walker\nGo developer"}], "company_id": "acme"},
    )
    assert response.status_code == 200
    assert "Title: Platform Engineer" in generator.calls[0]["user_prompt"]


def test_score_batch():
    _use(FakeTextGenerator([VALID_SCORE_REPLY, upstream_failure(), VALID_SCORE_REPLY]))
    response = client.post(
        "/resumes/score/batch",
        json={
            "documents": [
                {"id": "a", "text": "Alice Walker\nPython developer"},
                {"id": "b", "text": "Bob Stone\nJava developer"},
                {"id": "c", "text": "Cara Lane\nGo developer"},
            ],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == {"total": 3, "successful": 2, "failed": 1}
    assert [r["id"] for r in data["results"]] == ["a", "b", "c"]
    assert data["results"][0]["result"]["candidate_name"] == "Alice Walker"
    assert data["results"][1]["success"] is False
    assert data["results"][1]["error_kind"] == "external_service"


def test_score_batch_too_many():
    _use()
    documents = [{"id": str(i), "text": "resume"} for i in range(settings.max_batch_size + 1)]
    response = client.post("/resumes/score/batch", json={"documents": documents})
    assert response.status_code == 400


def test_score_batch_requires_documents():
    _use()
    response = client.post("/resumes/score/batch", json={"documents": []})
    assert response.status_code == 422


# --- Job analysis and insights ---


def test_analyze_job():
    _use(FakeTextGenerator([{"title": "SRE", "requiredSkills": ["Kubernetes"]}]))
    response = client.post("/jobs/analyze", json={"job_description": "Site reliability engineer role"})
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "SRE"
    assert data["required_skills"] == ["Kubernetes"]
    assert data["location"] == "Not specified"


def test_analyze_job_upstream_failure():
    _use(FakeTextGenerator([upstream_failure()]))
    response = client.post("/jobs/analyze", json={"job_description": "Any role"})
    assert response.status_code == 502


def test_insights_without_rows():
    _use()
    response = client.post("/insights", json={"rows": []})
    assert response.status_code == 200
    assert response.json()["insights"] == ["No recent data available for analysis"]


def test_company_insights_without_store():
    _use()
    response = client.get("/companies/acme/insights")
    assert response.status_code == 200
    assert response.json()["recommendations"] == ["Upload more resumes to generate insights"]
