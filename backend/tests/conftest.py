"""Shared test doubles for the decoder and text-generation collaborators."""

import json

from services.exceptions import ExternalServiceError
from services.gemini_client import Completion
from services.pdf_parser import DecodedPdf

# Passes the signature and minimum-size checks; content is never parsed
PDF_BYTES = b"%PDF-1.4\n" + b"0" * 2048

SAMPLE_RESUME = """John A. Smith
Software Engineer
Austin, TX | john.smith@example.com | (555) 123-4567

Summary
Backend engineer with 6+ years of experience in Python and Django.

Experience
Senior Engineer at Acme Technologies, 2019 - Present
Developer at Globex Corp, 2016 - 2019

Skills
Python, Django, PostgreSQL, Docker, AWS, leadership
"""

VALID_SCORE_REPLY = {
    "overallScore": 82,
    "breakdown": {"skills": 85, "experience": 80, "education": 70, "relevance": 88},
    "strengths": ["Strong Python background"],
    "weaknesses": ["No Kubernetes exposure"],
    "keywordMatches": ["Python", "Django", "PostgreSQL"],
    "experienceYears": 6,
    "summary": "Solid backend candidate.",
    "recommendations": ["Proceed to technical interview"],
    "redFlags": [],
    "fitScore": 84,
}


class FakeTextGenerator:
    """Replays queued replies; an Exception instance in the queue is raised."""

    def __init__(self, replies=None, tokens_used: int = 120):
        self.replies = list(replies or [])
        self.tokens_used = tokens_used
        self.calls: list[dict] = []

    async def complete(self, system_prompt, user_prompt, *, max_tokens, temperature, json_mode=True):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "json_mode": json_mode,
        })
        reply = self.replies.pop(0) if self.replies else json.dumps(VALID_SCORE_REPLY)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return Completion(content=reply, tokens_used=self.tokens_used)


class FakeDecoder:
    def __init__(self, text: str = SAMPLE_RESUME, page_count: int = 1, error: Exception | None = None):
        self.text = text
        self.page_count = page_count
        self.error = error
        self.calls: list[int | None] = []

    def decode(self, data: bytes, max_pages: int | None = None) -> DecodedPdf:
        self.calls.append(max_pages)
        if self.error is not None:
            raise self.error
        return DecodedPdf(text=self.text, page_count=self.page_count, format_version="1.4")


def upstream_failure() -> ExternalServiceError:
    return ExternalServiceError("Gemini API error: 503 UNAVAILABLE", service_name="gemini", status_code=503)
