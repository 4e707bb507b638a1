"""Scoring output contract."""

from pydantic import BaseModel, Field

from services.exceptions import ErrorKind


class ScoreBreakdown(BaseModel):
    skills: int = Field(default=0, ge=0, le=100)
    experience: int = Field(default=0, ge=0, le=100)
    education: int = Field(default=0, ge=0, le=100)
    relevance: int = Field(default=0, ge=0, le=100)


class ScoringResult(BaseModel):
    """Always fully populated, whatever the model returned.

    ``candidate_name`` comes from heuristic extraction, never from the model;
    ``keywords_matched`` is always ``len(keyword_matches)``.
    """
    overall_score: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown
    strengths: list[str] = Field(default=[], max_length=10)
    weaknesses: list[str] = Field(default=[], max_length=10)
    keyword_matches: list[str] = Field(default=[], max_length=20)
    experience_years: float = Field(default=0.0, ge=0)
    summary: str = Field(min_length=1)
    recommendations: list[str] = Field(default=[], max_length=5)
    red_flags: list[str] = Field(default=[], max_length=5)
    fit_score: int = Field(ge=0, le=100)
    candidate_name: str | None = None
    keywords_matched: int = Field(default=0, ge=0)


class BatchItemOutcome(BaseModel):
    """One entry per requested document; failed items are never dropped."""
    id: str
    success: bool
    result: ScoringResult | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None
