"""Job requirement records consumed by scoring, and JD analysis output."""

from pydantic import BaseModel


class JobRequirements(BaseModel):
    """Active requirements a resume is scored against.

    List-valued fields may arrive as plain strings from storage.
    """
    title: str | None = None
    required_skills: list[str] | str | None = None
    experience_level: str | None = None
    education_requirements: str | None = None
    keywords: list[str] | str | None = None
    description: str | None = None


class JobDescriptionAnalysis(BaseModel):
    """Structured requirements recovered from free-text job descriptions."""
    title: str = "Not specified"
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    experience_level: str = "Not specified"
    education_requirements: str = "Not specified"
    keywords: list[str] = []
    responsibilities: list[str] = []
    industry: str = "Not specified"
    location: str = "Not specified"
    salary_range: str = "Not specified"
    benefits: list[str] = []
    tokens_used: int = 0
