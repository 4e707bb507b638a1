"""Core data contracts shared by the extraction and scoring services."""

from models.schemas.document import (
    BasicInfo,
    ExperienceInfo,
    ExtractedDocument,
    ParsedResume,
    TextQualityReport,
)
from models.schemas.insights import InsightsReport
from models.schemas.job import JobDescriptionAnalysis, JobRequirements
from models.schemas.scoring import BatchItemOutcome, ScoreBreakdown, ScoringResult

__all__ = [
    "BasicInfo",
    "BatchItemOutcome",
    "ExperienceInfo",
    "ExtractedDocument",
    "InsightsReport",
    "JobDescriptionAnalysis",
    "JobRequirements",
    "ParsedResume",
    "ScoreBreakdown",
    "ScoringResult",
    "TextQualityReport",
]
