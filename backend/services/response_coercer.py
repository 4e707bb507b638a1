"""Turn whatever the scoring model returned into a complete ScoringResult.

Never raises. Missing or out-of-range numbers are clamped, non-list list
fields become empty, and anything structurally unusable (not an object,
non-numeric scores) yields the fixed fallback result.
"""

import logging
import math
from typing import Any

from models.schemas.document import BasicInfo
from models.schemas.scoring import ScoreBreakdown, ScoringResult

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "Resume analyzed successfully."

# (source key, result field, max length)
LIST_FIELDS: list[tuple[str, str, int]] = [
    ("strengths", "strengths", 10),
    ("weaknesses", "weaknesses", 10),
    ("keywordMatches", "keyword_matches", 20),
    ("recommendations", "recommendations", 5),
    ("redFlags", "red_flags", 5),
]

BREAKDOWN_FIELDS = ("skills", "experience", "education", "relevance")


def _number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise TypeError("boolean is not a score")
    number = float(value)
    return number if math.isfinite(number) else 0.0


def clamp_score(value: Any, low: int = 0, high: int = 100) -> int:
    return int(round(min(high, max(low, _number(value)))))


def _string_list(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value[:limit]]


def fallback_result(basic_info: BasicInfo) -> ScoringResult:
    """The always-valid result used when the model reply is unusable."""
    return ScoringResult(
        overall_score=50,
        breakdown=ScoreBreakdown(skills=50, experience=50, education=50, relevance=50),
        strengths=["Resume processed"],
        weaknesses=["Unable to complete full analysis"],
        keyword_matches=[],
        experience_years=0,
        summary="Basic analysis completed with limited AI processing.",
        recommendations=["Manual review recommended"],
        red_flags=[],
        fit_score=50,
        candidate_name=basic_info.candidate_name,
        keywords_matched=0,
    )


def _coerce(raw: Any, basic_info: BasicInfo) -> ScoringResult:
    if not isinstance(raw, dict):
        raise TypeError(f"expected a JSON object, got {type(raw).__name__}")

    breakdown_raw = raw.get("breakdown")
    if breakdown_raw is None:
        breakdown_raw = {}
    if not isinstance(breakdown_raw, dict):
        raise TypeError("breakdown is not an object")

    overall = clamp_score(raw.get("overallScore"))
    fit_raw = raw.get("fitScore")
    lists = {name: _string_list(raw.get(key), limit) for key, name, limit in LIST_FIELDS}
    summary = raw.get("summary")

    return ScoringResult(
        overall_score=overall,
        breakdown=ScoreBreakdown(
            **{name: clamp_score(breakdown_raw.get(name)) for name in BREAKDOWN_FIELDS}
        ),
        experience_years=max(0.0, _number(raw.get("experienceYears"))),
        summary=str(summary) if summary else DEFAULT_SUMMARY,
        fit_score=clamp_score(fit_raw if fit_raw is not None else raw.get("overallScore")),
        candidate_name=basic_info.candidate_name,
        keywords_matched=len(lists["keyword_matches"]),
        **lists,
    )


def coerce_scoring_response(raw: Any, basic_info: BasicInfo) -> ScoringResult:
    """Validate and clamp a model reply; fall back instead of failing."""
    try:
        return _coerce(raw, basic_info)
    except Exception as e:
        logger.warning("Scoring response unusable, using fallback result: %s", e)
        return fallback_result(basic_info)
