"""Scoring orchestrator: prompt -> text-generation call -> coercion.

A failed external call is fatal for that one document and surfaces as
``ExternalServiceError``. A reply that arrives but is malformed is absorbed
by the response coercer into a fallback result.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel

from config import Settings, settings as default_settings
from models.schemas.document import BasicInfo
from models.schemas.insights import InsightsReport
from models.schemas.job import JobDescriptionAnalysis, JobRequirements
from models.schemas.scoring import BatchItemOutcome, ScoringResult
from services import prompt_builder
from services.exceptions import ScreeningError
from services.gemini_client import TextGenerator, parse_json
from services.pacing import CallPacer
from services.response_coercer import coerce_scoring_response
from services.screening_store import ScreeningStore

logger = logging.getLogger(__name__)

NO_DATA_INSIGHTS = InsightsReport(
    insights=["No recent data available for analysis"],
    trends=[],
    recommendations=["Upload more resumes to generate insights"],
)
UNAVAILABLE_INSIGHTS = InsightsReport(
    insights=["Unable to generate insights at this time"],
    trends=[],
    recommendations=["Please try again later"],
)

# Reply key -> JobDescriptionAnalysis field
_JOB_ANALYSIS_KEYS: dict[str, str] = {
    "title": "title",
    "requiredSkills": "required_skills",
    "preferredSkills": "preferred_skills",
    "experienceLevel": "experience_level",
    "educationRequirements": "education_requirements",
    "keywords": "keywords",
    "responsibilities": "responsibilities",
    "industry": "industry",
    "location": "location",
    "salaryRange": "salary_range",
    "benefits": "benefits",
}


class BatchDocument(BaseModel):
    """A resume already reduced to text, queued for batch scoring."""
    id: str
    text: str
    basic_info: BasicInfo = BasicInfo()


def _parse_reply(content: str) -> Any:
    try:
        return parse_json(content)
    except ValueError as e:
        logger.warning("Model reply is not valid JSON: %s", e)
        return None


def _coerce_job_analysis(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        return {}
    values: dict[str, Any] = {}
    for key, name in _JOB_ANALYSIS_KEYS.items():
        value = raw.get(key)
        if value is None:
            continue
        default = JobDescriptionAnalysis.model_fields[name].default
        if isinstance(default, list):
            if isinstance(value, list):
                values[name] = [str(v) for v in value]
        elif isinstance(value, (str, int, float)) and str(value).strip():
            values[name] = str(value)
    return values


def _string_list(value: Any) -> list[str]:
    return [str(v) for v in value] if isinstance(value, list) else []


class ResumeScorer:
    """Entry point the web layer uses for every text-generation operation."""

    def __init__(
        self,
        generator: TextGenerator,
        config: Settings = default_settings,
        store: ScreeningStore | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.generator = generator
        self.config = config
        self.store = store
        self._sleep = sleep

    async def score_document(
        self,
        text: str,
        job_requirements: JobRequirements | None,
        basic_info: BasicInfo,
    ) -> ScoringResult:
        logger.info("Starting AI resume scoring")
        prompt = prompt_builder.build_scoring_prompt(text, job_requirements, basic_info)
        completion = await self.generator.complete(
            prompt_builder.SCORING_SYSTEM_PROMPT,
            prompt,
            max_tokens=self.config.score_max_tokens,
            temperature=self.config.score_temperature,
            json_mode=True,
        )
        result = coerce_scoring_response(_parse_reply(completion.content), basic_info)
        logger.info(
            "AI resume scoring completed: overall=%d tokens=%d",
            result.overall_score, completion.tokens_used,
        )
        return result

    async def score_batch(
        self,
        documents: list[BatchDocument],
        job_requirements: JobRequirements | None,
    ) -> list[BatchItemOutcome]:
        """Score documents under the pacing policy, one outcome per document.

        A failure on one document is recorded against its id and does not
        stop the rest. Outcomes come back in input order.
        """
        pacer = CallPacer(
            min_interval=self.config.batch_min_interval_seconds,
            max_concurrency=self.config.batch_max_concurrency,
            sleep=self._sleep,
        )

        async def score_one(doc: BatchDocument) -> BatchItemOutcome:
            try:
                async with pacer.slot():
                    result = await self.score_document(doc.text, job_requirements, doc.basic_info)
            except ScreeningError as e:
                logger.error("Batch scoring failed for resume %s: %s", doc.id, e.message)
                return BatchItemOutcome(
                    id=doc.id, success=False, error_kind=e.kind, error_message=e.message
                )
            except Exception as e:
                logger.exception("Batch scoring failed for resume %s", doc.id)
                return BatchItemOutcome(id=doc.id, success=False, error_message=str(e))
            return BatchItemOutcome(id=doc.id, success=True, result=result)

        if pacer.max_concurrency == 1:
            return [await score_one(doc) for doc in documents]
        return list(await asyncio.gather(*(score_one(doc) for doc in documents)))

    async def analyze_job_description(self, job_description: str) -> JobDescriptionAnalysis:
        logger.info("Analyzing job description with AI")
        completion = await self.generator.complete(
            prompt_builder.JOB_ANALYSIS_SYSTEM_PROMPT,
            prompt_builder.build_job_analysis_prompt(job_description),
            max_tokens=self.config.job_analysis_max_tokens,
            temperature=self.config.job_analysis_temperature,
            json_mode=True,
        )
        values = _coerce_job_analysis(_parse_reply(completion.content))
        logger.info("Job description analysis completed (%d fields)", len(values))
        return JobDescriptionAnalysis(**values, tokens_used=completion.tokens_used)

    async def generate_insights(
        self, analytics_rows: list[dict], timeframe: str = "30d"
    ) -> InsightsReport:
        """Summarize screening analytics. Never raises."""
        if not analytics_rows:
            return NO_DATA_INSIGHTS.model_copy(deep=True)

        try:
            completion = await self.generator.complete(
                prompt_builder.INSIGHTS_SYSTEM_PROMPT,
                prompt_builder.build_insights_prompt(analytics_rows),
                max_tokens=self.config.insights_max_tokens,
                temperature=self.config.insights_temperature,
                json_mode=True,
            )
            raw = parse_json(completion.content)
            if not isinstance(raw, dict):
                raise ValueError("insights reply is not a JSON object")
        except Exception as e:
            logger.error("Insights generation failed: %s", e)
            return UNAVAILABLE_INSIGHTS.model_copy(deep=True)

        return InsightsReport(
            insights=_string_list(raw.get("insights")),
            trends=_string_list(raw.get("trends")),
            recommendations=_string_list(raw.get("recommendations")),
            generated_at=datetime.now(timezone.utc).isoformat(),
            timeframe=timeframe,
        )

    async def insights_for_company(self, company_id: str) -> InsightsReport:
        """Fetch the recent analytics window from the store and summarize it."""
        if self.store is None:
            return NO_DATA_INSIGHTS.model_copy(deep=True)
        days = self.config.insights_window_days
        end = datetime.now(timezone.utc)
        try:
            rows = await self.store.get_company_analytics(company_id, end - timedelta(days=days), end)
        except Exception as e:
            logger.error("Fetching analytics for company %s failed: %s", company_id, e)
            return UNAVAILABLE_INSIGHTS.model_copy(deep=True)
        return await self.generate_insights(rows, timeframe=f"{days}d")

    async def job_requirements_for_company(self, company_id: str) -> JobRequirements | None:
        if self.store is None:
            return None
        return await self.store.get_job_requirements(company_id)
