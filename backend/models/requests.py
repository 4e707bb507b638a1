from pydantic import BaseModel, Field

from models.schemas.job import JobRequirements


class BatchDocumentRequest(BaseModel):
    id: str = Field(..., min_length=1, description="Caller's identifier for the resume")
    text: str = Field(..., max_length=50000, description="Extracted resume text")


class BatchScoreRequest(BaseModel):
    documents: list[BatchDocumentRequest] = Field(..., min_length=1)
    job_requirements: JobRequirements | None = None
    company_id: str | None = Field(None, description="Score against this company's stored job requirements")


class JobDescriptionRequest(BaseModel):
    job_description: str = Field(..., min_length=1, max_length=10000, description="Job description text")


class InsightsRequest(BaseModel):
    rows: list[dict] = []
    timeframe: str = "30d"
