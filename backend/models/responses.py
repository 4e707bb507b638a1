from pydantic import BaseModel

from models.schemas.scoring import BatchItemOutcome


class BatchSummary(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0


class BatchScoreResponse(BaseModel):
    results: list[BatchItemOutcome] = []
    summary: BatchSummary = BatchSummary()


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: dict = {}
