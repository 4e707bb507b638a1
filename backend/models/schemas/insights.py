from pydantic import BaseModel


class InsightsReport(BaseModel):
    insights: list[str] = []
    trends: list[str] = []
    recommendations: list[str] = []
    generated_at: str | None = None
    timeframe: str | None = None
