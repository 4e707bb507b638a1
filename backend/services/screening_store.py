"""Read side of the persistence collaborator.

The scoring core only needs the active job requirements for a company and
its analytics events for an insights window. Schema, writes and billing
belong to the storage backend behind this protocol.
"""

from datetime import datetime
from typing import Protocol

from models.schemas.job import JobRequirements


class ScreeningStore(Protocol):
    async def get_job_requirements(self, company_id: str) -> JobRequirements | None: ...

    async def get_company_analytics(
        self, company_id: str, start: datetime, end: datetime
    ) -> list[dict]: ...


class InMemoryScreeningStore:
    """Process-local store, used for development and tests."""

    def __init__(self) -> None:
        self._requirements: dict[str, JobRequirements] = {}
        self._events: dict[str, list[dict]] = {}

    def set_job_requirements(self, company_id: str, requirements: JobRequirements) -> None:
        self._requirements[company_id] = requirements

    def add_analytics_event(
        self, company_id: str, event_type: str, event_data: dict, created_at: datetime
    ) -> None:
        self._events.setdefault(company_id, []).append({
            "event_type": event_type,
            "event_data": event_data,
            "created_at": created_at,
        })

    async def get_job_requirements(self, company_id: str) -> JobRequirements | None:
        return self._requirements.get(company_id)

    async def get_company_analytics(
        self, company_id: str, start: datetime, end: datetime
    ) -> list[dict]:
        return [
            event for event in self._events.get(company_id, [])
            if start <= event["created_at"] <= end
        ]
