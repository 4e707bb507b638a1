"""Explicit construction of the service handles routes depend on.

Tests swap any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from config import settings
from services.gemini_client import TextGenerator, create_client
from services.pdf_parser import DocumentPipeline
from services.resume_scorer import ResumeScorer
from services.screening_store import InMemoryScreeningStore, ScreeningStore


@lru_cache
def get_pipeline() -> DocumentPipeline:
    return DocumentPipeline()


@lru_cache
def get_store() -> ScreeningStore:
    return InMemoryScreeningStore()


@lru_cache
def get_text_generator() -> TextGenerator:
    return create_client(settings)


def get_scorer(
    generator: TextGenerator = Depends(get_text_generator),
    store: ScreeningStore = Depends(get_store),
) -> ResumeScorer:
    return ResumeScorer(generator, settings, store)
