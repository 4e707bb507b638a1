"""Per-document extraction results."""

from pydantic import BaseModel, Field


class ExtractedDocument(BaseModel):
    """Text pulled out of one uploaded PDF.

    ``clean_text`` is always non-empty; extraction fails before building
    this model when the document has no readable text.
    """
    filename: str = ""
    clean_text: str = Field(min_length=1)
    raw_text: str = ""  # untouched decoder output, kept for audit
    page_count: int = Field(default=0, ge=0)
    word_count: int = Field(default=0, ge=0)
    char_count: int = Field(default=0, ge=0)
    info: dict[str, str] = {}
    format_version: str = ""


class BasicInfo(BaseModel):
    """Heuristic identity facts. Any field may be missing."""
    candidate_name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None


class ExperienceInfo(BaseModel):
    total_years: int = 0
    companies: list[str] = []
    positions: list[str] = []


class TextQualityStats(BaseModel):
    length: int = 0
    word_count: int = 0
    unique_words: int = 0
    vocabulary_ratio: float = 0.0
    special_char_ratio: float = 0.0
    avg_words_per_sentence: float = 0.0


class TextQualityReport(BaseModel):
    is_valid: bool = False
    issues: list[str] = []
    warnings: list[str] = []
    stats: TextQualityStats = TextQualityStats()


class ParsedResume(BaseModel):
    """Everything recovered from one upload before scoring."""
    document: ExtractedDocument
    basic_info: BasicInfo = BasicInfo()
    skills: list[str] = []
    experience: ExperienceInfo = ExperienceInfo()
    sections: dict[str, str] = {}
    quality: TextQualityReport = TextQualityReport()
