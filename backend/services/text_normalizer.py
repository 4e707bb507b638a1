"""Canonicalize raw PDF text for both regex extraction and LLM prompts.

Rules run in a fixed order; later rules assume the earlier ones already ran.
The final pass repeats the whitespace and page-marker rules so that
``normalize(normalize(x)) == normalize(x)`` holds even when an earlier rule
(non-breaking space conversion, footer truncation) exposes a new artifact.
"""

import re

from models.schemas.document import TextQualityReport, TextQualityStats

# Typographic punctuation -> ASCII. The bullet is kept as U+2022.
PUNCTUATION_MAP: dict[str, str] = {
    "“": '"', "”": '"', "„": '"', "‟": '"',
    "‘": "'", "’": "'", "‚": "'", "‛": "'",
    "–": "-",
    "—": "--",
    "…": "...",
    "●": "•", "▪": "•", "‣": "•", "⁃": "•",
}
_PUNCTUATION_TABLE = str.maketrans(PUNCTUATION_MAP)

# Footers that mark the end of resume content
FOOTER_MARKERS: tuple[str, ...] = (
    "Confidential and Proprietary",
    "This email and any attachments",
)

_BLANK_LINES_RE = re.compile(r"\n{3,}")
_HSPACE_RE = re.compile(r"[ \t]{2,}")
_PERIODS_RE = re.compile(r"\.{4,}")
_HYPHENS_RE = re.compile(r"-{3,}")
_UNDERSCORES_RE = re.compile(r"_{3,}")
# Page lines may be padded with any non-newline whitespace
_PAGE_MARKER_RE = re.compile(r"^[^\S\n]*Page \d+ of \d+[^\S\n]*$", re.MULTILINE)
_PAGE_NUMBER_RE = re.compile(r"^[^\S\n]*\d+[^\S\n]*$", re.MULTILINE)
_PARAGRAPH_RUN_RE = re.compile(r"\n\s*\n\s*\n")


def _truncate_at_footer(text: str) -> str:
    cut = len(text)
    for marker in FOOTER_MARKERS:
        idx = text.find(marker)
        if idx != -1:
            cut = min(cut, idx)
    return text[:cut]


def _drop_page_lines(text: str) -> str:
    text = _PAGE_MARKER_RE.sub("", text)
    return _PAGE_NUMBER_RE.sub("", text)


def normalize(text: str) -> str:
    """Return the canonical form of extracted resume text.

    Never raises; non-string or empty input yields ``""``.
    """
    if not text or not isinstance(text, str):
        return ""

    # 1. Line breaks
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    # 2. Paragraph and horizontal whitespace runs
    text = _BLANK_LINES_RE.sub("\n\n", text)
    text = _HSPACE_RE.sub(" ", text)

    # 3. Page breaks and non-breaking spaces
    text = text.replace("\f", "").replace("\u00a0", " ")

    # 4. Typographic punctuation
    text = text.translate(_PUNCTUATION_TABLE)

    # 5. Runs of filler punctuation
    text = _PERIODS_RE.sub("...", text)
    text = _HYPHENS_RE.sub("--", text)
    text = _UNDERSCORES_RE.sub("__", text)

    # 6. Page numbers
    text = _drop_page_lines(text)

    # 7. Confidentiality / email footers
    text = _truncate_at_footer(text)

    # 8. Final pass
    text = _HSPACE_RE.sub(" ", text)
    text = _truncate_at_footer(text)
    text = _drop_page_lines(text)
    text = text.strip()
    text = _PARAGRAPH_RUN_RE.sub("\n\n", text)

    return text


def word_count(text: str) -> int:
    return len(text.split())


# ---------------------------------------------------------------------------
# Extraction quality signals
# ---------------------------------------------------------------------------
MIN_TEXT_LENGTH = 100
_SPECIAL_CHAR_RE = re.compile(r"""[^\w\s.,!?;:()\-"']""")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def validate_text_quality(text: str) -> TextQualityReport:
    """Flag extractions that are too short or look like OCR/layout garbage."""
    if not text or not isinstance(text, str):
        return TextQualityReport(is_valid=False, issues=["No text provided"])

    issues: list[str] = []
    warnings: list[str] = []

    if len(text) < MIN_TEXT_LENGTH:
        issues.append(f"Text too short (less than {MIN_TEXT_LENGTH} characters)")

    words = text.lower().split()
    total_words = len(words)
    unique_words = len({w for w in words if len(w) > 3})
    vocabulary_ratio = unique_words / total_words if total_words else 0.0
    if vocabulary_ratio < 0.3:
        warnings.append("High repetition detected - possible OCR issues")

    special_char_ratio = len(_SPECIAL_CHAR_RE.findall(text)) / len(text)
    if special_char_ratio > 0.1:
        warnings.append("High number of special characters - possible extraction issues")

    sentences = [s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]
    avg_words = total_words / len(sentences) if sentences else 0.0
    if avg_words < 3:
        warnings.append("Very short sentences - possible formatting issues")
    elif avg_words > 50:
        warnings.append("Very long sentences - possible missing punctuation")

    return TextQualityReport(
        is_valid=not issues,
        issues=issues,
        warnings=warnings,
        stats=TextQualityStats(
            length=len(text),
            word_count=total_words,
            unique_words=unique_words,
            vocabulary_ratio=round(vocabulary_ratio, 3),
            special_char_ratio=round(special_char_ratio, 3),
            avg_words_per_sentence=round(avg_words, 1),
        ),
    )
