"""Heuristic candidate-fact extraction from normalized resume text.

Every extractor here is best-effort: a missing field is ``None`` or an empty
list, never an exception. Patterns and vocabularies are kept as module-level
tables so they can be tested and extended without touching control flow.
"""

import logging
import re

from models.schemas.document import BasicInfo, ExperienceInfo

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Contact patterns
# ---------------------------------------------------------------------------
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Optional country code, optional parens, separators space/dot/hyphen
PHONE_RE = re.compile(r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

# "Austin, TX" or "Berlin, Germany"
LOCATION_RE = re.compile(
    r"\b[A-Z][a-z]+,[ \t]*[A-Z]{2}\b"
    r"|\b[A-Z][a-z]+[ \t]*,[ \t]*[A-Z][a-z]+\b"
)

# ---------------------------------------------------------------------------
# Name heuristic
# ---------------------------------------------------------------------------
NAME_SCAN_LINES = 5
NAME_MIN_LEN = 4
NAME_MAX_LEN = 50
NAME_BOILERPLATE_RE = re.compile(r"\b(?:resume|cv|curriculum|vitae)\b", re.IGNORECASE)
_NAME_WORD_RE = re.compile(r"^[A-Za-z][A-Za-z'.-]*$")
_DIGIT_RUN_RE = re.compile(r"\d{3,}")

# ---------------------------------------------------------------------------
# Skill vocabulary, matched uniformly regardless of category
# ---------------------------------------------------------------------------
SKILL_VOCABULARY: dict[str, list[str]] = {
    "languages": [
        "javascript", "python", "java", "c++", "c#", "php", "ruby", "go", "rust",
        "swift", "kotlin", "typescript", "scala", "r", "matlab", "sql", "html", "css",
    ],
    "frameworks": [
        "react", "angular", "vue", "node.js", "express", "django", "flask", "spring",
        "laravel", "rails", "asp.net", "jquery", "bootstrap", "tailwind",
    ],
    "databases": [
        "mysql", "postgresql", "mongodb", "redis", "elasticsearch", "oracle", "sqlite",
    ],
    "cloud_devops": [
        "aws", "azure", "gcp", "docker", "kubernetes", "jenkins", "git", "ci/cd",
    ],
    "tools": [
        "linux", "windows", "macos", "nginx", "apache", "microservices", "api",
        "restful", "graphql", "websockets", "tcp/ip",
    ],
    "soft_skills": [
        "leadership", "communication", "teamwork", "problem solving", "analytical",
        "project management", "agile", "scrum", "kanban",
    ],
}


def _compile_skill(term: str) -> re.Pattern:
    # Lookarounds instead of \b so "c++" / "c#" match and "java" skips "javascript"
    return re.compile(rf"(?<![a-z0-9.#+]){re.escape(term)}(?![a-z0-9#+])", re.IGNORECASE)


_SKILL_PATTERNS: list[tuple[str, re.Pattern]] = [
    (term, _compile_skill(term))
    for terms in SKILL_VOCABULARY.values()
    for term in terms
]

# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------
EXPERIENCE_YEARS_PATTERNS: list[re.Pattern] = [
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience", re.IGNORECASE),
    re.compile(r"experience[:\s]*(\d+)\+?\s*years?", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*years?\s*in\b", re.IGNORECASE),
]

COMPANY_SUFFIXES: tuple[str, ...] = (
    "Incorporated", "Inc", "LLC", "Corporation", "Corp", "Limited", "Ltd",
    "Company", "Co.", "Technologies", "Tech", "Solutions", "Systems", "Group",
)
_SUFFIX_ALT = "|".join(re.escape(s) for s in COMPANY_SUFFIXES)
COMPANY_RE = re.compile(
    r"(?:\bat[ \t]+)?"
    r"\b([A-Z][A-Za-z&.,'-]*(?:[ \t]+[A-Z&][A-Za-z&.,'-]*)*?"
    rf"[ \t]+(?:{_SUFFIX_ALT}))(?![A-Za-z])"
)
MAX_COMPANIES = 10

# Canonical spellings for corporate suffixes
COMPANY_SUFFIX_CANONICAL: dict[str, str] = {
    "inc.": "Inc",
    "llc": "LLC",
    "corp.": "Corp",
    "ltd.": "Ltd",
    "co.": "Co.",
    "company": "Company",
    "corporation": "Corporation",
    "incorporated": "Inc",
    "limited": "Ltd",
}

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------
SECTION_HEADERS: dict[str, re.Pattern] = {
    "experience": re.compile(r"^(?:experience|work\s+experience|employment|professional\s+experience|career)", re.IGNORECASE),
    "education": re.compile(r"^(?:education|academic|qualifications|schooling)", re.IGNORECASE),
    "skills": re.compile(r"^(?:skills|technical\s+skills|competencies|technologies|expertise)", re.IGNORECASE),
    "projects": re.compile(r"^(?:projects|portfolio|work\s+samples)", re.IGNORECASE),
    "certifications": re.compile(r"^(?:certifications?|licenses?|credentials)", re.IGNORECASE),
    "summary": re.compile(r"^(?:summary|profile|objective|about|introduction)", re.IGNORECASE),
    "contact": re.compile(r"^(?:contact|personal\s+information)", re.IGNORECASE),
}


def extract_email(text: str) -> str | None:
    match = EMAIL_RE.search(text)
    return match.group() if match else None


def extract_phone(text: str) -> str | None:
    match = PHONE_RE.search(text)
    if not match:
        return None
    return re.sub(r"\s+", " ", match.group()).strip()


def extract_location(text: str) -> str | None:
    match = LOCATION_RE.search(text)
    return match.group() if match else None


def _looks_like_name(line: str) -> bool:
    if not NAME_MIN_LEN <= len(line) < NAME_MAX_LEN:
        return False
    if "@" in line or _DIGIT_RUN_RE.search(line) or NAME_BOILERPLATE_RE.search(line):
        return False
    words = line.split()
    if not 2 <= len(words) <= 4:
        return False
    return all(_NAME_WORD_RE.match(w) and len(w) > 1 for w in words)


def extract_name(text: str) -> str | None:
    """Guess the candidate name from the first few non-blank lines.

    Purely heuristic: the result may be missing or wrong and must not be
    treated as a verified identity.
    """
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:NAME_SCAN_LINES]:
        if _looks_like_name(line):
            return line
    return None


def extract_basic_info(text: str) -> BasicInfo:
    """Recover name/email/phone/location. Each field fails independently."""
    if not text or not isinstance(text, str):
        return BasicInfo()

    fields = {
        "candidate_name": extract_name,
        "email": extract_email,
        "phone": extract_phone,
        "location": extract_location,
    }
    values: dict[str, str | None] = {}
    for field, extractor in fields.items():
        try:
            values[field] = extractor(text)
        except Exception as e:
            logger.warning("Basic info extraction failed for %s: %s", field, e)
            values[field] = None
    return BasicInfo(**values)


def extract_skills(text: str) -> list[str]:
    """Match the skill vocabulary, then append any email addresses found.

    Order follows the vocabulary, then discovery order of emails.
    """
    if not text or not isinstance(text, str):
        return []
    try:
        found = [term for term, pattern in _SKILL_PATTERNS if pattern.search(text)]
        found.extend(EMAIL_RE.findall(text))
        return list(dict.fromkeys(found))
    except Exception as e:
        logger.warning("Skill extraction failed: %s", e)
        return []


def extract_experience_years(text: str) -> int:
    """Largest "N years" claim across all experience patterns, 0 if none."""
    if not text or not isinstance(text, str):
        return 0
    try:
        years = [
            int(match.group(1))
            for pattern in EXPERIENCE_YEARS_PATTERNS
            for match in pattern.finditer(text)
        ]
        return max(years, default=0)
    except Exception as e:
        logger.warning("Experience years extraction failed: %s", e)
        return 0


def extract_companies(text: str) -> list[str]:
    """Employer names ending in a corporate suffix, de-duplicated, capped at 10."""
    if not text or not isinstance(text, str):
        return []
    try:
        companies: list[str] = []
        for match in COMPANY_RE.finditer(text):
            company = re.sub(r"^at\s+", "", match.group(1), flags=re.IGNORECASE).strip()
            company = normalize_company_names(company)
            if 3 < len(company) < 100 and company not in companies:
                companies.append(company)
        return companies[:MAX_COMPANIES]
    except Exception as e:
        logger.warning("Company extraction failed: %s", e)
        return []


def extract_experience(text: str) -> ExperienceInfo:
    return ExperienceInfo(
        total_years=extract_experience_years(text),
        companies=extract_companies(text),
    )


def normalize_company_names(text: str) -> str:
    """Rewrite corporate suffixes to their canonical spelling."""
    if not text or not isinstance(text, str):
        return text
    for suffix, canonical in COMPANY_SUFFIX_CANONICAL.items():
        text = re.sub(
            rf"(?<![A-Za-z]){re.escape(suffix)}(?![A-Za-z])",
            canonical,
            text,
            flags=re.IGNORECASE,
        )
    return text


def extract_sections(text: str) -> dict[str, str]:
    """Split resume text on known section headers.

    Text before the first header is stored under ``header``.
    """
    if not text or not isinstance(text, str):
        return {}

    sections: dict[str, str] = {}
    current_section = "header"
    current_lines: list[str] = []

    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            current_lines.append("")
            continue

        matched_section = None
        for section_name, pattern in SECTION_HEADERS.items():
            if pattern.match(stripped):
                matched_section = section_name
                break

        if matched_section:
            if current_lines:
                sections[current_section] = "\n".join(current_lines).strip()
            current_section = matched_section
            current_lines = []
        else:
            current_lines.append(line)

    if current_lines:
        sections[current_section] = "\n".join(current_lines).strip()

    return sections
