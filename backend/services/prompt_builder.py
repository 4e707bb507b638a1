"""All prompt templates for text-generation calls.

Builders are pure: identical arguments always render identical prompts.
"""

import json

from models.schemas.document import BasicInfo
from models.schemas.job import JobRequirements

NOT_SPECIFIED = "Not specified"

SCORING_SYSTEM_PROMPT = (
    "You are an expert HR professional and resume reviewer. Analyze resumes "
    "objectively and provide detailed, actionable feedback."
)
JOB_ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert at analyzing job descriptions and extracting structured requirements."
)
INSIGHTS_SYSTEM_PROMPT = "You are an expert HR analyst providing actionable recruiting insights."

# The exact reply shape the response coercer expects back.
SCORING_RESPONSE_EXAMPLE = """{
  "overallScore": 85,
  "breakdown": {
    "skills": 80,
    "experience": 90,
    "education": 75,
    "relevance": 85
  },
  "strengths": [
    "Strong technical skills in required technologies",
    "Relevant industry experience"
  ],
  "weaknesses": [
    "Missing specific certification",
    "Limited leadership experience"
  ],
  "keywordMatches": [
    "JavaScript",
    "React",
    "Node.js"
  ],
  "experienceYears": 5,
  "summary": "Strong candidate with relevant technical skills and good experience. Some gaps in leadership and certifications.",
  "recommendations": [
    "Consider for technical interview",
    "Ask about leadership experience during interview"
  ],
  "redFlags": [],
  "fitScore": 85
}"""

JOB_ANALYSIS_RESPONSE_EXAMPLE = """{
  "title": "Software Engineer",
  "requiredSkills": ["JavaScript", "React", "Node.js"],
  "preferredSkills": ["Python", "AWS", "Docker"],
  "experienceLevel": "3-5 years",
  "educationRequirements": "Bachelor's degree in Computer Science or related field",
  "keywords": ["JavaScript", "React", "Node.js", "API", "Database"],
  "responsibilities": ["Develop web applications", "Collaborate with team"],
  "industry": "Technology",
  "location": "Remote",
  "salaryRange": "80k-120k",
  "benefits": ["Health insurance", "401k"]
}"""

INSIGHTS_RESPONSE_EXAMPLE = """{
  "insights": [
    "Average score has improved by 15% this month",
    "Most candidates lack required Python skills"
  ],
  "trends": [
    "Increasing number of senior-level candidates",
    "Skills gap in cloud technologies"
  ],
  "recommendations": [
    "Consider expanding search criteria",
    "Focus recruiting on specific universities"
  ]
}"""


def _field(value: str | list[str] | None) -> str:
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value if v)
    return value or NOT_SPECIFIED


def _job_requirements_section(job: JobRequirements | None) -> str:
    if job is None:
        return "No specific job requirements provided - evaluate generally."
    return f"""JOB REQUIREMENTS:
Title: {_field(job.title)}
Required Skills: {_field(job.required_skills)}
Experience Level: {_field(job.experience_level)}
Education: {_field(job.education_requirements)}
Keywords: {_field(job.keywords)}
Description: {_field(job.description)}"""


def build_scoring_prompt(
    resume_text: str,
    job_requirements: JobRequirements | None,
    basic_info: BasicInfo,
) -> str:
    """Render the resume evaluation prompt.

    Missing job fields render as "Not specified"; without any job record the
    model is told to evaluate generally.
    """
    return f"""Please analyze this resume and provide a comprehensive scoring based on the job requirements.

{_job_requirements_section(job_requirements)}

RESUME TEXT:
{resume_text}

CANDIDATE BASIC INFO:
Name: {basic_info.candidate_name or 'Not extracted'}
Email: {basic_info.email or 'Not found'}
Phone: {basic_info.phone or 'Not found'}
Location: {basic_info.location or 'Not found'}

Please provide your analysis in the following JSON format:
{SCORING_RESPONSE_EXAMPLE}

SCORING CRITERIA:
- Overall Score: 0-100 (weighted average of all factors)
- Skills: How well candidate's skills match job requirements (0-100)
- Experience: Relevance and depth of work experience (0-100)
- Education: Educational background relevance (0-100)
- Relevance: Overall fit for the specific role (0-100)
- Experience Years: Estimated total years of relevant experience (integer)
- Keyword Matches: List of job-relevant keywords found in resume
- Red Flags: Any concerning elements (employment gaps, job hopping, etc.)

Be objective, fair, and provide actionable insights for hiring decisions."""


def build_job_analysis_prompt(job_description: str) -> str:
    return f"""Analyze this job description and extract key requirements in JSON format:

JOB DESCRIPTION:
{job_description}

Please provide analysis in this JSON format:
{JOB_ANALYSIS_RESPONSE_EXAMPLE}

Extract only what's clearly stated in the job description. Use "{NOT_SPECIFIED}" for missing information."""


def build_insights_prompt(analytics_rows: list[dict]) -> str:
    data = json.dumps(analytics_rows, indent=2, default=str)
    return f"""Analyze this resume screening data and provide insights:

ANALYTICS DATA:
{data}

Please provide insights in this JSON format:
{INSIGHTS_RESPONSE_EXAMPLE}

Focus on actionable insights for hiring decisions."""
