from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_pipeline, get_scorer
from config import settings
from models.requests import BatchScoreRequest, InsightsRequest, JobDescriptionRequest
from models.responses import BatchScoreResponse, BatchSummary
from models.schemas.document import ParsedResume
from models.schemas.insights import InsightsReport
from models.schemas.job import JobDescriptionAnalysis, JobRequirements
from models.schemas.scoring import ScoringResult
from services import field_extractor, text_normalizer
from services.pdf_parser import DocumentPipeline
from services.resume_scorer import BatchDocument, ResumeScorer

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


async def _read_pdf_upload(resume_file: UploadFile) -> bytes:
    # Validate file type
    if not resume_file.filename or not resume_file.filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Only PDF files are accepted")

    # Read and validate size
    content = await resume_file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )
    return content


def _parse_job_requirements(raw: str | None) -> JobRequirements | None:
    if not raw:
        return None
    try:
        return JobRequirements.model_validate_json(raw)
    except ValidationError:
        raise HTTPException(status_code=400, detail="job_requirements must be a JSON object")


async def _resolve_job_requirements(
    scorer: ResumeScorer,
    requirements: JobRequirements | None,
    company_id: str | None,
) -> JobRequirements | None:
    # Explicit requirements win over the company's stored ones
    if requirements is not None or not company_id:
        return requirements
    return await scorer.job_requirements_for_company(company_id)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/resumes/extract", response_model=ParsedResume)
@limiter.limit("10/minute")
async def extract_resume(
    request: Request,
    resume_file: UploadFile = File(...),
    pipeline: DocumentPipeline = Depends(get_pipeline),
):
    content = await _read_pdf_upload(resume_file)
    return pipeline.parse_resume(content, resume_file.filename)


@router.post("/resumes/score", response_model=ScoringResult)
@limiter.limit("10/minute")
async def score_resume(
    request: Request,
    resume_file: UploadFile = File(...),
    job_requirements: str | None = Form(None),
    company_id: str | None = Form(None),
    pipeline: DocumentPipeline = Depends(get_pipeline),
    scorer: ResumeScorer = Depends(get_scorer),
):
    requirements = await _resolve_job_requirements(
        scorer, _parse_job_requirements(job_requirements), company_id
    )
    content = await _read_pdf_upload(resume_file)
    parsed = pipeline.parse_resume(content, resume_file.filename)
    return await scorer.score_document(parsed.document.clean_text, requirements, parsed.basic_info)


@router.post("/resumes/score/batch", response_model=BatchScoreResponse)
@limiter.limit("10/minute")
async def score_batch(
    request: Request,
    body: BatchScoreRequest,
    scorer: ResumeScorer = Depends(get_scorer),
):
    if len(body.documents) > settings.max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_batch_size} resumes can be processed at once",
        )

    documents = []
    for doc in body.documents:
        clean_text = text_normalizer.normalize(doc.text)
        documents.append(BatchDocument(
            id=doc.id,
            text=clean_text,
            basic_info=field_extractor.extract_basic_info(clean_text),
        ))

    requirements = await _resolve_job_requirements(scorer, body.job_requirements, body.company_id)
    results = await scorer.score_batch(documents, requirements)
    successful = sum(1 for r in results if r.success)
    return BatchScoreResponse(
        results=results,
        summary=BatchSummary(
            total=len(results), successful=successful, failed=len(results) - successful
        ),
    )


@router.post("/jobs/analyze", response_model=JobDescriptionAnalysis)
@limiter.limit("10/minute")
async def analyze_job(
    request: Request,
    body: JobDescriptionRequest,
    scorer: ResumeScorer = Depends(get_scorer),
):
    return await scorer.analyze_job_description(body.job_description)


@router.post("/insights", response_model=InsightsReport)
@limiter.limit("10/minute")
async def insights(
    request: Request,
    body: InsightsRequest,
    scorer: ResumeScorer = Depends(get_scorer),
):
    return await scorer.generate_insights(body.rows, body.timeframe)


@router.get("/companies/{company_id}/insights", response_model=InsightsReport)
@limiter.limit("10/minute")
async def company_insights(
    request: Request,
    company_id: str,
    scorer: ResumeScorer = Depends(get_scorer),
):
    return await scorer.insights_for_company(company_id)
