import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.router import limiter, router
from config import settings
from models.responses import ErrorResponse
from services.exceptions import DocumentError, ScreeningError, ServiceNotConfiguredError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Resume Screening API",
    description="PDF resume extraction and AI scoring against job requirements",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def _status_for(exc: ScreeningError) -> int:
    if isinstance(exc, DocumentError):
        return 400
    if isinstance(exc, ServiceNotConfiguredError):
        return 503
    return 502


@app.exception_handler(ScreeningError)
async def screening_error_handler(request: Request, exc: ScreeningError):
    status_code = _status_for(exc)
    error = exc.to_dict()
    public = status_code < 500 or settings.debug
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, error)
    body = ErrorResponse(
        error=error["error_code"],
        message=error["message"] if public else "Upstream service unavailable",
        details=error["details"] if public else {},
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)
