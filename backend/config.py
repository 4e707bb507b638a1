import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    max_upload_size_mb: int = 10
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False
    log_level: str = "INFO"

    # PDF handling
    min_pdf_bytes: int = 1024
    max_pdf_pages: int = 0  # 0 = all pages

    # Text-generation calls
    score_max_tokens: int = 2000
    score_temperature: float = 0.3
    job_analysis_max_tokens: int = 1000
    job_analysis_temperature: float = 0.2
    insights_max_tokens: int = 800
    insights_temperature: float = 0.4

    # Batch pacing: external API rate limits
    batch_min_interval_seconds: float = 1.0
    batch_max_concurrency: int = 1
    max_batch_size: int = 10

    insights_window_days: int = 30

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
