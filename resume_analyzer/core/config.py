from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


def looks_like_placeholder(value: str | None) -> bool:
    lower = (value or "").strip().lower()
    if not lower:
        return True
    return (
        lower.startswith("your_")
        or lower.startswith("your-")
        or lower.startswith("replace_")
        or lower in {"changeme", "todo"}
    )


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    cors_allowed_origins: tuple[str, ...] = ("http://localhost:3000", "http://127.0.0.1:3000")
    llm_base_url: str = "http://localhost:11434/v1"
    llm_api_key: str = "ollama"
    llm_model: str = "llama3"
    llm_timeout_s: float = 60.0
    llm_max_retries: int = 1
    llm_temperature: float = 0.2
    llm_vision_enabled: bool = False
    model_input_max_chars: int = 3000
    max_upload_bytes: int = 10 * 1024 * 1024
    pdf_co_api_key: str | None = None
    pdf_co_url: str = "https://api.pdf.co/v1/pdf/convert/to/text"
    pdf_service_timeout_s: float = 30.0
    ocr_language: str = "eng"
    job_search_enabled: bool = True
    job_providers: tuple[str, ...] = ("jsearch",)
    job_search_location: str = "USA"
    job_search_default_title: str = "Developer"
    job_results_cap: int = 5
    job_provider_timeout_s: float = 10.0
    rapidapi_key: str | None = None
    adzuna_app_id: str | None = None
    adzuna_app_key: str | None = None
    adzuna_country: str = "us"


def load_settings() -> Settings:
    return Settings(
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            ["http://localhost:3000", "http://127.0.0.1:3000"],
        ),
        llm_base_url=_get_env("LLM_BASE_URL", "http://localhost:11434/v1") or "http://localhost:11434/v1",
        llm_api_key=_get_env("LLM_API_KEY", "ollama") or "ollama",
        llm_model=_get_env("LLM_MODEL", "llama3") or "llama3",
        llm_timeout_s=_get_env_float("LLM_TIMEOUT_S", 60.0),
        llm_max_retries=_get_env_int("LLM_MAX_RETRIES", 1),
        llm_temperature=_get_env_float("LLM_TEMPERATURE", 0.2),
        llm_vision_enabled=_get_env_bool("LLM_VISION_ENABLED", False),
        model_input_max_chars=_get_env_int("MODEL_INPUT_MAX_CHARS", 3000),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        pdf_co_api_key=_get_env("PDF_CO_API_KEY"),
        pdf_co_url=_get_env("PDF_CO_URL", "https://api.pdf.co/v1/pdf/convert/to/text")
        or "https://api.pdf.co/v1/pdf/convert/to/text",
        pdf_service_timeout_s=_get_env_float("PDF_SERVICE_TIMEOUT_S", 30.0),
        ocr_language=_get_env("OCR_LANGUAGE", "eng") or "eng",
        job_search_enabled=_get_env_bool("JOB_SEARCH_ENABLED", True),
        job_providers=tuple(p.lower() for p in _get_env_list("JOB_PROVIDERS", ["jsearch"])),
        job_search_location=_get_env("JOB_SEARCH_LOCATION", "USA") or "USA",
        job_search_default_title=_get_env("JOB_SEARCH_DEFAULT_TITLE", "Developer") or "Developer",
        job_results_cap=_get_env_int("JOB_RESULTS_CAP", 5),
        job_provider_timeout_s=_get_env_float("JOB_PROVIDER_TIMEOUT_S", 10.0),
        rapidapi_key=_get_env("RAPIDAPI_KEY"),
        adzuna_app_id=_get_env("ADZUNA_APP_ID"),
        adzuna_app_key=_get_env("ADZUNA_APP_KEY"),
        adzuna_country=(_get_env("ADZUNA_COUNTRY", "us") or "us").lower(),
    )


settings = load_settings()

if settings.job_results_cap < 0:
    raise RuntimeError("JOB_RESULTS_CAP must not be negative.")


def get_settings() -> Settings:
    return settings
