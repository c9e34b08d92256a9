from __future__ import annotations

from resume_analyzer.core.config import Settings


def cors_allowed_origins(settings: Settings) -> list[str]:
    return [origin for origin in settings.cors_allowed_origins if origin != "*"] or ["http://localhost:3000"]
