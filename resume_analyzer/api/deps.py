from __future__ import annotations

from fastapi import Depends

from resume_analyzer.ai.client import from_settings
from resume_analyzer.ai.types import ChatModel
from resume_analyzer.core.config import Settings, get_settings
from resume_analyzer.services.analysis_service import ResumeAnalysisPipeline


def get_chat_model(settings: Settings = Depends(get_settings)) -> ChatModel:
    return from_settings(settings)


def get_pipeline(
    settings: Settings = Depends(get_settings),
    chat_model: ChatModel = Depends(get_chat_model),
) -> ResumeAnalysisPipeline:
    return ResumeAnalysisPipeline(settings, chat_model)
