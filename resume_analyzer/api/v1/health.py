from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from resume_analyzer.api.deps import get_chat_model
from resume_analyzer.ai.types import ChatModel
from resume_analyzer.core.errors import DependencyUnavailable

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy"}


@router.get("/health/model", summary="Model Health Check", description="Check that the language model endpoint is reachable.")
async def model_health_check(chat_model: ChatModel = Depends(get_chat_model)):
    try:
        models = await chat_model.ping()
    except DependencyUnavailable as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "error": str(exc)},
        )
    return {"status": "healthy", "models": models}
