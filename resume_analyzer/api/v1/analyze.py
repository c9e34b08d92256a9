from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from resume_analyzer.api.deps import get_pipeline
from resume_analyzer.schemas.analysis import ErrorResponse
from resume_analyzer.services.analysis_service import ResumeAnalysisPipeline, UploadedResume

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 64


async def _read_upload(file: UploadFile, limit: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        chunks.append(chunk)
        # One chunk past the limit is enough for the pipeline to reject it.
        if total > limit:
            break
    return b"".join(chunks)


@router.post(
    "/analyze",
    summary="Analyze a resume",
    description="Extract text from an uploaded resume, analyze it with the language model and attach live job listings.",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_resume(
    resume: UploadFile | None = File(None),
    image: UploadFile | None = File(None),
    analysis_type: str | None = Form(None),
    pipeline: ResumeAnalysisPipeline = Depends(get_pipeline),
):
    upload = resume or image
    uploaded: UploadedResume | None = None
    if upload is not None:
        content = await _read_upload(upload, pipeline.max_upload_bytes)
        uploaded = UploadedResume(
            filename=upload.filename or "",
            content=content,
            content_type=upload.content_type,
        )
    result = await pipeline.run(uploaded, analysis_type=analysis_type)
    return JSONResponse(content=result.to_payload())
