from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_pipeline_resources
from config import settings
from models.requests import ExtractFromTextRequest, ExtractFromUrlRequest
from models.schemas.extracted_job import ExtractedJobData
from services.pipeline import orchestrator
from services.pipeline.resources import PipelineResources

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key or settings.user_api_keys),
    }


@router.post("/extract/url", response_model=ExtractedJobData)
@limiter.limit(settings.extract_rate_limit)
async def extract_url(
    request: Request,
    body: ExtractFromUrlRequest,
    resources: PipelineResources = Depends(get_pipeline_resources),
):
    return await orchestrator.extract_from_url(body.url.strip(), body.user_id, resources)


@router.post("/extract/text", response_model=ExtractedJobData)
@limiter.limit(settings.extract_rate_limit)
async def extract_text(
    request: Request,
    body: ExtractFromTextRequest,
    resources: PipelineResources = Depends(get_pipeline_resources),
):
    return await orchestrator.extract_from_text(body.text, body.user_id, resources)
