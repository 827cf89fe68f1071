from fastapi import APIRouter

from src.schemas.media import MediaUploadRequest, MediaUploadResult, ProcessRequest, ProcessResult
from src.services import media_hosting, media_pipeline

router = APIRouter(prefix="/media")


@router.post("/upload", response_model=MediaUploadResult, response_model_exclude_none=True)
async def upload_media(body: MediaUploadRequest) -> MediaUploadResult:
    return await media_hosting.upload_media(body)


@router.post("/process", response_model=ProcessResult, response_model_exclude_none=True)
async def process_media(body: ProcessRequest) -> ProcessResult:
    return await media_pipeline.process_and_upload_media(body)
