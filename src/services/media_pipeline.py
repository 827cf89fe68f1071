from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from src.core.exceptions import MediaValidationError, PipelineError
from src.schemas.media import MediaUploadRequest, ProcessRequest, ProcessResult
from src.services import color_extractor, media_hosting

logger = structlog.get_logger()

MISSING_MEDIA_URL = "Media upload failed to return a URL."


def coerce_process_request(request: ProcessRequest | Mapping[str, Any]) -> ProcessRequest:
    if isinstance(request, ProcessRequest):
        return request
    try:
        return ProcessRequest.model_validate(request)
    except ValidationError as e:
        raise MediaValidationError(
            f"Invalid media process request: {media_hosting.summarize_validation_error(e)}"
        ) from e


async def process_and_upload_media(request: ProcessRequest | Mapping[str, Any]) -> ProcessResult:
    """Upload the media, then pick a dominant color for images.

    Upload failures propagate as UploadError. Color extraction never fails the
    request; when it cannot produce a color, ``dominant_color`` stays None.
    """
    process_request = coerce_process_request(request)

    upload_result = await media_hosting.upload_media(
        MediaUploadRequest(
            media_data_uri=process_request.media_data_uri,
            is_video=process_request.media_type == "video",
        )
    )
    if not upload_result or not upload_result.media_url:
        logger.error("media_pipeline_missing_url", media_type=process_request.media_type)
        raise PipelineError(MISSING_MEDIA_URL)

    dominant_color = None
    if process_request.media_type == "image":
        extraction = await color_extractor.extract_dominant_color(process_request.media_data_uri)
        if extraction.ok:
            dominant_color = extraction.color
        else:
            logger.warning("media_pipeline_no_color", reason=extraction.error)

    logger.info(
        "media_processed",
        media_type=process_request.media_type,
        media_url=upload_result.media_url,
        dominant_color=dominant_color,
    )
    return ProcessResult(
        media_url=upload_result.media_url,
        thumbnail_url=upload_result.thumbnail_url,
        dominant_color=dominant_color,
    )
