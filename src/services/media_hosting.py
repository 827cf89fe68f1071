import json
import time
from collections.abc import Mapping
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from src.config import settings
from src.core.exceptions import MediaValidationError, UploadError
from src.schemas.media import MediaUploadRequest, MediaUploadResult, Transformation, UploadResponse
from src.services.data_uri import parse_data_uri

logger = structlog.get_logger()

UNKNOWN_UPLOAD_ERROR = "Unknown upload service error"
MISSING_URL_ERROR = "Upload service response did not include a URL"


def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.upload_timeout,
        auth=(settings.imagekit_private_key.get_secret_value(), ""),
    )


def generate_file_name() -> str:
    return f"media-{int(time.time() * 1000)}"


def build_transformation(transformation: Transformation) -> str | None:
    if transformation is Transformation.VIDEO_THUMBNAIL:
        return json.dumps({"post": [{"type": "thumbnail", "value": settings.video_thumbnail_transformation}]})
    return None


def build_upload_form(request: MediaUploadRequest, file_name: str) -> dict[str, str]:
    form = {
        "file": request.media_data_uri,
        "fileName": file_name,
        "useUniqueFileName": "true",
    }
    transformation = build_transformation(request.transformation)
    if transformation is not None:
        form["transformation"] = transformation
    return form


def coerce_upload_request(request: MediaUploadRequest | Mapping[str, Any]) -> MediaUploadRequest:
    if isinstance(request, MediaUploadRequest):
        return request
    try:
        return MediaUploadRequest.model_validate(request)
    except ValidationError as e:
        raise MediaValidationError(f"Invalid media upload request: {summarize_validation_error(e)}") from e


def summarize_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors(include_url=False, include_input=False):
        loc = ".".join(str(p) for p in item["loc"])
        parts.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return "; ".join(parts)


def _error_message_from_response(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


async def _send_upload(form: dict[str, str]) -> dict[str, Any]:
    async with get_http_client() as client:
        response = await client.post(settings.imagekit_upload_url, files={k: (None, v) for k, v in form.items()})
    if response.is_error:
        logger.error(
            "upload_service_error_response",
            status_code=response.status_code,
            body=response.text[:2000],
        )
        message = _error_message_from_response(response)
        raise UploadError(message or f"Upload service returned HTTP {response.status_code}")
    try:
        body = response.json()
    except ValueError as e:
        logger.error("upload_service_invalid_json", body=response.text[:2000])
        raise UploadError("Upload service returned an invalid response") from e
    if not isinstance(body, dict):
        logger.error("upload_service_invalid_json", body=response.text[:2000])
        raise UploadError("Upload service returned an invalid response")
    return body


async def upload_media(request: MediaUploadRequest | Mapping[str, Any]) -> MediaUploadResult:
    upload_request = coerce_upload_request(request)
    data_uri = parse_data_uri(upload_request.media_data_uri)
    file_name = generate_file_name()
    log = logger.bind(
        file_name=file_name,
        mime_type=data_uri.mime_type,
        payload_length=len(data_uri.payload),
        is_video=bool(upload_request.is_video),
    )

    try:
        if not settings.imagekit_private_key.get_secret_value():
            raise UploadError("Upload service credentials are not configured")

        body = await _send_upload(build_upload_form(upload_request, file_name))
        reply = UploadResponse.model_validate(body)
        if not reply.url:
            log.error("upload_service_missing_url", response=json.dumps(body, indent=2))
            raise UploadError(MISSING_URL_ERROR)

        result = MediaUploadResult(media_url=reply.url, thumbnail_url=reply.resolved_thumbnail_url)
    except Exception as e:
        log.error("media_upload_failed", error=str(e), error_type=type(e).__name__)
        raise UploadError(f"Media upload failed: {_sanitize(e)}") from e

    log.info(
        "media_uploaded",
        file_id=reply.file_id,
        stored_name=reply.name,
        media_url=result.media_url,
        has_thumbnail=result.thumbnail_url is not None,
    )
    return result


def _sanitize(error: Exception) -> str:
    if isinstance(error, UploadError):
        return error.detail
    if isinstance(error, ValidationError):
        return "Upload service returned an invalid response"
    if isinstance(error, httpx.TimeoutException):
        return "Upload service timed out"
    message = str(error).strip()
    return message or UNKNOWN_UPLOAD_ERROR
