import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()

_STRIPPED_ERROR_KEYS = ("url", "input", "ctx")


class AppError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class MediaValidationError(AppError):
    """Malformed input, rejected before any external call."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=400, detail=detail)


class UploadError(AppError):
    """Upload service call failed or returned no usable URL.

    ``detail`` is always a sanitized message; the upstream reply is only logged.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=502, detail=detail)


class PipelineError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=502, detail=detail)


class ExtractionError(Exception):
    """Color model call failed. Absorbed by the color extractor, never surfaced."""


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("request_failed", path=request.url.path, status_code=exc.status_code, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        errors.append({k: v for k, v in error.items() if k not in _STRIPPED_ERROR_KEYS})
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
