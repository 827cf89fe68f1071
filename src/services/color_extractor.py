from dataclasses import dataclass
from typing import Any

import structlog
from openai import AsyncOpenAI
from pydantic import ValidationError

from src.config import settings
from src.core.exceptions import ExtractionError
from src.schemas.media import ColorExtractOutput

logger = structlog.get_logger()

COLOR_EXTRACT_PROMPT = (
    "Analyze the provided image and determine a single dominant color that would be suitable "
    "for a background. Return this color as a hex code. "
    'Respond with JSON only, in the form {"dominantColor": "#RRGGBB"}.'
)


@dataclass(frozen=True)
class ColorExtraction:
    color: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.color is not None


def llm_enabled() -> bool:
    return bool(settings.genai_api_key.get_secret_value() and settings.genai_model)


def get_genai_client() -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=settings.genai_api_key.get_secret_value(),
        base_url=settings.genai_base_url,
        timeout=settings.color_extract_timeout,
        max_retries=0,
    )


def build_messages(data_uri: str) -> list[dict[str, Any]]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": COLOR_EXTRACT_PROMPT},
                {"type": "image_url", "image_url": {"url": data_uri}},
            ],
        }
    ]


def _response_format() -> dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "color_extract_output",
            "schema": ColorExtractOutput.model_json_schema(by_alias=True),
        },
    }


def parse_color_reply(text: str | None) -> str:
    if not text or not text.strip():
        raise ExtractionError("empty_llm_output")
    raw = text.strip()
    if raw.startswith("```"):
        raw = raw.strip("`").removeprefix("json").strip()
    try:
        parsed = ColorExtractOutput.model_validate_json(raw)
    except ValidationError as e:
        raise ExtractionError(f"schema_mismatch: {e.error_count()} error(s)") from e
    return parsed.dominant_color.upper()


async def _request_color(data_uri: str) -> str:
    client = get_genai_client()
    try:
        completion = await client.chat.completions.create(
            model=settings.genai_model,
            messages=build_messages(data_uri),  # type: ignore[arg-type]
            response_format=_response_format(),  # type: ignore[arg-type]
            temperature=0,
        )
    finally:
        await client.close()

    if not completion.choices:
        raise ExtractionError("empty_llm_output")
    return parse_color_reply(completion.choices[0].message.content)


async def extract_dominant_color(data_uri: str) -> ColorExtraction:
    """Ask the model for a background color. Never raises; failures come back in ``error``."""
    if not llm_enabled():
        logger.warning("color_extraction_skipped", reason="llm_not_configured")
        return ColorExtraction(error="llm_not_configured")

    try:
        color = await _request_color(data_uri)
    except Exception as e:  # noqa: BLE001
        logger.warning("color_extraction_failed", error=str(e), error_type=type(e).__name__)
        return ColorExtraction(error=str(e) or type(e).__name__)

    logger.info("color_extracted", dominant_color=color)
    return ColorExtraction(color=color)
