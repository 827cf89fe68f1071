from enum import Enum
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.services.data_uri import parse_data_uri

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def _check_url(value: str | None) -> str | None:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be a valid http(s) URL")
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Transformation(str, Enum):
    NONE = "none"
    VIDEO_THUMBNAIL = "video_thumbnail"


class MediaUploadRequest(_CamelModel):
    media_data_uri: str = Field(description="Base64 data URI including a MIME type")
    is_video: bool | None = None

    @field_validator("media_data_uri")
    @classmethod
    def validate_data_uri(cls, value: str) -> str:
        parse_data_uri(value)
        return value

    @property
    def transformation(self) -> Transformation:
        return Transformation.VIDEO_THUMBNAIL if self.is_video else Transformation.NONE


class MediaUploadResult(_CamelModel):
    media_url: str
    thumbnail_url: str | None = None

    @field_validator("media_url", "thumbnail_url")
    @classmethod
    def validate_urls(cls, value: str | None) -> str | None:
        return _check_url(value)


class ProcessRequest(_CamelModel):
    media_data_uri: str
    media_type: Literal["image", "video"]

    @field_validator("media_data_uri")
    @classmethod
    def validate_data_uri(cls, value: str) -> str:
        parse_data_uri(value)
        return value


class ProcessResult(_CamelModel):
    media_url: str
    thumbnail_url: str | None = None
    dominant_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)

    @field_validator("media_url", "thumbnail_url")
    @classmethod
    def validate_urls(cls, value: str | None) -> str | None:
        return _check_url(value)


class ColorExtractOutput(_CamelModel):
    dominant_color: str = Field(
        pattern=HEX_COLOR_PATTERN,
        description="The dominant color from the image in hex format (e.g., #RRGGBB).",
    )


class UploadResponse(_CamelModel):
    """Subset of the upload service reply that the uploader reads. Other fields are ignored."""

    file_id: str | None = None
    name: str | None = None
    url: str | None = None
    thumbnail_url: str | None = None
    metadata: dict | None = None

    @property
    def resolved_thumbnail_url(self) -> str | None:
        if self.thumbnail_url:
            return self.thumbnail_url
        if self.metadata:
            fallback = self.metadata.get("thumbnailUrl")
            if isinstance(fallback, str) and fallback:
                return fallback
        return None
