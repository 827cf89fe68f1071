from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "media-upload-service"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    log_json: bool = True
    cors_origins: list[str] = ["*"]

    imagekit_private_key: SecretStr = SecretStr("")
    imagekit_upload_url: str = "https://upload.imagekit.io/api/v1/files/upload"
    upload_timeout: float = 60.0
    video_thumbnail_transformation: str = "f-jpg,q-80"

    genai_api_key: SecretStr = SecretStr("")
    genai_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    genai_model: str = "gemini-2.0-flash"
    color_extract_timeout: float = 30.0


settings = Settings()
