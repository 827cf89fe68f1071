from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

PNG_DATA_URI = "data:image/png;base64,AAAA"
MP4_DATA_URI = "data:video/mp4;base64,AAAA"


def make_completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_genai_client(content: str | None = None, error: Exception | None = None) -> MagicMock:
    fake = MagicMock()
    if error is not None:
        fake.chat.completions.create = AsyncMock(side_effect=error)
    else:
        fake.chat.completions.create = AsyncMock(return_value=make_completion(content))
    fake.close = AsyncMock()
    return fake
