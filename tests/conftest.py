from collections.abc import AsyncIterator, Iterator
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from src.config import settings
from src.main import app


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def upload_credentials() -> Iterator[None]:
    with patch.object(settings, "imagekit_private_key", SecretStr("private_test_key")):
        yield


@pytest.fixture
def genai_credentials() -> Iterator[None]:
    with patch.object(settings, "genai_api_key", SecretStr("genai_test_key")):
        yield
