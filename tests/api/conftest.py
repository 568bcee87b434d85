"""API test fixtures: FastAPI app driven in-process through httpx.

Invariants:
    - No network, no lifespan: ASGITransport calls the app directly
    - Settings cache cleared around each test so env overrides apply
"""

import pytest
from httpx import ASGITransport, AsyncClient

from cartguard.config import get_settings
from cartguard.main import app


@pytest.fixture
async def client():
    get_settings.cache_clear()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    get_settings.cache_clear()
