"""
Pytest configuration and fixtures.
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fiscabot.services.uploads import PhotoStorage
from fiscabot.storage.local import JsonFileStore


@pytest.fixture
def report_store(tmp_path) -> JsonFileStore:
    """Local JSON store in a temporary directory."""
    store = JsonFileStore(tmp_path / "db" / "reports.json")
    store.ensure()
    return store


@pytest.fixture
def photo_storage(tmp_path) -> PhotoStorage:
    return PhotoStorage(tmp_path / "uploads", url_prefix="/uploads", max_files=6)


@pytest.fixture
def valid_fields() -> dict:
    return {
        "tipo": "buraco na via",
        "local": "Rua A, 123",
        "data_evento": "05/03/2024",
        "hora_inicio": "08:30",
        "hora_fim": "09:00",
    }


@pytest_asyncio.fixture
async def api_client(report_store, photo_storage) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX AsyncClient configured against the FastAPI app with test overrides."""
    from fiscabot.main import app
    from fiscabot.core.rate_limiter import limiter
    from fiscabot.services.uploads import get_photo_storage
    from fiscabot.storage import get_store

    limiter.reset()
    app.dependency_overrides[get_store] = lambda: report_store
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_store, None)
        app.dependency_overrides.pop(get_photo_storage, None)
