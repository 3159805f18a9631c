"""
Tests for health and QR endpoints.
"""

import pytest

from fiscabot.core.errors import PersistenceFailure
from fiscabot.main import app
from fiscabot.storage import get_store
from fiscabot.storage.local import JsonFileStore


@pytest.mark.asyncio
async def test_health_endpoint(api_client):
    response = await api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "fiscabot"}


@pytest.mark.asyncio
async def test_ping_endpoint(api_client):
    response = await api_client.get("/ping")
    assert response.status_code == 200
    assert response.text == "pong"


@pytest.mark.asyncio
async def test_liveness_endpoint(api_client):
    response = await api_client.get("/api/health/liveness")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


@pytest.mark.asyncio
async def test_readiness_healthy(api_client):
    response = await api_client.get("/api/health/readiness")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["checks"]["storage"] == {"status": "pass", "backend": "local"}


@pytest.mark.asyncio
async def test_readiness_storage_failure(api_client, tmp_path):
    class BrokenStore(JsonFileStore):
        async def healthcheck(self):
            raise PersistenceFailure(details="permission denied")

    app.dependency_overrides[get_store] = lambda: BrokenStore(tmp_path / "x.json")

    response = await api_client.get("/api/health/readiness")

    assert response.status_code == 503
    payload = response.json()
    assert payload["status"] == "not_ready"
    assert payload["checks"]["storage"]["status"] == "fail"
    assert payload["checks"]["storage"]["reason"] == "permission denied"


@pytest.mark.asyncio
async def test_qrcode_defaults_to_site_root(api_client):
    response = await api_client.get("/qrcode")

    assert response.status_code == 200
    assert "Escaneie o QR" in response.text
    assert "data:image/png;base64," in response.text
    assert "http://testserver" in response.text


@pytest.mark.asyncio
async def test_qrcode_for_given_url(api_client):
    response = await api_client.get("/qrcode", params={"url": "https://example.org/x"})

    assert response.status_code == 200
    assert "https://example.org/x" in response.text


@pytest.mark.asyncio
async def test_qrcode_render_failure(api_client, monkeypatch):
    from fiscabot.core.errors import RenderFailure

    def _broken(_content):
        raise RenderFailure("boom")

    monkeypatch.setattr("fiscabot.api.routes.qrcode.qr_data_url", _broken)

    response = await api_client.get("/qrcode", params={"url": "https://example.org"})

    assert response.status_code == 500
    assert response.text == "Erro gerando QR"
