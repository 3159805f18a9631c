"""
Tests for serving uploaded photos.
"""

import json

import pytest

from fiscabot.storage.local import JsonFileStore


def _stored_rows(store: JsonFileStore) -> list:
    return json.loads(store.path.read_text(encoding="utf-8"))


@pytest.mark.asyncio
async def test_submitted_photo_is_served(api_client, report_store, valid_fields):
    content = b"\xff\xd8\xff\xe0fake-jpeg-bytes"
    submitted = await api_client.post(
        "/api/report",
        data=valid_fields,
        files=[("fotos", ("placa.jpg", content, "image/jpeg"))],
    )
    assert submitted.status_code == 200
    (photo_path,) = _stored_rows(report_store)[0]["fotos"]

    response = await api_client.get(photo_path)

    assert response.status_code == 200
    assert response.content == content
    assert response.headers["content-type"] == "image/jpeg"


@pytest.mark.asyncio
async def test_uploads_are_read_only(api_client, photo_storage):
    photo_storage.directory.mkdir(parents=True, exist_ok=True)
    (photo_storage.directory / "existing.png").write_bytes(b"png")

    assert (await api_client.get("/uploads/existing.png")).content == b"png"
    assert (await api_client.post("/uploads/existing.png", content=b"x")).status_code == 405
    assert (await api_client.delete("/uploads/existing.png")).status_code == 405
    assert (photo_storage.directory / "existing.png").read_bytes() == b"png"


@pytest.mark.asyncio
async def test_unknown_photo_returns_404(api_client, photo_storage):
    response = await api_client.get("/uploads/missing.jpg")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_dotfiles_are_not_served(api_client, photo_storage):
    photo_storage.directory.mkdir(parents=True, exist_ok=True)
    (photo_storage.directory / ".env").write_text("SUPABASE_KEY=secret")

    response = await api_client.get("/uploads/.env")

    assert response.status_code == 404
    assert "secret" not in response.text


@pytest.mark.asyncio
async def test_oversized_photo_rejected_and_nothing_stored(api_client, report_store, photo_storage, valid_fields):
    photo_storage.max_bytes = 16
    response = await api_client.post(
        "/api/report",
        data=valid_fields,
        files=[
            ("fotos", ("a.jpg", b"small", "image/jpeg")),
            ("fotos", ("b.jpg", b"x" * 64, "image/jpeg")),
        ],
    )

    assert response.status_code == 400
    assert response.json()["ok"] is False
    assert "b.jpg" in response.json()["error"]
    assert list(photo_storage.directory.iterdir()) == []
    assert _stored_rows(report_store) == []
