from httpx import AsyncClient
import pytest

from core.exceptions import NotFoundError, StoreError, ValidationError


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_posts_store_error_is_500(unit_client: AsyncClient, monkeypatch):
    async def mock_list_posts(*args, **kwargs):
        raise StoreError("Database failure")

    monkeypatch.setattr("services.post_service.list_posts", mock_list_posts)

    response = await unit_client.get("/posts")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Database failure"
    assert body["error"]["type"] == "StoreError"
    assert "timestamp" in body


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_post_not_found(unit_client: AsyncClient, monkeypatch):
    async def mock_get_post(*args, **kwargs):
        raise NotFoundError("Post with id abc not found")

    monkeypatch.setattr("services.post_service.get_post", mock_get_post)

    response = await unit_client.get("/posts/abc")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_post_service_validation_error(unit_client: AsyncClient, monkeypatch):
    async def mock_create_post(*args, **kwargs):
        raise ValidationError("Failed to create post")

    monkeypatch.setattr("services.post_service.create_post", mock_create_post)

    response = await unit_client.post("/posts", json={"author": "A", "title": "T", "content": "C"})

    assert response.status_code == 400


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_post_schema_error_is_400(unit_client: AsyncClient):
    response = await unit_client.post("/posts", json={"title": "T", "content": "C"})

    assert response.status_code == 400
    details = response.json()["error"]["details"]
    assert any(d["loc"][-1] == "author" for d in details)


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_post_not_found(unit_client: AsyncClient, monkeypatch):
    async def mock_update_post(*args, **kwargs):
        raise NotFoundError("Post with id abc not found")

    monkeypatch.setattr("services.post_service.update_post", mock_update_post)

    response = await unit_client.put("/posts/abc", json={"title": "T"})

    assert response.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_delete_post_success_has_empty_body(unit_client: AsyncClient, monkeypatch):
    async def mock_delete_post(*args, **kwargs):
        return None

    monkeypatch.setattr("services.post_service.delete_post", mock_delete_post)

    response = await unit_client.delete("/posts/abc")

    assert response.status_code == 204
    assert response.content == b""
