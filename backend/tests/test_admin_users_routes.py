"""Tests for the /admin/users HTTP surface.

The per-request AdminUserAPI is replaced with one wired to in-memory fakes;
these tests cover routing, status codes and the error envelope.
"""
import uuid

import pytest
from httpx import AsyncClient, ASGITransport

from cms_admin.core.deps import get_admin_user_api
from cms_admin.main import app
from conftest import make_user


@pytest.fixture
def client_api(api):
    async def _override():
        return api

    app.dependency_overrides[get_admin_user_api] = _override
    yield api
    app.dependency_overrides.clear()


def http_client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_post_users_returns_201(client_api):
    async with http_client() as client:
        response = await client.post(
            "/admin/users",
            json={
                "firstname": "Ada",
                "lastname": "Lovelace",
                "email": "ada@example.com",
                "roles": [1],
                "countries": ["GB"],
            },
        )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "ada@example.com"
    assert data["countries"] == []
    assert "registrationToken" not in data
    assert "password" not in data


@pytest.mark.asyncio
async def test_post_users_invalid_body_returns_400_envelope(client_api):
    async with http_client() as client:
        response = await client.post("/admin/users", json={"email": "ada@example.com"})

    assert response.status_code == 400
    body = response.json()
    assert body["statusCode"] == 400
    assert body["error"] == "Bad Request"
    assert body["message"] == "ValidationError"
    assert "firstname" in body["data"]


@pytest.mark.asyncio
async def test_post_users_non_object_body_returns_400(client_api):
    async with http_client() as client:
        response = await client.post("/admin/users", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["message"] == "ValidationError"


@pytest.mark.asyncio
async def test_post_users_duplicate_email_returns_400(client_api, store):
    existing = make_user(email="ada@example.com")
    store.users[existing.id] = existing

    async with http_client() as client:
        response = await client.post(
            "/admin/users",
            json={"firstname": "Ada", "lastname": "L", "email": "ada@example.com", "roles": [2]},
        )

    assert response.status_code == 400
    assert response.json()["message"] == "Email already taken"


@pytest.mark.asyncio
async def test_get_users_lists_results_and_pagination(client_api, store):
    jane = make_user()
    store.users[jane.id] = jane

    async with http_client() as client:
        response = await client.get("/admin/users", params={"page": 1, "pageSize": 10})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [u["email"] for u in data["results"]] == [jane.email]
    assert data["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_get_user_unknown_id_returns_404(client_api):
    async with http_client() as client:
        response = await client.get(f"/admin/users/{uuid.uuid4()}")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Not Found"
    assert body["message"] == "User does not exist"


@pytest.mark.asyncio
async def test_get_user_malformed_id_returns_404(client_api):
    async with http_client() as client:
        response = await client.get("/admin/users/not-a-uuid")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_put_user_updates_fields(client_api, store):
    jane = make_user()
    store.users[jane.id] = jane

    async with http_client() as client:
        response = await client.put(f"/admin/users/{jane.id}", json={"isActive": True, "username": "jd"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isActive"] is True
    assert data["username"] == "jd"
    assert data["countries"] == ["FR", "DE"]


@pytest.mark.asyncio
async def test_delete_user_then_404(client_api, store):
    jane = make_user()
    store.users[jane.id] = jane

    async with http_client() as client:
        first = await client.delete(f"/admin/users/{jane.id}")
        second = await client.delete(f"/admin/users/{jane.id}")

    assert first.status_code == 200
    assert first.json()["data"]["id"] == str(jane.id)
    assert second.status_code == 404
    assert second.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_batch_delete_returns_deleted_users(client_api, store):
    jane = make_user()
    store.users[jane.id] = jane

    async with http_client() as client:
        response = await client.post(
            "/admin/users/batch-delete",
            json={"ids": [str(jane.id), str(uuid.uuid4())]},
        )

    assert response.status_code == 200
    assert [u["id"] for u in response.json()["data"]] == [str(jane.id)]


@pytest.mark.asyncio
async def test_batch_delete_malformed_ids_returns_400(client_api):
    async with http_client() as client:
        response = await client.post("/admin/users/batch-delete", json={"ids": "everyone"})

    assert response.status_code == 400
    assert "ids" in response.json()["data"]


@pytest.mark.asyncio
async def test_registration_link_success_and_unknown_email(client_api, store, mailer):
    jane = make_user()
    store.users[jane.id] = jane

    async with http_client() as client:
        sent = await client.post(
            "/admin/users/registration-link",
            json={"email": jane.email, "link": "https://cms.example.com/register?token="},
        )
        missing = await client.post(
            "/admin/users/registration-link",
            json={"email": "ghost@example.com", "link": "https://cms.example.com/register?token="},
        )

    assert sent.status_code == 200
    assert sent.json() == {"message": "success"}
    assert missing.status_code == 204
    assert missing.content == b""
    assert len(mailer.sent) == 1


@pytest.mark.asyncio
async def test_registration_link_malformed_body_returns_empty_204(client_api, mailer):
    async with http_client() as client:
        response = await client.post("/admin/users/registration-link", json={"email": "nope"})

    assert response.status_code == 204
    assert response.content == b""
    assert mailer.sent == []
