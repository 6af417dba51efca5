import pytest
from httpx import AsyncClient

from tests.utils.auth_headers import bearer

NEW_PASSWORD = "BrandNewPass42!"


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, member_tokens, test_data):
    payload = test_data.get_copy("member")
    other_device = (await client.post("/auth/members/login", json=payload)).json()

    response = await client.put(
        "/auth/password",
        json={"current_password": payload["password"], "new_password": NEW_PASSWORD},
        headers=bearer(member_tokens),
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["revoked_sessions_count"] == 1

    old_login = await client.post("/auth/members/login", json=payload)
    new_login = await client.post(
        "/auth/members/login", json={"email": payload["email"], "password": NEW_PASSWORD}
    )
    assert old_login.status_code == 401
    assert new_login.status_code == 200

    stale = await client.post(
        "/auth/refresh", json={"refresh_token": other_device["token"]["refresh"]}
    )
    current = await client.post(
        "/auth/refresh", json={"refresh_token": member_tokens["token"]["refresh"]}
    )
    assert stale.status_code == 401
    assert current.status_code == 200


@pytest.mark.asyncio
async def test_wrong_current_password(client: AsyncClient, member_tokens):
    response = await client.put(
        "/auth/password",
        json={"current_password": "NotMyPassword1!", "new_password": NEW_PASSWORD},
        headers=bearer(member_tokens),
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_new_password_too_short(client: AsyncClient, member_tokens, test_data):
    response = await client.put(
        "/auth/password",
        json={"current_password": test_data.get("member")["password"], "new_password": "short"},
        headers=bearer(member_tokens),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"


@pytest.mark.asyncio
async def test_guest_cannot_change_password(client: AsyncClient, test_data):
    guest = (await client.post("/auth/guests/join", json=test_data.get_copy("guest"))).json()

    response = await client.put(
        "/auth/password",
        json={"current_password": "whatever1", "new_password": NEW_PASSWORD},
        headers=bearer(guest),
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"
