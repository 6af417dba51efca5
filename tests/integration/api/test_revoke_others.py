import pytest
from httpx import AsyncClient

from tests.utils.auth_headers import bearer


async def refresh(client: AsyncClient, body: dict):
    return await client.post("/auth/refresh", json={"refresh_token": body["token"]["refresh"]})


@pytest.mark.asyncio
async def test_two_devices(client: AsyncClient, member_tokens, test_data):
    """Revoking others from device X kills device Y but keeps X"""
    device_x = member_tokens
    device_y = (await client.post("/auth/members/login", json=test_data.get_copy("member"))).json()

    response = await client.post("/auth/sessions/revoke-others", headers=bearer(device_x))

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["revoked_sessions_count"] == 1
    assert data["revoked_session_ids"] == [device_y["session_id"]]

    assert (await refresh(client, device_y)).status_code == 401
    assert (await refresh(client, device_x)).status_code == 200


@pytest.mark.asyncio
async def test_other_principals_are_untouched(client: AsyncClient, member_tokens, test_data):
    other = (
        await client.post("/auth/members/join", json=test_data.get_copy("second_member"))
    ).json()

    response = await client.post("/auth/sessions/revoke-others", headers=bearer(member_tokens))

    assert response.json()["revoked_sessions_count"] == 0
    assert (await refresh(client, other)).status_code == 200


@pytest.mark.asyncio
async def test_revoke_others_twice(client: AsyncClient, member_tokens, test_data):
    await client.post("/auth/members/login", json=test_data.get_copy("member"))

    first = await client.post("/auth/sessions/revoke-others", headers=bearer(member_tokens))
    second = await client.post("/auth/sessions/revoke-others", headers=bearer(member_tokens))

    assert first.json()["revoked_sessions_count"] == 1
    assert second.status_code == 200
    assert second.json()["revoked_sessions_count"] == 0


@pytest.mark.asyncio
async def test_user_agent_filter(client: AsyncClient, member_tokens, test_data):
    member = test_data.get_copy("member")
    firefox = (
        await client.post(
            "/auth/members/login", json=member, headers={"User-Agent": "Mozilla/5.0 Firefox/128.0"}
        )
    ).json()
    curl = (
        await client.post("/auth/members/login", json=member, headers={"User-Agent": "curl/8.5"})
    ).json()

    response = await client.post(
        "/auth/sessions/revoke-others",
        json={"user_agent": "Firefox"},
        headers=bearer(member_tokens),
    )

    assert response.json()["revoked_session_ids"] == [firefox["session_id"]]
    assert (await refresh(client, curl)).status_code == 200


@pytest.mark.asyncio
async def test_ip_filter_without_match(client: AsyncClient, member_tokens, test_data):
    await client.post("/auth/members/login", json=test_data.get_copy("member"))

    response = await client.post(
        "/auth/sessions/revoke-others",
        json={"ip": "203.0.113.9"},
        headers=bearer(member_tokens),
    )

    assert response.status_code == 200
    assert response.json()["revoked_sessions_count"] == 0


@pytest.mark.asyncio
async def test_issued_before_filter(client: AsyncClient, member_tokens, test_data):
    await client.post("/auth/members/login", json=test_data.get_copy("member"))

    response = await client.post(
        "/auth/sessions/revoke-others",
        json={"issued_before": "2000-01-01T00:00:00Z"},
        headers=bearer(member_tokens),
    )

    assert response.json()["revoked_sessions_count"] == 0


@pytest.mark.asyncio
async def test_include_current(client: AsyncClient, member_tokens, test_data):
    other = (await client.post("/auth/members/login", json=test_data.get_copy("member"))).json()

    response = await client.post(
        "/auth/sessions/revoke-others",
        json={"include_current": True},
        headers=bearer(member_tokens),
    )

    assert set(response.json()["revoked_session_ids"]) == {
        member_tokens["session_id"],
        other["session_id"],
    }
    assert (await refresh(client, member_tokens)).status_code == 401
    assert (await refresh(client, other)).status_code == 401


@pytest.mark.asyncio
async def test_logged_out_token_cannot_revoke_siblings(
    client: AsyncClient, member_tokens, test_data
):
    other = (await client.post("/auth/members/login", json=test_data.get_copy("member"))).json()
    await client.post("/auth/logout", headers=bearer(member_tokens))

    response = await client.post("/auth/sessions/revoke-others", headers=bearer(member_tokens))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"
    assert (await refresh(client, other)).status_code == 200
