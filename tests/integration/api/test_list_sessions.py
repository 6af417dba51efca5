import pytest
from httpx import AsyncClient

from tests.utils.auth_headers import bearer


@pytest.mark.asyncio
async def test_list_own_sessions(client: AsyncClient, member_tokens, test_data):
    await client.post("/auth/members/login", json=test_data.get_copy("member"))

    response = await client.get("/auth/sessions", headers=bearer(member_tokens))

    assert response.status_code == 200
    sessions = response.json()["sessions"]
    assert len(sessions) == 2
    current = [s for s in sessions if s["current"]]
    assert [s["id"] for s in current] == [member_tokens["session_id"]]
    assert all("token" not in s and "session_token_hash" not in s for s in sessions)


@pytest.mark.asyncio
async def test_list_hides_revoked_unless_asked(client: AsyncClient, member_tokens, test_data):
    await client.post("/auth/members/login", json=test_data.get_copy("member"))
    await client.post("/auth/sessions/revoke-others", headers=bearer(member_tokens))

    active = await client.get("/auth/sessions", headers=bearer(member_tokens))
    everything = await client.get(
        "/auth/sessions", params={"include_inactive": True}, headers=bearer(member_tokens)
    )

    assert len(active.json()["sessions"]) == 1
    assert len(everything.json()["sessions"]) == 2
    revoked = [s for s in everything.json()["sessions"] if s["revoked_at"]]
    assert revoked[0]["revoked_reason"] == "revoke_others"
