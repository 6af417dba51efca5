import pytest
import pytest_asyncio
from httpx import AsyncClient

from tests.utils.auth_headers import bearer


@pytest_asyncio.fixture
async def admin_tokens(client: AsyncClient, test_data):
    response = await client.post(
        "/auth/admins/join",
        json=test_data.get_copy("admin"),
        headers={"X-Admin-API-Key": test_data.get("admin_api_key")},
    )
    return response.json()


@pytest.mark.asyncio
async def test_admin_lists_events(client: AsyncClient, member_tokens, admin_tokens):
    await client.post("/auth/refresh", json={"refresh_token": member_tokens["token"]["refresh"]})

    response = await client.get("/audit/events", headers=bearer(admin_tokens))

    assert response.status_code == 200
    events = response.json()["events"]
    # Newest first: member refresh, admin join, member join
    assert [e["action"] for e in events] == ["token_refresh", "join", "join"]
    assert events[0]["actor_id"] == member_tokens["id"]
    assert events[1]["actor_kind"] == "admin"
    assert events[2]["actor_kind"] == "member"
    assert response.json()["next_cursor"] is None


@pytest.mark.asyncio
async def test_pagination_and_action_filter(client: AsyncClient, member_tokens, admin_tokens):
    first_page = await client.get(
        "/audit/events", params={"limit": 1}, headers=bearer(admin_tokens)
    )
    assert len(first_page.json()["events"]) == 1
    cursor = first_page.json()["next_cursor"]
    assert cursor

    second_page = await client.get(
        "/audit/events", params={"limit": 1, "cursor": cursor}, headers=bearer(admin_tokens)
    )
    assert second_page.json()["events"][0]["actor_kind"] == "member"

    filtered = await client.get(
        "/audit/events", params={"action": "login"}, headers=bearer(admin_tokens)
    )
    assert filtered.json()["events"] == []


@pytest.mark.asyncio
async def test_members_cannot_read_audit_events(client: AsyncClient, member_tokens):
    response = await client.get("/audit/events", headers=bearer(member_tokens))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"
