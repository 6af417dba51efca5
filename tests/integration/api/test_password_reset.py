import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import PasswordReset, SessionRevocation
from tests.utils.auth_headers import bearer

NEW_PASSWORD = "FreshStart789!"


async def request_reset(client: AsyncClient, email: str):
    return await client.post("/auth/members/password-reset/request", json={"email": email})


@pytest.mark.asyncio
async def test_reset_flow(client: AsyncClient, db_session, notifier, member_tokens, test_data):
    member = test_data.get_copy("member")
    other_device = (await client.post("/auth/members/login", json=member)).json()

    requested = await request_reset(client, member["email"])
    assert requested.status_code == 202

    token = notifier.last_reset_token(member["email"])
    response = await client.post(
        "/auth/members/password-reset/confirm",
        json={"token": token, "new_password": NEW_PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["revoked_sessions_count"] == 2

    # Every session is gone, including the one that was never used here
    for body in (member_tokens, other_device):
        refreshed = await client.post(
            "/auth/refresh", json={"refresh_token": body["token"]["refresh"]}
        )
        assert refreshed.status_code == 401

    revocations = (
        await db_session.exec(
            select(SessionRevocation).where(SessionRevocation.reason == "password_reset")
        )
    ).all()
    assert {r.revoked_by for r in revocations} == {"system"}
    assert len(revocations) == 2

    old_login = await client.post("/auth/members/login", json=member)
    new_login = await client.post(
        "/auth/members/login", json={"email": member["email"], "password": NEW_PASSWORD}
    )
    assert old_login.status_code == 401
    assert new_login.status_code == 200


@pytest.mark.asyncio
async def test_reset_token_works_once(client: AsyncClient, notifier, member_tokens, test_data):
    email = test_data.get("member")["email"]
    await request_reset(client, email)
    token = notifier.last_reset_token(email)
    payload = {"token": token, "new_password": NEW_PASSWORD}

    first = await client.post("/auth/members/password-reset/confirm", json=payload)
    second = await client.post("/auth/members/password-reset/confirm", json=payload)

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["error"]["code"] == "INVALID_RESET_TOKEN"


@pytest.mark.asyncio
async def test_unknown_email_gets_same_acknowledgment(
    client: AsyncClient, db_session, notifier, member_tokens, test_data
):
    known = await request_reset(client, test_data.get("member")["email"])
    unknown = await request_reset(client, "ghost@todo.app")

    assert unknown.status_code == known.status_code == 202
    assert unknown.json()["message"] == known.json()["message"]
    assert [email for email, _ in notifier.password_resets] == [test_data.get("member")["email"]]

    rows = (await db_session.exec(select(PasswordReset))).all()
    assert len(rows) == 2
    assert all(row.token_hash.startswith("$2") for row in rows)


@pytest.mark.asyncio
async def test_member_token_cannot_reset_admin(
    client: AsyncClient, notifier, member_tokens, test_data
):
    email = test_data.get("member")["email"]
    await request_reset(client, email)

    response = await client.post(
        "/auth/admins/password-reset/confirm",
        json={"token": notifier.last_reset_token(email), "new_password": NEW_PASSWORD},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_RESET_TOKEN"


@pytest.mark.asyncio
async def test_confirm_enforces_password_policy(
    client: AsyncClient, notifier, member_tokens, test_data
):
    email = test_data.get("member")["email"]
    await request_reset(client, email)

    response = await client.post(
        "/auth/members/password-reset/confirm",
        json={"token": notifier.last_reset_token(email), "new_password": "short"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"
    # Token is still usable after a policy failure
    retry = await client.post(
        "/auth/members/password-reset/confirm",
        json={"token": notifier.last_reset_token(email), "new_password": NEW_PASSWORD},
    )
    assert retry.status_code == 200


@pytest.mark.asyncio
async def test_current_access_token_cannot_revoke_after_reset(
    client: AsyncClient, notifier, member_tokens, test_data
):
    email = test_data.get("member")["email"]
    await request_reset(client, email)
    await client.post(
        "/auth/members/password-reset/confirm",
        json={"token": notifier.last_reset_token(email), "new_password": NEW_PASSWORD},
    )

    response = await client.post("/auth/sessions/revoke-others", headers=bearer(member_tokens))

    assert response.status_code == 404
