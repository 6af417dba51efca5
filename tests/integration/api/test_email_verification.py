import pytest
from httpx import AsyncClient


async def resend(client: AsyncClient, email: str, kind: str = "members"):
    return await client.post(f"/auth/{kind}/email/verify/resend", json={"email": email})


@pytest.mark.asyncio
async def test_verify_member_email(client: AsyncClient, notifier, member_tokens, test_data):
    member = test_data.get_copy("member")
    assert member_tokens["email_verified"] is False

    assert (await resend(client, member["email"])).status_code == 202
    response = await client.post(
        "/auth/members/email/verify",
        json={"token": notifier.last_verification_token(member["email"])},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["email_verified"] is True
    assert data["email"] == member["email"]

    login = await client.post("/auth/members/login", json=member)
    assert login.json()["email_verified"] is True


@pytest.mark.asyncio
async def test_verify_admin_email(client: AsyncClient, notifier, test_data):
    admin = test_data.get_copy("admin")
    joined = await client.post(
        "/auth/admins/join",
        json=admin,
        headers={"X-Admin-API-Key": test_data.get("admin_api_key")},
    )
    assert joined.status_code == 201

    await resend(client, admin["email"], kind="admins")
    response = await client.post(
        "/auth/admins/email/verify",
        json={"token": notifier.last_verification_token(admin["email"])},
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_verification_token_is_single_use(
    client: AsyncClient, notifier, member_tokens, test_data
):
    email = test_data.get("member")["email"]
    await resend(client, email)
    token = notifier.last_verification_token(email)

    first = await client.post("/auth/members/email/verify", json={"token": token})
    second = await client.post("/auth/members/email/verify", json={"token": token})

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["error"]["code"] == "INVALID_VERIFICATION_TOKEN"


@pytest.mark.asyncio
async def test_resend_is_silent_for_unknown_and_verified(
    client: AsyncClient, notifier, member_tokens, test_data
):
    email = test_data.get("member")["email"]
    await resend(client, email)
    await client.post(
        "/auth/members/email/verify", json={"token": notifier.last_verification_token(email)}
    )

    verified = await resend(client, email)
    unknown = await resend(client, "ghost@todo.app")

    assert verified.status_code == unknown.status_code == 202
    assert verified.json()["message"] == unknown.json()["message"]
    assert len(notifier.email_verifications) == 1


@pytest.mark.asyncio
async def test_garbage_token(client: AsyncClient):
    response = await client.post("/auth/members/email/verify", json={"token": "not-a-token"})

    assert response.status_code == 400
