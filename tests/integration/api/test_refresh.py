from datetime import timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.base import utcnow
from src.domain.entities import AuditEvent, Member, PrincipalStatus, Session


async def refresh(client: AsyncClient, token: str):
    return await client.post("/auth/refresh", json={"refresh_token": token})


async def load_session(db_session, session_id: str) -> Session:
    return (
        await db_session.execute(select(Session).where(Session.id == UUID(session_id)))
    ).scalar_one()


@pytest.mark.asyncio
async def test_rotation_chain(client: AsyncClient, member_tokens):
    """join -> R1; R1 -> R2; R1 again fails; R2 -> R3"""
    a1 = member_tokens["token"]["access"]
    r1 = member_tokens["token"]["refresh"]

    second = await refresh(client, r1)
    assert second.status_code == 200
    a2 = second.json()["token"]["access"]
    r2 = second.json()["token"]["refresh"]
    assert a2 != a1
    assert r2 != r1
    assert second.json()["session_id"] == member_tokens["session_id"]
    assert second.json()["email"] == member_tokens["email"]

    replay = await refresh(client, r1)
    assert replay.status_code == 401
    assert replay.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"

    third = await refresh(client, r2)
    assert third.status_code == 200
    assert third.json()["token"]["refresh"] != r2


@pytest.mark.asyncio
async def test_rotation_updates_session_row(client: AsyncClient, db_session, member_tokens):
    before = await load_session(db_session, member_tokens["session_id"])
    old_hash = before.session_token_hash

    await refresh(client, member_tokens["token"]["refresh"])

    after = await load_session(db_session, member_tokens["session_id"])
    assert after.session_token_hash != old_hash
    assert after.rotated_at is not None
    events = (
        await db_session.execute(select(AuditEvent).where(AuditEvent.action == "token_refresh"))
    ).scalars().all()
    assert len(events) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "garbage", "abcdefghijkl.forged-verifier"])
async def test_unknown_or_malformed_token(client: AsyncClient, token):
    response = await refresh(client, token)

    assert response.status_code in (401, 422)
    if response.status_code == 401:
        assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"


@pytest.mark.asyncio
async def test_refresh_after_logout(client: AsyncClient, member_tokens):
    headers = {"Authorization": f"Bearer {member_tokens['token']['access']}"}
    await client.post("/auth/logout", headers=headers)

    response = await refresh(client, member_tokens["token"]["refresh"])

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"


@pytest.mark.asyncio
async def test_refresh_expired_session(client: AsyncClient, db_session, member_tokens):
    session = await load_session(db_session, member_tokens["session_id"])
    session.expires_at = utcnow() - timedelta(seconds=1)
    db_session.add(session)
    await db_session.commit()

    response = await refresh(client, member_tokens["token"]["refresh"])

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"


@pytest.mark.asyncio
async def test_refresh_for_suspended_member(client: AsyncClient, db_session, member_tokens):
    member = (
        await db_session.execute(select(Member).where(Member.id == UUID(member_tokens["id"])))
    ).scalar_one()
    member.status = PrincipalStatus.suspended
    db_session.add(member)
    await db_session.commit()

    response = await refresh(client, member_tokens["token"]["refresh"])

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"


@pytest.mark.asyncio
async def test_guest_refresh(client: AsyncClient, test_data):
    joined = await client.post("/auth/guests/join", json=test_data.get_copy("guest"))

    response = await refresh(client, joined.json()["token"]["refresh"])

    assert response.status_code == 200
    assert response.json()["role"] == "guest"
    assert response.json()["nickname"] == "visitor"
