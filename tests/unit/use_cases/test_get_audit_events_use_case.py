from uuid import uuid4

import pytest

from src.app.services.session_lifecycle import AuthContext
from src.app.use_cases.audit import GetAuditEventsUseCase
from src.domain.entities import Admin, AuditEvent, PrincipalKind, PrincipalStatus


@pytest.fixture
def admin():
    return Admin(id=uuid4(), email="root@todo.app", password_hash="x")


def admin_auth(admin):
    return AuthContext(principal_id=admin.id, role=PrincipalKind.admin, session_id=uuid4())


@pytest.mark.asyncio
async def test_admin_reads_events(mock_uow, admin):
    member_id = uuid4()
    event = AuditEvent(
        actor_kind=PrincipalKind.member,
        actor_id=member_id,
        action="login",
        event_metadata={"email": "user@todo.app"},
    )
    mock_uow.admins.get_by_id.return_value = admin
    mock_uow.audit_events.get_paginated.return_value = ([event], "next-page")

    result = await GetAuditEventsUseCase(mock_uow).execute(admin_auth(admin), limit=1)

    payload = result.value
    assert payload["next_cursor"] == "next-page"
    assert payload["events"][0]["action"] == "login"
    assert payload["events"][0]["actor_kind"] == "member"
    assert payload["events"][0]["actor_id"] == str(member_id)
    assert payload["events"][0]["timestamp"].endswith("Z")
    mock_uow.audit_events.get_paginated.assert_awaited_once_with(
        limit=1, cursor=None, action=None
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [PrincipalKind.member, PrincipalKind.guest])
async def test_non_admins_are_rejected(mock_uow, role):
    auth = AuthContext(principal_id=uuid4(), role=role, session_id=uuid4())

    result = await GetAuditEventsUseCase(mock_uow).execute(auth)

    assert result.error.code == "INSUFFICIENT_ROLE"
    mock_uow.audit_events.get_paginated.assert_not_awaited()


@pytest.mark.asyncio
async def test_suspended_admin_is_rejected(mock_uow, admin):
    admin.status = PrincipalStatus.suspended
    mock_uow.admins.get_by_id.return_value = admin

    result = await GetAuditEventsUseCase(mock_uow).execute(admin_auth(admin))

    assert result.error.code == "ACCOUNT_UNUSABLE"
