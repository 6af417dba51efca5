from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.session_lifecycle import ClientContext
from src.app.use_cases.auth import LoginCommand, LoginUseCase
from src.domain.entities import (
    Admin,
    LoginFailureReason,
    Member,
    PrincipalKind,
    PrincipalStatus,
)

PASSWORD = "SecurePass123!"


@pytest.fixture
def member(hasher):
    return Member(id=uuid4(), email="user@todo.app", password_hash=hasher.hash(PASSWORD))


def login(email="user@todo.app", password=PASSWORD, kind=PrincipalKind.member, **kwargs):
    return LoginCommand(kind=kind, email=email, password=password, **kwargs)


@pytest.mark.asyncio
async def test_successful_login(mock_uow, hasher, policy, member):
    mock_uow.members.get_by_email.return_value = member

    result = await LoginUseCase(mock_uow, hasher, policy).execute(
        login(client=ClientContext(ip="127.0.0.1", user_agent="pytest"))
    )

    assert result.is_ok()
    response = result.value
    assert response.id == str(member.id)
    assert response.role == "member"
    assert response.email == "user@todo.app"
    assert response.status == "active"
    assert response.token.access
    assert response.token.refresh
    assert response.token.expired_at.endswith("Z")

    session = mock_uow.sessions.create.call_args.args[0]
    assert session.member_id == member.id
    assert session.ip == "127.0.0.1"
    assert response.session_id == str(session.id)

    attempt = mock_uow.login_attempts.create.call_args.args[0]
    assert attempt.success is True
    assert attempt.principal_id == member.id
    assert attempt.failure_reason is None

    audit = mock_uow.audit_events.create.call_args.args[0]
    assert audit.action == "login"
    assert member.last_login_at is not None
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_admin_login_reads_admin_table(mock_uow, hasher, policy):
    admin = Admin(id=uuid4(), email="root@todo.app", password_hash=hasher.hash(PASSWORD))
    mock_uow.admins.get_by_email.return_value = admin

    result = await LoginUseCase(mock_uow, hasher, policy).execute(
        login(email="root@todo.app", kind=PrincipalKind.admin)
    )

    assert result.value.role == "admin"
    mock_uow.members.get_by_email.assert_not_awaited()
    assert mock_uow.sessions.create.call_args.args[0].admin_id == admin.id


@pytest.mark.asyncio
async def test_unknown_email_and_wrong_password_are_indistinguishable(
    mock_uow, hasher, policy, member
):
    use_case = LoginUseCase(mock_uow, hasher, policy)

    mock_uow.members.get_by_email.return_value = None
    unknown = await use_case.execute(login(email="nobody@todo.app"))

    mock_uow.members.get_by_email.return_value = member
    wrong = await use_case.execute(login(password="WrongPass123!"))

    assert unknown.error == wrong.error
    assert unknown.error.code == "INVALID_CREDENTIALS"
    mock_uow.sessions.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_attempt_is_recorded_and_committed(mock_uow, hasher, policy, member):
    mock_uow.members.get_by_email.return_value = member

    await LoginUseCase(mock_uow, hasher, policy).execute(login(password="WrongPass123!"))

    attempt = mock_uow.login_attempts.create.call_args.args[0]
    assert attempt.success is False
    assert attempt.failure_reason == LoginFailureReason.invalid_credentials
    assert attempt.email == "user@todo.app"
    mock_uow.commit.assert_awaited_once()
    mock_uow.audit_events.create.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [PrincipalStatus.suspended, PrincipalStatus.deleted])
async def test_unusable_account_cannot_login(mock_uow, hasher, policy, member, status):
    member.status = status
    mock_uow.members.get_by_email.return_value = member

    result = await LoginUseCase(mock_uow, hasher, policy).execute(login())

    assert result.error.code == "ACCOUNT_UNUSABLE"
    mock_uow.sessions.create.assert_not_awaited()
    attempt = mock_uow.login_attempts.create.call_args.args[0]
    assert attempt.failure_reason == LoginFailureReason.account_unusable


@pytest.mark.asyncio
async def test_unusable_account_with_wrong_password_reveals_nothing(
    mock_uow, hasher, policy, member
):
    member.status = PrincipalStatus.suspended
    mock_uow.members.get_by_email.return_value = member

    result = await LoginUseCase(mock_uow, hasher, policy).execute(login(password="nope-nope"))

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_keep_me_signed_in_extends_refresh_window(mock_uow, hasher, policy, member):
    mock_uow.members.get_by_email.return_value = member

    await LoginUseCase(mock_uow, hasher, policy).execute(login(keep_me_signed_in=True))

    session = mock_uow.sessions.create.call_args.args[0]
    assert session.refresh_window_seconds == int(timedelta(days=30).total_seconds())


@pytest.mark.asyncio
async def test_guests_cannot_login_with_password(mock_uow, hasher, policy):
    result = await LoginUseCase(mock_uow, hasher, policy).execute(login(kind=PrincipalKind.guest))

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.__aenter__.assert_not_awaited()
