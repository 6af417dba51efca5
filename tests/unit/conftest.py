import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.bcrypt_hasher import BcryptSecretHasher
from src.app.services.session_policy import SessionPolicy


def _repository(*methods):
    repo = MagicMock()
    for name in methods:
        setattr(repo, name, AsyncMock())
    return repo


async def _return_argument(obj):
    return obj


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.admins = _repository("get_by_email", "get_by_id", "create", "update")
    uow.members = _repository("get_by_email", "get_by_id", "create", "update")
    uow.guests = _repository("get_by_id", "create")
    uow.sessions = _repository(
        "create",
        "get_by_id",
        "find_candidates",
        "rotate_token",
        "mark_revoked",
        "list_by_owner",
        "get_latest_by_owner",
    )
    uow.session_revocations = _repository("get_by_session_id", "upsert")
    uow.login_attempts = _repository("create")
    uow.audit_events = _repository("create", "get_paginated")
    uow.password_resets = _repository("create", "find_candidates", "consume")
    uow.email_verifications = _repository("create", "find_candidates", "consume")

    # Repositories hand back what they were given
    for repo in (
        uow.admins,
        uow.members,
        uow.guests,
        uow.sessions,
        uow.password_resets,
        uow.email_verifications,
    ):
        repo.create.side_effect = _return_argument
    uow.admins.update.side_effect = _return_argument
    uow.members.update.side_effect = _return_argument

    return uow


@pytest.fixture(scope="session")
def hasher():
    # Minimum bcrypt cost keeps the suite fast
    return BcryptSecretHasher(rounds=4)


@pytest.fixture
def policy():
    return SessionPolicy(jwt_secret="unit-test-secret")
