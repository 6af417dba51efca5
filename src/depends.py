from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.bcrypt_hasher import BcryptSecretHasher
from src.adapter.services.log_notifier import LoggingTokenNotifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import unauthorized
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import (
    AuthContext,
    ClientContext,
    SessionLifecycleEngine,
)
from src.app.services.session_policy import SessionPolicy
from src.app.services.token_notifier import ITokenNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def _default_hasher() -> BcryptSecretHasher:
    return BcryptSecretHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)


def get_secret_hasher() -> ISecretHasher:
    return _default_hasher()


def get_session_policy() -> SessionPolicy:
    return SessionPolicy.from_config(ApplicationConfig)


def get_token_notifier() -> ITokenNotifier:
    return LoggingTokenNotifier()


def get_client_context(request: Request) -> ClientContext:
    return ClientContext(
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
) -> AuthContext:
    """
    Dependency to resolve the Bearer access token into the caller.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        AuthContext with principal id, role and session id

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise unauthorized(Error("UNAUTHORIZED", "Bearer token required"))

    async with uow:
        result = await SessionLifecycleEngine(uow, hasher, policy).authenticate(
            credentials.credentials
        )

    if result.is_err():
        raise unauthorized(result.error)

    return result.value
