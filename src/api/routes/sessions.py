"""
Session Management API Routes

Logout, revoke-others and session listing for the authenticated caller.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.repositories.session_repository import SessionFilter
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import AuthContext
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sessions import (
    ListSessionsUseCase,
    LogoutResponse,
    LogoutUseCase,
    RevokeOtherSessionsUseCase,
    RevokeOthersResponse,
    SessionListResponse,
)
from src.depends import (
    get_current_principal,
    get_secret_hasher,
    get_session_policy,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Sessions"])


class RevokeRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=255, description="Why the session ends")


class RevokeOthersRequest(RevokeRequest):
    include_current: bool = Field(False, description="Revoke the calling session as well")
    ip: Optional[str] = Field(None, max_length=64, description="Only sessions from this IP")
    user_agent: Optional[str] = Field(
        None, max_length=512, description="Only sessions whose user agent contains this"
    )
    issued_before: Optional[datetime] = Field(None, description="Only sessions created earlier")
    expires_before: Optional[datetime] = Field(None, description="Only sessions expiring earlier")

    def criteria(self) -> SessionFilter:
        return SessionFilter(
            ip=self.ip,
            user_agent=self.user_agent,
            issued_before=self.issued_before,
            expires_before=self.expires_before,
        )


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: Optional[RevokeRequest] = None,
    auth: AuthContext = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
):
    """
    Logout - revoke the caller's current session

    Idempotent: logging out an already revoked session returns the original
    revocation.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
        - 404 Not Found: Caller has no session to revoke
    """
    reason = request.reason if request else None
    result = await LogoutUseCase(uow, hasher, policy).execute(auth, reason=reason)

    if result.is_err():
        error = result.error
        if error.code == "SESSION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post(
    "/sessions/revoke-others",
    status_code=status.HTTP_200_OK,
    response_model=RevokeOthersResponse,
)
async def revoke_other_sessions(
    request: Optional[RevokeOthersRequest] = None,
    auth: AuthContext = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    policy: SessionPolicy = Depends(get_session_policy),
):
    """
    Revoke active sessions of the caller

    The session named by the access token stays active unless
    include_current is set. ip, user_agent (substring), issued_before and
    expires_before narrow the sessions that are revoked.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
        - 404 Not Found: Current session does not belong to the caller or
          is no longer active
    """
    request = request or RevokeOthersRequest()
    result = await RevokeOtherSessionsUseCase(uow, hasher, policy).execute(
        auth,
        reason=request.reason,
        criteria=request.criteria(),
        include_current=request.include_current,
    )

    if result.is_err():
        error = result.error
        if error.code == "SESSION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get("/sessions", status_code=status.HTTP_200_OK, response_model=SessionListResponse)
async def list_sessions(
    include_inactive: bool = Query(False, description="Include revoked and expired sessions"),
    auth: AuthContext = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListSessionsUseCase(uow).execute(auth, include_inactive=include_inactive)
    if result.is_err():
        raise ServerError(result.error)
    return result.value
