"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional

from pydantic import BaseModel

from src.app.services.session_lifecycle import ClientContext, IssuedSession
from src.domain.base import isoformat_z
from src.domain.entities import PrincipalKind


# ============================================================================
# Command DTOs
# ============================================================================


class JoinCommand(BaseModel):
    """Register a member or admin with email/password credentials"""

    kind: PrincipalKind
    email: str
    password: str
    client: ClientContext = ClientContext()


class GuestJoinCommand(BaseModel):
    nickname: Optional[str] = None
    client: ClientContext = ClientContext()


class LoginCommand(BaseModel):
    kind: PrincipalKind
    email: str
    password: str
    keep_me_signed_in: bool = False
    client: ClientContext = ClientContext()


# ============================================================================
# Response DTOs
# ============================================================================


class TokenInfo(BaseModel):
    """Issued token pair with expirations (ISO 8601 UTC)"""

    access: str
    refresh: str
    expired_at: str
    refreshable_until: str


class AuthorizedPrincipal(BaseModel):
    """Response for join, login and refresh"""

    id: str
    role: str
    email: Optional[str] = None
    nickname: Optional[str] = None
    status: Optional[str] = None
    email_verified: Optional[bool] = None
    created_at: Optional[str] = None
    session_id: str
    token: TokenInfo


def to_authorized_principal(issued: IssuedSession, principal=None) -> AuthorizedPrincipal:
    """Build the response from an issued session and the principal row (if any)"""
    tokens = issued.tokens
    subject = issued.owner.principal_id or issued.session_id
    return AuthorizedPrincipal(
        id=str(subject),
        role=issued.owner.kind.value,
        email=getattr(principal, "email", None),
        nickname=getattr(principal, "nickname", None),
        status=principal.status.value if principal is not None else None,
        email_verified=getattr(principal, "email_verified", None),
        created_at=isoformat_z(principal.created_at) if principal is not None else None,
        session_id=str(issued.session_id),
        token=TokenInfo(
            access=tokens.access,
            refresh=tokens.refresh,
            expired_at=isoformat_z(tokens.expired_at),
            refreshable_until=isoformat_z(tokens.refreshable_until),
        ),
    )


class PasswordResetRequested(BaseModel):
    """Acknowledgment that does not reveal whether the account exists"""

    email: str
    requested_at: str
    expires_at: str
    message: str


class PasswordResetConfirmed(BaseModel):
    success: bool
    changed_at: str
    revoked_sessions_count: int
    message: str


class EmailVerificationRequested(BaseModel):
    email: str
    message: str


class EmailVerified(BaseModel):
    id: str
    role: str
    email: str
    email_verified: bool
    verified_at: str
    message: str
